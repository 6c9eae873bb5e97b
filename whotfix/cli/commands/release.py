from __future__ import annotations

import typer

from whotfix.cli.commands._helpers import exit_on_error
from whotfix.cli.context import build_context
from whotfix.services.release.model import BUILD_ONLY_FLAG, RunFlags
from whotfix.services.release.service import HotfixReleaseService


def release(
    build_only: bool = typer.Option(
        False,
        BUILD_ONLY_FLAG,
        help="Build and stage the package but do not publish it",
    ),
) -> None:
    """Build, stage and publish the next hotfix version of the package."""
    ctx = build_context()

    result = HotfixReleaseService(
        project=ctx.project,
        config=ctx.config,
        runner=ctx.runner,
        console=ctx.console,
        confirm=ctx.confirm,
    ).run(RunFlags(build_only=build_only))

    exit_on_error(result, ctx)
