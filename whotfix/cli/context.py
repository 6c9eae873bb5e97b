from __future__ import annotations

from dataclasses import dataclass

import typer

from whotfix.core.config import ReleaseConfig, load_release_config
from whotfix.core.errors import ErrorCode
from whotfix.core.project import Project, detect_project
from whotfix.core.result import Err
from whotfix.output.console import ConsoleProtocol, RichConsole
from whotfix.output.prompt import Confirm, prompt_confirm
from whotfix.platform.process import CommandRunner, SubprocessRunner


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    config: ReleaseConfig
    console: ConsoleProtocol
    runner: CommandRunner
    confirm: Confirm


def build_context() -> CLIContext:
    project = detect_project()

    config_result = load_release_config(project.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(
        project=project,
        config=config_result.value,
        console=RichConsole(),
        runner=SubprocessRunner(),
        confirm=prompt_confirm,
    )
