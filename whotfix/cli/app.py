from __future__ import annotations

import typer

from whotfix.cli.commands.release import release


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)

app.command()(release)


def main() -> None:
    app()
