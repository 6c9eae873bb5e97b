"""Interactive yes/no confirmation.

The release flow receives a ``Confirm`` callable instead of reading stdin
itself; the CLI wires in :func:`prompt_confirm`, tests pass scripted answers.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

import typer

__all__ = ["Confirm", "is_affirmative", "prompt_confirm", "scripted_confirm"]

Confirm = Callable[[str], bool]

_ACCEPTED = frozenset({"y", "yes"})


def is_affirmative(answer: str) -> bool:
    """Only ``y`` or ``yes`` (any case) accept; everything else declines."""
    return answer.lower() in _ACCEPTED


def prompt_confirm(message: str) -> bool:
    """Ask a single-line question on the terminal.

    Unlike ``typer.confirm`` an unrecognized answer is not re-asked: it is a
    rejection, as is an empty line.
    """
    answer: str = typer.prompt(message, default="", show_default=False, prompt_suffix=" ")
    return is_affirmative(answer)


def scripted_confirm(answers: Iterable[str], *, asked: list[str] | None = None) -> Confirm:
    """Build a Confirm that replays ``answers`` in order.

    Questions are appended to ``asked`` when given. Running out of answers
    declines.
    """
    it: Iterator[str] = iter(answers)

    def confirm(message: str) -> bool:
        if asked is not None:
            asked.append(message)
        return is_affirmative(next(it, ""))

    return confirm
