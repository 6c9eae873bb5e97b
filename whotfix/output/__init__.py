"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .prompt import Confirm, is_affirmative, prompt_confirm, scripted_confirm

__all__ = [
    "Confirm",
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "is_affirmative",
    "prompt_confirm",
    "scripted_confirm",
]
