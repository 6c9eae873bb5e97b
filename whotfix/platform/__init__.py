"""Platform abstraction layer."""

from .files import atomic_write_json, atomic_write_text, copy_tree_contents, remove_tree
from .process import (
    CommandRunner,
    ProcessError,
    SubprocessRunner,
    run,
    run_silent,
)

__all__ = [
    # files
    "atomic_write_json",
    "atomic_write_text",
    "copy_tree_contents",
    "remove_tree",
    # process
    "CommandRunner",
    "ProcessError",
    "SubprocessRunner",
    "run",
    "run_silent",
]
