"""Filesystem helpers used to assemble the staging directory."""

from __future__ import annotations

import json
import os
import shutil
import stat
import tempfile
from collections.abc import Callable, Mapping
from pathlib import Path

__all__ = ["atomic_write_json", "atomic_write_text", "copy_tree_contents", "remove_tree"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def atomic_write_json(path: Path, data: Mapping[str, object]) -> None:
    """Write a JSON document the way npm does: 2-space indent, trailing newline."""
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    atomic_write_text(path, content)


def _remove_readonly(_func: Callable[[str], object], path: str, exc: BaseException) -> None:
    """Handle read-only files on Windows."""
    if isinstance(exc, PermissionError):
        os.chmod(path, stat.S_IWRITE)
        os.unlink(path)
    else:
        raise exc


def remove_tree(path: Path) -> bool:
    """Remove a directory tree if present. Returns True if something was removed."""
    if not path.exists():
        return False
    shutil.rmtree(path, onexc=_remove_readonly)
    return True


def copy_tree_contents(src: Path, dst: Path) -> None:
    """Copy the contents of ``src`` into ``dst`` (created if missing)."""
    shutil.copytree(src, dst, dirs_exist_ok=True)
