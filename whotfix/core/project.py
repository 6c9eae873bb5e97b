"""Project root detection.

The project root is the directory holding the ``package.json`` being
released. ``.npmrc``, ``whotfix.toml``, the build output and the staging
directory are all resolved relative to it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

__all__ = ["Project", "detect_project", "find_project_upward"]

ROOT_ENV_VAR = "WHOTFIX_ROOT"


@dataclass(frozen=True, slots=True)
class Project:
    """A package checkout to be released as a hotfix."""

    root: Path

    @property
    def manifest_path(self) -> Path:
        """Path to package.json."""
        return self.root / "package.json"

    @property
    def npmrc_path(self) -> Path:
        """Path to the npm config file holding the registry."""
        return self.root / ".npmrc"

    @property
    def config_path(self) -> Path:
        """Path to the optional whotfix.toml settings file."""
        return self.root / "whotfix.toml"


def find_project_upward(start: Path) -> Path | None:
    """Return the nearest directory at or above ``start`` with a package.json."""
    current = start.resolve()
    for parent in (current, *current.parents):
        if (parent / "package.json").is_file():
            return parent
    return None


def detect_project(cwd: Path | None = None) -> Project:
    """Detect the project root.

    Priority:
    1. WHOTFIX_ROOT environment variable (if it names a directory)
    2. nearest ancestor of ``cwd`` containing package.json
    3. ``cwd`` itself
    """
    env = os.environ.get(ROOT_ENV_VAR)
    if env:
        p = Path(env).expanduser().resolve()
        if p.is_dir():
            return Project(root=p)

    start = cwd if cwd is not None else Path.cwd()
    found = find_project_upward(start)
    if found is not None:
        return Project(root=found)
    return Project(root=start.resolve())
