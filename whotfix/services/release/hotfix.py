"""Hotfix version arithmetic.

A hotfix version appends ``-hotfix.<n>`` to the frozen base version of the
package. The next version continues the published lineage; if the published
lineage belongs to another base version, the run has to stop.
"""

from __future__ import annotations

import re

from whotfix.services.release.model import HOTFIX_SEPARATOR, HotfixVersion

__all__ = [
    "HotfixVersionError",
    "InvalidHotfixVersion",
    "VersionLineageMismatch",
    "build_next_version",
    "parse_hotfix_version",
]

_COUNTER_RE = re.compile(r"^(0|[1-9]\d*)$")


class HotfixVersionError(ValueError):
    """Base class for hotfix version failures."""


class VersionLineageMismatch(HotfixVersionError):
    def __init__(self, current: str, base_version: str) -> None:
        super().__init__(
            f"Current latest hotfix version {current} does not match "
            f"the package base version {base_version}"
        )
        self.current = current
        self.base_version = base_version


class InvalidHotfixVersion(HotfixVersionError):
    def __init__(self, current: str) -> None:
        super().__init__(f"Latest published version {current} has no numeric hotfix suffix")
        self.current = current


def parse_hotfix_version(version: str) -> HotfixVersion | None:
    base, sep, counter = version.partition(HOTFIX_SEPARATOR)
    if not sep or _COUNTER_RE.match(counter) is None:
        return None
    return HotfixVersion(base, int(counter))


def build_next_version(current: str | None, base_version: str) -> str:
    """Return the hotfix version that follows ``current``.

    Raises:
        VersionLineageMismatch: ``current`` was cut from another base version.
        InvalidHotfixVersion: ``current`` carries no usable hotfix counter.
    """
    if not current:
        return str(HotfixVersion(base_version, 1))

    base = current.partition(HOTFIX_SEPARATOR)[0]
    if base != base_version:
        raise VersionLineageMismatch(current, base_version)

    parsed = parse_hotfix_version(current)
    if parsed is None:
        raise InvalidHotfixVersion(current)
    return str(parsed.next())
