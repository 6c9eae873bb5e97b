from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from whotfix.core.jsonc import JsonError
from whotfix.core.result import Err, Ok, Result
from whotfix.core.structured import StrDict, get_str


HOTFIX_SEPARATOR = "-hotfix."

BUILD_ONLY_FLAG = "--buildOnly"


@dataclass(frozen=True, slots=True)
class PackageDescriptor:
    """Name and version of the package being hotfixed, read from package.json."""

    base_name: str
    base_version: str

    def derived_name(self, scope: str) -> str:
        return f"{scope}/{self.base_name}"

    @classmethod
    def from_manifest(
        cls, data: StrDict, *, path: Path | None = None
    ) -> Result[PackageDescriptor, JsonError]:
        name = get_str(data, "name")
        version = get_str(data, "version")
        if name is None or version is None:
            return Err(JsonError("package.json must declare 'name' and 'version'", path=path))
        return Ok(cls(base_name=name, base_version=version))


@dataclass(frozen=True, slots=True, order=True)
class HotfixVersion:
    """``<base>-hotfix.<n>``; ordered by ``n`` for a fixed base."""

    base: str
    n: int

    def __str__(self) -> str:
        return f"{self.base}{HOTFIX_SEPARATOR}{self.n}"

    def next(self) -> HotfixVersion:
        return HotfixVersion(self.base, self.n + 1)


@dataclass(frozen=True, slots=True)
class RunFlags:
    build_only: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    package_name: str
    version: str
    previous_version: str | None
    staging_dir: Path
    published: bool
