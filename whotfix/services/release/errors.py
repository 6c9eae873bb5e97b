from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "registry_missing",
    "config_invalid",
    "manifest_invalid",
    "version_mismatch",
    "invalid_version",
    "registry_query_failed",
    "declined",
    "build_failed",
    "staging_failed",
    "publish_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
