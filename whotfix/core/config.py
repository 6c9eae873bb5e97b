"""Typed configuration loading.

Two sources feed a release run:

- ``.npmrc``: the ``registry=`` entry names the private registry. There is
  no fallback to the public npm registry.
- ``whotfix.toml`` (optional): overrides for the fixed values of the run
  (package scope, staging layout, published metadata, publish flags).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list

__all__ = [
    "ConfigError",
    "RegistryConfig",
    "ReleaseConfig",
    "load_release_config",
    "resolve_registry",
    "DEFAULT_SCOPE",
    "DEFAULT_STAGING_DIR",
]

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_SCOPE = "@dida-whotfix"
DEFAULT_STAGING_DIR = "temp/package-out"
DEFAULT_BUILD_OUTPUT_DIR = "dist"
DEFAULT_BUILD_COMMAND = ("npm", "run", "build")
DEFAULT_AUX_FILES = ("LICENSE", "README.md", "package.json")
DEFAULT_REPOSITORY_URL = "git+https://github.com/DidaTravel/oidc-client-ts-whotfix.git"
DEFAULT_HOMEPAGE = "https://github.com/DidaTravel/oidc-client-ts-whotfix#readme"
# Local-only fields: lifecycle scripts and toolchain pins
DEFAULT_STRIP_FIELDS = ("scripts", "volta")
DEFAULT_ACCESS = "restricted"
DEFAULT_TAG = "latest"

_REGISTRY_PREFIX = "registry="


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when configuration is missing or cannot be parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Registry the hotfix package is queried from and published to."""

    url: str


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Fixed values of a hotfix release run."""

    scope: str = DEFAULT_SCOPE
    staging_dir: str = DEFAULT_STAGING_DIR
    build_output_dir: str = DEFAULT_BUILD_OUTPUT_DIR
    build_command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    aux_files: tuple[str, ...] = DEFAULT_AUX_FILES
    repository_url: str = DEFAULT_REPOSITORY_URL
    homepage: str = DEFAULT_HOMEPAGE
    strip_fields: tuple[str, ...] = DEFAULT_STRIP_FIELDS
    access: str = DEFAULT_ACCESS
    tag: str = DEFAULT_TAG

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create ReleaseConfig from a mapping (parsed TOML)."""
        build_command = get_str_list(data, "build_command")
        aux_files = get_str_list(data, "aux_files")
        strip_fields = get_str_list(data, "strip_fields")

        return cls(
            scope=get_str(data, "scope") or DEFAULT_SCOPE,
            staging_dir=get_str(data, "staging_dir") or DEFAULT_STAGING_DIR,
            build_output_dir=get_str(data, "build_output_dir") or DEFAULT_BUILD_OUTPUT_DIR,
            build_command=tuple(build_command) if build_command else DEFAULT_BUILD_COMMAND,
            aux_files=tuple(aux_files) if aux_files is not None else DEFAULT_AUX_FILES,
            repository_url=get_str(data, "repository_url") or DEFAULT_REPOSITORY_URL,
            homepage=get_str(data, "homepage") or DEFAULT_HOMEPAGE,
            strip_fields=tuple(strip_fields) if strip_fields is not None else DEFAULT_STRIP_FIELDS,
            access=get_str(data, "access") or DEFAULT_ACCESS,
            tag=get_str(data, "tag") or DEFAULT_TAG,
        )


def resolve_registry(npmrc_path: Path) -> Result[RegistryConfig, ConfigError]:
    """Read the ``registry=`` entry from an npm config file.

    The first line starting with ``registry=`` wins; its value (everything
    after the first ``=``) is trimmed. A missing file, a missing entry and an
    empty value are all reported as errors.
    """
    missing = ConfigError(
        f"No registry found in {npmrc_path.name}",
        path=npmrc_path,
        hint="Add a 'registry=<url>' line; the public npm registry is never used as a fallback",
    )
    if not npmrc_path.is_file():
        return Err(missing)

    try:
        content = npmrc_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading {npmrc_path}: {e}", path=npmrc_path))

    for line in content.splitlines():
        if line.startswith(_REGISTRY_PREFIX):
            url = line[len(_REGISTRY_PREFIX) :].strip()
            if not url:
                return Err(missing)
            return Ok(RegistryConfig(url=url))

    return Err(missing)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_release_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load release settings from ``whotfix.toml``.

    Args:
        path: Path to the settings file.

    Returns:
        Ok(ReleaseConfig) (defaults when the file does not exist),
        Err(ConfigError) when it exists but is invalid.
    """
    if not path.exists():
        return Ok(ReleaseConfig())

    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
