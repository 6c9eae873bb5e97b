"""npm registry access: latest version lookup and publish."""

from __future__ import annotations

from pathlib import Path

from whotfix.core.config import RegistryConfig
from whotfix.core.result import Err, Ok, Result
from whotfix.platform.process import CommandRunner, ProcessError
from whotfix.services.release.errors import ReleaseError

__all__ = ["get_latest_version", "publish", "view_command", "publish_command"]

_NOT_FOUND_MARKERS = ("e404", "404 not found", "is not in this registry")


def view_command(package_name: str, registry: RegistryConfig) -> list[str]:
    return ["npm", "view", package_name, "version", "--registry", registry.url]


def publish_command(registry: RegistryConfig, *, access: str, tag: str) -> list[str]:
    return [
        "npm",
        "publish",
        "--access",
        access,
        "--tag",
        tag,
        "--registry",
        registry.url,
    ]


def _is_not_found(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _NOT_FOUND_MARKERS)


def get_latest_version(
    runner: CommandRunner,
    *,
    package_name: str,
    registry: RegistryConfig,
    cwd: Path,
) -> Result[str | None, ReleaseError]:
    """Query the registry for the latest published version of a package.

    Returns:
        Ok(version) when published, Ok(None) when the registry does not know
        the package, Err(registry_query_failed) for any other failure.
    """
    result = runner.capture(view_command(package_name, registry), cwd=cwd)
    if isinstance(result, Ok):
        version = result.value.strip()
        return Ok(version or None)

    error = result.error
    if _is_not_found(error):
        return Ok(None)

    return Err(
        ReleaseError(
            kind="registry_query_failed",
            message=f"Failed to get latest version of {package_name}: {error}",
            hint=error.stderr.strip() or None,
        )
    )


def publish(
    runner: CommandRunner,
    *,
    staging_dir: Path,
    registry: RegistryConfig,
    access: str,
    tag: str,
) -> Result[None, ReleaseError]:
    """Publish the staging directory to ``registry``."""
    result = runner.stream(publish_command(registry, access=access, tag=tag), cwd=staging_dir)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="publish_failed",
                message=f"Publish failed: {result.error}",
                hint=f"Staged package left in {staging_dir}",
            )
        )
    return Ok(None)
