"""Assemble the directory that gets published.

The staging directory holds exactly what goes to the registry: the build
output under ``dist/``, the auxiliary files, and a package.json rewritten for
the scoped hotfix package.
"""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from pathlib import Path

from whotfix.core.config import ReleaseConfig
from whotfix.core.jsonc import read_json
from whotfix.core.result import Err, Ok, Result
from whotfix.core.structured import StrDict
from whotfix.output.console import ConsoleProtocol, Style
from whotfix.platform.files import atomic_write_json, copy_tree_contents, remove_tree
from whotfix.platform.process import CommandRunner
from whotfix.services.release.errors import ReleaseError

__all__ = ["prepare", "rewrite_manifest"]


def rewrite_manifest(
    manifest: Mapping[str, object],
    *,
    package_name: str,
    version: str,
    config: ReleaseConfig,
) -> StrDict:
    """Return the manifest as published under the hotfix name.

    Existing keys keep their position. Local-only fields are dropped so the
    published package cannot re-trigger local automation.
    """
    out: StrDict = dict(manifest)
    out["name"] = package_name
    out["version"] = version
    out["repository"] = {"type": "git", "url": config.repository_url}
    out["homepage"] = config.homepage
    for key in config.strip_fields:
        out.pop(key, None)
    return out


def _staging_error(message: str, hint: str | None = None) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="staging_failed", message=message, hint=hint))


def prepare(
    runner: CommandRunner,
    *,
    root: Path,
    config: ReleaseConfig,
    package_name: str,
    version: str,
    console: ConsoleProtocol,
) -> Result[Path, ReleaseError]:
    """Build the project and stage it for publishing.

    Returns:
        Ok(staging_dir) on success. Nothing is rolled back on failure; the
        staging directory is wiped at the start of every run instead.
    """
    staging_dir = root / config.staging_dir
    build_output = root / config.build_output_dir

    try:
        if remove_tree(staging_dir):
            console.print(f"Removed previous staging directory {staging_dir}", Style.DIM)
    except OSError as e:
        return _staging_error(f"Cannot remove {staging_dir}: {e}")

    console.header("Build")
    built = runner.stream(config.build_command, cwd=root)
    if isinstance(built, Err):
        return Err(
            ReleaseError(
                kind="build_failed",
                message=f"Build failed: {built.error}",
            )
        )

    if not build_output.is_dir():
        return _staging_error(
            f"Build output not found: {build_output}",
            hint="Check build_output_dir in whotfix.toml",
        )

    try:
        (staging_dir / "dist").mkdir(parents=True, exist_ok=True)
        copy_tree_contents(build_output, staging_dir / "dist")
        for name in config.aux_files:
            src = root / name
            if not src.is_file():
                return _staging_error(f"Missing file to stage: {src}")
            shutil.copy2(src, staging_dir / name)
        if not (staging_dir / "package.json").exists():
            shutil.copy2(root / "package.json", staging_dir / "package.json")
    except OSError as e:
        return _staging_error(f"Cannot assemble {staging_dir}: {e}")

    manifest_path = staging_dir / "package.json"
    manifest = read_json(manifest_path)
    if isinstance(manifest, Err):
        return Err(ReleaseError(kind="manifest_invalid", message=manifest.error.message))

    staged = rewrite_manifest(
        manifest.value,
        package_name=package_name,
        version=version,
        config=config,
    )
    try:
        atomic_write_json(manifest_path, staged)
    except OSError as e:
        return _staging_error(f"Cannot write {manifest_path}: {e}")

    console.success(f"Staged {package_name}@{version} in {staging_dir}")
    return Ok(staging_dir)
