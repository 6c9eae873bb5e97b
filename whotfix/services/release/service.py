"""Hotfix release orchestration.

One run walks a fixed sequence and never goes back:

    resolve registry -> query latest version -> compute next version
    -> confirm -> prepare (build + stage) -> publish (unless build only)

Every collaborator with a side effect (subprocesses, the confirmation
prompt, console output) is passed in, so a run can be replayed in tests.
"""

from __future__ import annotations

from dataclasses import replace

from whotfix.core.config import RegistryConfig, ReleaseConfig, resolve_registry
from whotfix.core.jsonc import read_json
from whotfix.core.project import Project
from whotfix.core.result import Err, Ok, Result
from whotfix.output.console import ConsoleProtocol, Style
from whotfix.output.prompt import Confirm
from whotfix.platform.process import CommandRunner
from whotfix.services.release.errors import ReleaseError
from whotfix.services.release.hotfix import (
    HotfixVersionError,
    VersionLineageMismatch,
    build_next_version,
)
from whotfix.services.release.model import PackageDescriptor, ReleaseOutcome, RunFlags
from whotfix.services.release.registry import get_latest_version, publish
from whotfix.services.release.staging import prepare


class HotfixReleaseService:
    def __init__(
        self,
        *,
        project: Project,
        config: ReleaseConfig,
        runner: CommandRunner,
        console: ConsoleProtocol,
        confirm: Confirm,
    ) -> None:
        self._project = project
        self._config = config
        self._runner = runner
        self._console = console
        self._confirm = confirm

    def load_package(self) -> Result[PackageDescriptor, ReleaseError]:
        path = self._project.manifest_path
        manifest = read_json(path)
        if isinstance(manifest, Err):
            return Err(ReleaseError(kind="manifest_invalid", message=manifest.error.message))
        descriptor = PackageDescriptor.from_manifest(manifest.value, path=path)
        if isinstance(descriptor, Err):
            return Err(ReleaseError(kind="manifest_invalid", message=descriptor.error.message))
        return Ok(descriptor.value)

    def resolve_registry(self) -> Result[RegistryConfig, ReleaseError]:
        result = resolve_registry(self._project.npmrc_path)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="registry_missing",
                    message=result.error.message,
                    hint=result.error.hint,
                )
            )
        return Ok(result.value)

    def latest_version(self, package_name: str, registry: RegistryConfig) -> str | None:
        """Latest published hotfix version, or None.

        A failed query is reported separately from "never published" but the
        run continues as if nothing had been published.
        """
        result = get_latest_version(
            self._runner,
            package_name=package_name,
            registry=registry,
            cwd=self._project.root,
        )
        if isinstance(result, Err):
            self._console.warning(result.error.message)
            if result.error.hint:
                self._console.print(f"  {result.error.hint}", Style.DIM)
            self._console.warning("Registry query failed; continuing as if never published")
            return None
        if result.value is None:
            self._console.info(f"{package_name} has not been published yet")
        return result.value

    def next_version(
        self, current: str | None, package: PackageDescriptor
    ) -> Result[str, ReleaseError]:
        try:
            return Ok(build_next_version(current, package.base_version))
        except VersionLineageMismatch as e:
            return Err(
                ReleaseError(
                    kind="version_mismatch",
                    message=str(e),
                    hint="The base version was bumped; publish under a fresh hotfix lineage",
                )
            )
        except HotfixVersionError as e:
            return Err(ReleaseError(kind="invalid_version", message=str(e)))

    def run(self, flags: RunFlags) -> Result[ReleaseOutcome, ReleaseError]:
        """Execute one release run."""
        self._console.header("Hotfix release")
        if flags.build_only:
            self._console.info("Build only mode enabled, no publishing will be done.")

        package = self.load_package()
        if isinstance(package, Err):
            return package
        package_name = package.value.derived_name(self._config.scope)

        registry = self.resolve_registry()
        if isinstance(registry, Err):
            return registry
        self._console.info(f"Using registry: {registry.value.url}")

        current = self.latest_version(package_name, registry.value)
        next_version = self.next_version(current, package.value)
        if isinstance(next_version, Err):
            return next_version
        version = next_version.value

        question = (
            f"Use a new version for {package_name} "
            f"(from {current or 'none'} to: {version})? (y/n):"
        )
        if not self._confirm(question):
            return Err(ReleaseError(kind="declined", message="Version not confirmed. Exiting."))
        self._console.info(f"Using new version: {version}")

        staged = prepare(
            self._runner,
            root=self._project.root,
            config=self._config,
            package_name=package_name,
            version=version,
            console=self._console,
        )
        if isinstance(staged, Err):
            return staged

        outcome = ReleaseOutcome(
            package_name=package_name,
            version=version,
            previous_version=current,
            staging_dir=staged.value,
            published=False,
        )
        if flags.build_only:
            self._console.info("Build completed. Skipping publish step.")
            return Ok(outcome)

        self._console.header("Publish")
        published = publish(
            self._runner,
            staging_dir=staged.value,
            registry=registry.value,
            access=self._config.access,
            tag=self._config.tag,
        )
        if isinstance(published, Err):
            return published

        self._console.success(f"Published {package_name}@{version} to {registry.value.url}")
        return Ok(replace(outcome, published=True))
