from __future__ import annotations

from pathlib import Path

from whotfix.core.config import ReleaseConfig
from whotfix.core.project import Project
from whotfix.core.result import Err, Ok, Result
from whotfix.output.console import MockConsole
from whotfix.output.prompt import scripted_confirm
from whotfix.platform.process import ProcessError
from whotfix.services.release.model import ReleaseOutcome, RunFlags
from whotfix.services.release.service import HotfixReleaseService

from .._fakes import FakeRunner, make_project, npm_not_found, process_error, read_staged_manifest, write_dist

PKG = "@dida-whotfix/oidc-client-ts"


def _service(
    root: Path,
    *,
    answers: list[str],
    view: Result[str, ProcessError] | None = None,
    asked: list[str] | None = None,
) -> tuple[HotfixReleaseService, FakeRunner, MockConsole]:
    runner = FakeRunner(
        view_result=view if view is not None else npm_not_found(["npm", "view"]),
        on_build=write_dist,
    )
    console = MockConsole()
    service = HotfixReleaseService(
        project=Project(root=root),
        config=ReleaseConfig(),
        runner=runner,
        console=console,
        confirm=scripted_confirm(answers, asked=asked),
    )
    return service, runner, console


def test_first_hotfix_is_built_and_published(tmp_path: Path) -> None:
    root = make_project(tmp_path, version="3.2.0")
    asked: list[str] = []
    service, runner, console = _service(root, answers=["y"], asked=asked)

    result = service.run(RunFlags())

    assert isinstance(result, Ok)
    assert result.value == ReleaseOutcome(
        package_name=PKG,
        version="3.2.0-hotfix.1",
        previous_version=None,
        staging_dir=root / "temp" / "package-out",
        published=True,
    )
    assert len(asked) == 1
    assert "3.2.0-hotfix.1" in asked[0]
    assert runner.commands == [
        ("npm", "view", PKG, "version", "--registry", "https://npm.example.com/"),
        ("npm", "run", "build"),
        (
            "npm",
            "publish",
            "--access",
            "restricted",
            "--tag",
            "latest",
            "--registry",
            "https://npm.example.com/",
        ),
    ]
    assert runner.calls[-1].cwd == root / "temp" / "package-out"

    staged = read_staged_manifest(root / "temp" / "package-out")
    assert staged["name"] == PKG
    assert staged["version"] == "3.2.0-hotfix.1"
    assert console.find("Using registry: https://npm.example.com/")
    assert not console.has_warning()


def test_build_only_never_publishes(tmp_path: Path) -> None:
    root = make_project(tmp_path, version="3.2.0")
    service, runner, console = _service(root, answers=["yes"])

    result = service.run(RunFlags(build_only=True))

    assert isinstance(result, Ok)
    assert result.value.published is False
    assert result.value.version == "3.2.0-hotfix.1"
    assert not runner.ran("npm", "publish")
    assert runner.ran("npm", "run", "build")
    assert console.find("Skipping publish step")
    assert read_staged_manifest(result.value.staging_dir)["version"] == "3.2.0-hotfix.1"


def test_declined_confirmation_has_no_side_effects(tmp_path: Path) -> None:
    root = make_project(tmp_path, version="3.2.0")
    service, runner, _ = _service(root, answers=["n"], view=Ok("3.2.0-hotfix.4\n"))

    result = service.run(RunFlags())

    assert isinstance(result, Err)
    assert result.error.kind == "declined"
    assert runner.commands == [
        ("npm", "view", PKG, "version", "--registry", "https://npm.example.com/")
    ]
    assert not (root / "temp").exists()


def test_empty_answer_declines(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    service, runner, _ = _service(root, answers=[""])

    result = service.run(RunFlags())

    assert isinstance(result, Err)
    assert result.error.kind == "declined"
    assert not runner.ran("npm", "run", "build")


def test_continues_existing_lineage(tmp_path: Path) -> None:
    root = make_project(tmp_path, version="3.2.0")
    asked: list[str] = []
    service, _, _ = _service(root, answers=["Y"], view=Ok("3.2.0-hotfix.4"), asked=asked)

    result = service.run(RunFlags(build_only=True))

    assert isinstance(result, Ok)
    assert result.value.version == "3.2.0-hotfix.5"
    assert result.value.previous_version == "3.2.0-hotfix.4"
    assert "from 3.2.0-hotfix.4 to: 3.2.0-hotfix.5" in asked[0]


def test_missing_registry_stops_before_query_or_build(tmp_path: Path) -> None:
    root = make_project(tmp_path, registry=None)
    asked: list[str] = []
    service, runner, _ = _service(root, answers=["y"], asked=asked)

    result = service.run(RunFlags())

    assert isinstance(result, Err)
    assert result.error.kind == "registry_missing"
    assert runner.calls == []
    assert asked == []


def test_lineage_mismatch_stops_before_prompt(tmp_path: Path) -> None:
    root = make_project(tmp_path, version="2.0.0")
    asked: list[str] = []
    service, runner, _ = _service(root, answers=["y"], view=Ok("1.9.0-hotfix.3"), asked=asked)

    result = service.run(RunFlags())

    assert isinstance(result, Err)
    assert result.error.kind == "version_mismatch"
    assert "1.9.0-hotfix.3" in result.error.message
    assert asked == []
    assert not runner.ran("npm", "run", "build")


def test_query_failure_is_reported_and_degrades(tmp_path: Path) -> None:
    root = make_project(tmp_path, version="3.2.0")
    failure = Err(process_error(["npm", "view"], stderr="npm ERR! code ECONNREFUSED"))
    service, _, console = _service(root, answers=["y"], view=failure)

    result = service.run(RunFlags(build_only=True))

    assert isinstance(result, Ok)
    assert result.value.version == "3.2.0-hotfix.1"
    assert console.has_warning()
    assert console.find("Registry query failed")
    assert not console.find("has not been published yet")


def test_never_published_is_reported_as_info(tmp_path: Path) -> None:
    root = make_project(tmp_path, version="3.2.0")
    service, _, console = _service(root, answers=["n"])

    service.run(RunFlags())

    assert console.find(f"{PKG} has not been published yet")
    assert not console.has_warning()


def test_publish_failure_keeps_staging(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    service, runner, _ = _service(root, answers=["y"])
    runner.publish_result = Err(process_error(["npm", "publish"], stderr="E403"))

    result = service.run(RunFlags())

    assert isinstance(result, Err)
    assert result.error.kind == "publish_failed"
    assert (root / "temp" / "package-out" / "package.json").is_file()


def test_invalid_manifest(tmp_path: Path) -> None:
    make_project(tmp_path)
    (tmp_path / "package.json").write_text('{"name": "pkg"}', encoding="utf-8")
    service, runner, _ = _service(tmp_path, answers=["y"])

    result = service.run(RunFlags())

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_invalid"
    assert runner.calls == []
