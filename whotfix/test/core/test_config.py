"""Tests for whotfix.core.config module."""

from __future__ import annotations

from pathlib import Path

from whotfix.core.config import (
    DEFAULT_SCOPE,
    DEFAULT_STAGING_DIR,
    RegistryConfig,
    ReleaseConfig,
    load_release_config,
    resolve_registry,
)
from whotfix.core.result import Err, Ok


class TestResolveRegistry:
    def test_reads_registry_line(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("always-auth=true\nregistry= https://npm.example.com/ \n", encoding="utf-8")

        assert resolve_registry(npmrc) == Ok(RegistryConfig(url="https://npm.example.com/"))

    def test_first_registry_line_wins(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("registry=https://a/\nregistry=https://b/\n", encoding="utf-8")

        assert resolve_registry(npmrc) == Ok(RegistryConfig(url="https://a/"))

    def test_value_may_contain_equals(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("registry=https://npm.example.com/?token=abc\n", encoding="utf-8")

        result = resolve_registry(npmrc)

        assert isinstance(result, Ok)
        assert result.value.url == "https://npm.example.com/?token=abc"

    def test_handles_crlf(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_bytes(b"registry=https://npm.example.com/\r\n")

        assert resolve_registry(npmrc) == Ok(RegistryConfig(url="https://npm.example.com/"))

    def test_scoped_registry_is_not_the_registry(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("@acme:registry=https://npm.acme.dev/\n", encoding="utf-8")

        assert isinstance(resolve_registry(npmrc), Err)

    def test_missing_file(self, tmp_path: Path) -> None:
        result = resolve_registry(tmp_path / ".npmrc")

        assert isinstance(result, Err)
        assert "No registry found" in result.error.message
        assert result.error.hint is not None

    def test_empty_value_is_missing(self, tmp_path: Path) -> None:
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("registry=\n", encoding="utf-8")

        assert isinstance(resolve_registry(npmrc), Err)


class TestLoadReleaseConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        result = load_release_config(tmp_path / "whotfix.toml")

        assert result == Ok(ReleaseConfig())
        assert isinstance(result, Ok)
        assert result.value.scope == DEFAULT_SCOPE
        assert result.value.staging_dir == DEFAULT_STAGING_DIR
        assert result.value.build_command == ("npm", "run", "build")
        assert result.value.strip_fields == ("scripts", "volta")

    def test_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "whotfix.toml"
        path.write_text(
            'scope = "@acme-hotfix"\n'
            'build_command = ["pnpm", "build"]\n'
            'strip_fields = ["scripts", "volta", "devDependencies"]\n'
            'tag = "hotfix"\n',
            encoding="utf-8",
        )

        result = load_release_config(path)

        assert isinstance(result, Ok)
        config = result.value
        assert config.scope == "@acme-hotfix"
        assert config.build_command == ("pnpm", "build")
        assert config.strip_fields == ("scripts", "volta", "devDependencies")
        assert config.tag == "hotfix"
        assert config.access == "restricted"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "whotfix.toml"
        path.write_text("scope = \n", encoding="utf-8")

        result = load_release_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
