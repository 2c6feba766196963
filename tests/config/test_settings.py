"""Tests for PathSettings — unified settings with TOML source."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from schemapath.config.discovery import ConfigError
from schemapath.config.settings import PathSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "SCHEMAPATH_CONFIG",
        "SCHEMAPATH_PATH__STRICT_WAYPOINTS",
        "SCHEMAPATH_LOGGING__VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = PathSettings.load(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.path.strict_waypoints is False
        assert settings.logging.verbose is False
        assert settings.logging.json_output is False

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PathSettings.load(root=tmp_path)
        with pytest.raises(Exception):
            settings.root = Path("/")  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "schemapath.toml"
        toml.write_text("[path]\nstrict_waypoints = true\n")
        settings = PathSettings.load(root=tmp_path)
        assert settings.path.strict_waypoints is True
        assert settings.config_path == toml
        assert settings.logging.verbose is False

    def test_root_from_discovered_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "schemapath.toml").write_text("")
        nested = tmp_path / "sub"
        nested.mkdir()
        monkeypatch.chdir(nested)
        settings = PathSettings.load()
        assert settings.root == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[logging]\nverbose = true\n")
        settings = PathSettings.load(config_path=custom, root=tmp_path)
        assert settings.logging.verbose is True
        assert settings.config_path == custom

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "schemapath.toml").write_text("not = [valid\n")
        with pytest.raises(ConfigError):
            PathSettings.load(root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "schemapath.toml").write_text("[path]\nstrict_waypoints = false\n")
        monkeypatch.setenv("SCHEMAPATH_PATH__STRICT_WAYPOINTS", "true")
        settings = PathSettings.load(root=tmp_path)
        assert settings.path.strict_waypoints is True

    def test_overrides_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEMAPATH_LOGGING__VERBOSE", "true")
        settings = PathSettings.load(root=tmp_path, logging={"verbose": False})
        assert settings.logging.verbose is False


class TestSections:
    def test_logging_json_alias_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "schemapath.toml").write_text("[logging]\njson = true\nverbose = true\n")
        settings = PathSettings.load(root=tmp_path)
        assert settings.logging.json_output is True
        assert settings.logging.verbose is True

    def test_rejects_bad_type(self, tmp_path: Path) -> None:
        (tmp_path / "schemapath.toml").write_text('[path]\nstrict_waypoints = "maybe"\n')
        with pytest.raises(ValidationError):
            PathSettings.load(root=tmp_path)
