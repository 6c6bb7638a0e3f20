"""Tests for the layered YAML settings source.

Tests for LayeredYamlSettingsSource:
- Built-in defaults are required
- User and project layers deep-merge over the defaults
- Malformed files raise ConfigFileError
"""

import pathlib as _pathlib

import pydantic_settings as _pydantic_settings
import pytest as _pytest

import skillkeeper.config.settings as settings
import skillkeeper.config.sources as sources


def _write(path: _pathlib.Path, text: str) -> _pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _source(
    tmp_path: _pathlib.Path,
    project_root: _pathlib.Path | None = None,
) -> sources.LayeredYamlSettingsSource:
    return sources.LayeredYamlSettingsSource(
        settings.Settings,
        project_root,
        user_config_path=tmp_path / "user" / "config.yaml",
    )


class TestHelperFunctions:
    """Tests for path helper functions."""

    def test_get_builtin_defaults_path(self) -> None:
        path = sources.get_builtin_defaults_path()
        assert path.name == "config.yaml"
        assert path.parent.name == "defaults"
        assert path.is_file()

    def test_get_user_config_dir_default(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Without the env var, the XDG-style path under HOME is used."""
        monkeypatch.delenv("SKILLKEEPER_CONFIG_DIR", raising=False)
        assert sources.get_user_config_dir() == _pathlib.Path.home() / ".config" / "skillkeeper"

    def test_get_user_config_path_with_env_var(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLKEEPER_CONFIG_DIR", "/custom/config/dir")
        assert sources.get_user_config_path() == _pathlib.Path("/custom/config/dir/config.yaml")

    def test_get_project_config_path(self, tmp_path: _pathlib.Path) -> None:
        assert sources.get_project_config_path(tmp_path) == (
            tmp_path / ".skillkeeper" / "config.yaml"
        )


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_dicts_merge(self) -> None:
        base = {"install": {"target": "opencode", "dir": None}, "version": 1}
        merged = sources.deep_merge(base, {"install": {"target": "claude"}})
        assert merged == {"install": {"target": "claude", "dir": None}, "version": 1}

    def test_scalars_and_lists_replace(self) -> None:
        merged = sources.deep_merge({"a": [1, 2], "b": {"c": 1}}, {"a": [3], "b": 5})
        assert merged == {"a": [3], "b": 5}

    def test_inputs_not_mutated(self) -> None:
        base = {"a": {"b": 1}}
        sources.deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadYamlFile:
    """Tests for load_yaml_file."""

    def test_empty_file_returns_none(self, tmp_path: _pathlib.Path) -> None:
        assert sources.load_yaml_file(_write(tmp_path / "c.yaml", "")) is None

    def test_malformed_yaml_raises(self, tmp_path: _pathlib.Path) -> None:
        path = _write(tmp_path / "c.yaml", "install: [unclosed\n")
        with _pytest.raises(sources.ConfigFileError, match="invalid YAML"):
            sources.load_yaml_file(path)

    def test_non_mapping_raises(self, tmp_path: _pathlib.Path) -> None:
        path = _write(tmp_path / "c.yaml", "- a\n- b\n")
        with _pytest.raises(sources.ConfigFileError, match="got list"):
            sources.load_yaml_file(path)

    def test_missing_file_raises(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="cannot read"):
            sources.load_yaml_file(tmp_path / "missing.yaml")


class TestLayeredYamlSettingsSource:
    """Tests for LayeredYamlSettingsSource."""

    def test_is_pydantic_settings_source(self) -> None:
        assert issubclass(
            sources.LayeredYamlSettingsSource,
            _pydantic_settings.PydanticBaseSettingsSource,
        )

    def test_builtin_only(self, tmp_path: _pathlib.Path) -> None:
        source = _source(tmp_path)
        data = source()
        assert data["validation"]["descriptor_name"] == "SKILL.md"
        assert [name for name, _ in source.get_loaded_layers()] == ["built-in"]

    def test_user_layer_overrides_builtin(self, tmp_path: _pathlib.Path) -> None:
        _write(tmp_path / "user" / "config.yaml", "install:\n  target: claude\n")
        data = _source(tmp_path)()
        assert data["install"]["target"] == "claude"
        # Sibling keys from the defaults survive
        assert data["install"]["dir"] is None

    def test_project_layer_overrides_user(self, tmp_path: _pathlib.Path) -> None:
        project = tmp_path / "project"
        _write(tmp_path / "user" / "config.yaml", "validation:\n  description_prefix: A\n")
        _write(
            sources.get_project_config_path(project),
            "validation:\n  description_prefix: B\n",
        )
        source = _source(tmp_path, project)
        assert source()["validation"]["description_prefix"] == "B"
        assert [name for name, _ in source.get_loaded_layers()] == ["built-in", "user", "project"]

    def test_empty_user_file_ignored(self, tmp_path: _pathlib.Path) -> None:
        _write(tmp_path / "user" / "config.yaml", "")
        source = _source(tmp_path)
        assert [name for name, _ in source.get_loaded_layers()] == ["built-in"]

    def test_malformed_user_file_raises(self, tmp_path: _pathlib.Path) -> None:
        _write(tmp_path / "user" / "config.yaml", "a: [\n")
        with _pytest.raises(sources.ConfigFileError):
            _source(tmp_path)

    def test_missing_builtin_raises(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="built-in defaults not found"):
            sources.LayeredYamlSettingsSource(
                settings.Settings,
                builtin_config_path=tmp_path / "nope.yaml",
            )

    def test_empty_builtin_raises(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="empty"):
            sources.LayeredYamlSettingsSource(
                settings.Settings,
                builtin_config_path=_write(tmp_path / "empty.yaml", ""),
            )

    def test_returns_copy(self, tmp_path: _pathlib.Path) -> None:
        """Mutating the returned dict does not leak into later calls."""
        source = _source(tmp_path)
        source()["install"]["target"] = "changed"
        assert source()["install"]["target"] == "opencode"
