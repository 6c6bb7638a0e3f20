"""Custom pydantic-settings sources for Skillkeeper configuration.

This module provides:

- LayeredYamlSettingsSource: A pydantic-settings source that loads
  configuration from layered YAML files and deep-merges them.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .skillkeeper/config.yaml in the working directory
3. User config: ~/.config/skillkeeper/config.yaml (or SKILLKEEPER_CONFIG_DIR)
4. Built-in defaults: bundled config.yaml

Nested mappings merge key by key; any other value in a higher layer
replaces the lower one.

Environment variables:
- SKILLKEEPER_CONFIG_DIR: Override user config directory (default: ~/.config/skillkeeper)
"""

import copy as _copy
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "SKILLKEEPER_CONFIG_DIR"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def deep_merge(
    base: dict[str, _typing.Any],
    override: _typing.Mapping[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Merge `override` into a copy of `base`.

    Nested dicts are merged recursively; other values (including lists)
    from `override` replace those in `base`.
    """
    result = _copy.deepcopy(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = _copy.deepcopy(value)
    return result


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML config file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML contents, or None if the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or contains non-dict content at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that merges layered YAML config files.

    Layers (lowest to highest precedence):
    1. Built-in defaults (src/skillkeeper/config/defaults/config.yaml)
    2. User config (~/.config/skillkeeper/config.yaml)
    3. Project config (.skillkeeper/config.yaml)

    The merged result is a plain dict that Pydantic validates.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
        builtin_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Optional directory holding the project config.
            user_config_path: Override path for user config file (for testing).
            builtin_config_path: Override path for builtin defaults (for testing).
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path or get_user_config_path()
        self._builtin_config_path = builtin_config_path or get_builtin_defaults_path()
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._merged = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        """Load every layer in ascending precedence order and merge them."""
        # Built-in defaults are required: a missing or empty file is an
        # installation problem, not a user choice.
        builtin_path = self._builtin_config_path
        if not builtin_path.exists():
            raise ConfigFileError(
                builtin_path,
                "built-in defaults not found (possible installation problem)",
            )
        merged = load_yaml_file(builtin_path)
        if not merged:
            raise ConfigFileError(
                builtin_path,
                "built-in defaults file is empty (possible installation problem)",
            )
        self._loaded_layers.append(("built-in", builtin_path))

        optional_layers = [("user", self._user_config_path)]
        if self._project_root is not None:
            optional_layers.append(
                ("project", get_project_config_path(self._project_root))
            )

        for layer_name, path in optional_layers:
            if not path.exists():
                continue
            content = load_yaml_file(path)
            if content:
                merged = deep_merge(merged, content)
                self._loaded_layers.append((layer_name, path))

        return merged

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """
        Get info about layers that were actually loaded.

        Returns:
            List of (layer_name, path) tuples, lowest precedence first.
        """
        return list(self._loaded_layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """Get value for a single top-level field from the merged config."""
        value = self._merged.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """
        Return merged config as a plain dict for Pydantic validation.

        Unknown keys are included so they land in Settings.model_extra.
        """
        return _copy.deepcopy(self._merged)


def get_builtin_defaults_path() -> _pathlib.Path:
    """Get the path to the built-in defaults config file."""
    return _pathlib.Path(__file__).parent / "defaults" / "config.yaml"


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects SKILLKEEPER_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "skillkeeper"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / "config.yaml"


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """
    Get the path to the project config file.

    Args:
        project_root: The project directory.

    Returns:
        Path to .skillkeeper/config.yaml within the project.
    """
    return project_root / ".skillkeeper" / "config.yaml"
