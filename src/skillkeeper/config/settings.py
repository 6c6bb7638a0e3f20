"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with SKILLKEEPER_ prefix
3. .env file (if SKILLKEEPER_ENV_FILE names one)
4. Layered YAML config files:
   - Project config: .skillkeeper/config.yaml (highest)
   - User config: ~/.config/skillkeeper/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Nested config uses double underscore delimiter:
  SKILLKEEPER_INSTALL__TARGET=claude
  SKILLKEEPER_VALIDATION__DESCRIPTION_PREFIX="Use when"
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import skillkeeper.config.sources as sources
import skillkeeper.config.types as types
import skillkeeper.constants as constants

# Read straight from the environment, never settings fields.
_ENVIRONMENT_ONLY_KEYS = frozenset({"config_dir", "env_file"})


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only SKILLKEEPER_ENV_FILE is honoured; when it is unset, or names a
    file that does not exist, no .env file is loaded.
    """
    if env_file := _os.environ.get("SKILLKEEPER_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    Skillkeeper configuration settings.

    All settings can be overridden via environment variables with the
    SKILLKEEPER_ prefix. For nested config, use double underscore:
    SKILLKEEPER_INSTALL__TARGET=claude

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (SKILLKEEPER_*)
    3. .env file
    4. Project config (.skillkeeper/config.yaml)
    5. User config (~/.config/skillkeeper/config.yaml)
    6. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SKILLKEEPER_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings, constructor args (highest)
        2. env_settings (SKILLKEEPER_* env vars)
        3. dotenv_settings (.env file)
        4. layered YAML config files
        5. defaults via Field definitions (lowest)
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, _pathlib.Path.cwd()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation and for reproducing issues without
        .env interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # Config version (for future migrations)
    # =========================================================================

    version: int = _pydantic.Field(default=1, description="Config schema version")

    # =========================================================================
    # Top-level settings
    # =========================================================================

    skills_dir: str | None = _pydantic.Field(
        default=None,
        description="Directory holding one sub-directory per skill",
    )

    # =========================================================================
    # Nested config sections
    # =========================================================================

    validation: types.ValidationConfig = _pydantic.Field(
        default_factory=types.ValidationConfig
    )
    """Skill layout and validation rules."""

    install: types.InstallConfig = _pydantic.Field(default_factory=types.InstallConfig)
    """Install destination."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Logging settings."""

    output: types.OutputConfig = _pydantic.Field(default_factory=types.OutputConfig)
    """Console output settings."""

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def config_dir(self) -> _pathlib.Path:
        """User configuration directory."""
        return sources.get_user_config_dir()

    @property
    def install_dir(self) -> _pathlib.Path:
        """Directory skills are installed into."""
        return self.install.resolve_dir()

    def resolve_skills_dir(self, cwd: _pathlib.Path | None = None) -> _pathlib.Path:
        """
        Resolve the skills root directory.

        Tries (in order):
        1. The configured `skills_dir` (relative paths are taken from cwd)
        2. ./skills, if it is a directory
        3. The current working directory

        The returned path is not checked for existence when it was
        configured explicitly; callers report a missing directory.
        """
        cwd = cwd if cwd is not None else _pathlib.Path.cwd()

        if self.skills_dir:
            path = _pathlib.Path(self.skills_dir).expanduser()
            return path if path.is_absolute() else cwd / path

        default = cwd / constants.DEFAULT_SKILLS_SUBDIR
        if default.is_dir():
            return default
        return cwd

    def get_unknown_keys(self) -> dict[str, _typing.Any]:
        """
        Return all configuration keys that are not part of the schema.

        Keys are dotted paths (e.g. "install.dri"), which usually point at
        typos in a config file or environment variable.
        """
        result: dict[str, _typing.Any] = {
            key: value
            for key, value in (self.model_extra or {}).items()
            if key not in _ENVIRONMENT_ONLY_KEYS
        }
        for section_name in ("validation", "install", "logging", "output"):
            section: types.ConfigBase = getattr(self, section_name)
            result.update(section.collect_all_extra_fields(section_name))
        return result
