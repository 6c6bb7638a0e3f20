"""Configuration type definitions for Skillkeeper settings.

This module defines the Pydantic models used to represent configuration
sections nested within the main Settings class:

- ValidationConfig: descriptor_name, description_prefix, manifest_name
- InstallConfig: target, dir
- LoggingConfig: level
- OutputConfig: color

All types use `extra="allow"` to preserve unknown fields, so a config file
can be audited for typos with `collect_all_extra_fields()`.
"""

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic

import skillkeeper.constants as constants

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are preserved rather than silently dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"install.dri": "/opt/skills"}

        Args:
            prefix: Dotted path prefix (used in recursion).

        Returns:
            Flat dict of path → value for all unrecognized fields.
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Validation Settings
# =============================================================================


class ValidationConfig(ConfigBase):
    """
    Skill layout and validation rules.

    YAML section: validation.*
    """

    descriptor_name: str = _pydantic.Field(
        default=constants.DEFAULT_DESCRIPTOR_NAME,
        min_length=1,
    )
    """Name of the descriptor file inside each skill directory."""

    description_prefix: str = constants.DEFAULT_DESCRIPTION_PREFIX
    """Descriptions not starting with this text produce a warning."""

    manifest_name: str = _pydantic.Field(
        default=constants.DEFAULT_MANIFEST_NAME,
        min_length=1,
    )
    """Category manifest file name at the skills root."""


# =============================================================================
# Install Settings
# =============================================================================


class InstallConfig(ConfigBase):
    """
    Where `install` copies skills to.

    YAML section: install.*
    """

    target: _typing.Literal["opencode", "claude"] = "opencode"
    """Agent runtime whose conventional skill directory is used."""

    dir: str | None = None
    """Explicit install directory. Overrides `target` when set."""

    def resolve_dir(self, home: _pathlib.Path | None = None) -> _pathlib.Path:
        """
        Resolve the directory skills are installed into.

        Args:
            home: Home directory (default: the current user's home).

        Returns:
            Absolute install directory (not necessarily existing yet).
        """
        if self.dir:
            return _pathlib.Path(self.dir).expanduser()
        home = home if home is not None else _pathlib.Path.home()
        return home.joinpath(*constants.INSTALL_TARGETS[self.target])


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["debug", "info", "warning", "error"] = "warning"
    """Log level for diagnostics written to stderr."""

    @_pydantic.field_validator("level", mode="before")
    @classmethod
    def _lowercase_level(cls, value: _typing.Any) -> _typing.Any:
        """Accept level names in any case (DEBUG, Info)."""
        if isinstance(value, str):
            return value.strip().lower()
        return value


# =============================================================================
# Output Settings
# =============================================================================


class OutputConfig(ConfigBase):
    """
    Console output settings.

    YAML section: output.*
    """

    color: bool = True
    """Colorize output when writing to a terminal."""
