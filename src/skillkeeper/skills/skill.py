"""
Skill definition and SKILL.md parsing.

Skills are defined by a descriptor file (SKILL.md) with YAML frontmatter.
The frontmatter contains metadata; the body contains instructions.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import datetime as _datetime
import logging as _logging
import pathlib as _pathlib
import re as _re
import typing as _typing

import pydantic as _pydantic
import yaml as _yaml

import skillkeeper.constants as constants

_logger = _logging.getLogger(__name__)

# Frontmatter block: a first line "---", YAML, then a closing "---" line.
# The YAML part is optional so that an empty block still parses.
_FRONTMATTER_RE = _re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)(.*)\Z",
    _re.DOTALL,
)


class FrontmatterError(ValueError):
    """Raised when a descriptor has no frontmatter or it cannot be parsed."""


class SkillFrontmatter(_pydantic.BaseModel):
    """
    Frontmatter parsed from a SKILL.md file.

    `name` and `description` are expected on every skill, but their absence
    is a validation finding rather than a parse failure, so both are
    optional here. Unknown keys are preserved.
    """

    model_config = _pydantic.ConfigDict(extra="allow", populate_by_name=True)

    name: str | None = None
    """Skill identifier (by convention equal to the directory name)."""

    description: str | None = None
    """What the skill does and when to use it."""

    category: str | None = None
    """Category shown in grouped listings."""

    license: str | None = None
    """License for the skill."""

    allowed_tools: list[str] = _pydantic.Field(
        default_factory=list,
        alias="allowed-tools",
    )
    """Tools pre-approved for use with this skill."""

    metadata: dict[str, _typing.Any] = _pydantic.Field(default_factory=dict)
    """Custom metadata for client-specific data."""

    @_pydantic.field_validator("name", "description", "category", "license", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: _typing.Any) -> str | None:
        """Accept any YAML scalar as text; blank values count as absent."""
        if value is None:
            return None
        if isinstance(value, (list, dict)):
            raise ValueError("must be a single value, not a list or mapping")
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, (_datetime.date, _datetime.datetime)):
            text = value.isoformat()
        else:
            text = str(value)
        text = text.strip()
        return text or None

    @_pydantic.field_validator("allowed_tools", mode="before")
    @classmethod
    def _coerce_tools(cls, value: _typing.Any) -> list[str]:
        """Accept a single tool name or a list."""
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value  # type: ignore[no-any-return]


@_dataclasses.dataclass
class Skill:
    """A parsed skill descriptor."""

    frontmatter: SkillFrontmatter
    """Parsed frontmatter metadata."""

    body: str
    """Skill instructions (markdown body after frontmatter)."""

    path: _pathlib.Path
    """Path to skill directory."""

    descriptor_name: str = constants.DEFAULT_DESCRIPTOR_NAME
    """Name of the descriptor file inside the directory."""

    @property
    def name(self) -> str | None:
        """Skill name from frontmatter."""
        return self.frontmatter.name

    @property
    def description(self) -> str | None:
        """Skill description from frontmatter."""
        return self.frontmatter.description

    @property
    def category(self) -> str | None:
        """Skill category from frontmatter."""
        return self.frontmatter.category

    @property
    def directory_name(self) -> str:
        """Identifier of the skill (its directory name)."""
        return self.path.name

    @property
    def skill_file(self) -> _pathlib.Path:
        """Path to the descriptor file."""
        return self.path / self.descriptor_name

    @property
    def body_line_count(self) -> int:
        """Number of lines in the skill body."""
        return len(self.body.splitlines())

    @property
    def license(self) -> str | None:
        """Skill license from frontmatter."""
        return self.frontmatter.license

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.directory_name,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "license": self.license,
            "allowed_tools": self.frontmatter.allowed_tools,
            "path": str(self.path),
            "body_lines": self.body_line_count,
        }


def _parse_flat_frontmatter(text: str) -> dict[str, str]:
    """
    Read top-level `key: value` lines from a frontmatter block.

    Only used when the block is not valid YAML. Indented and comment lines
    are skipped. A value that opens with a quoted segment loses that pair
    of quotes, so `"Use when" x: y` reads as `Use when x: y`.
    """
    data: dict[str, str] = {}
    for line in text.splitlines():
        if not line or line[0] in " \t#" or ":" not in line:
            continue
        key, _, value = line.partition(":")
        key = key.strip()
        if not key or key in data:
            continue
        value = value.strip()
        if not value:
            continue
        if value[0] in "\"'":
            end = value.find(value[0], 1)
            if end > 0:
                value = value[1:end] + value[end + 1 :]
        data[key] = value
    return data


def parse_skill_markdown(content: str) -> tuple[SkillFrontmatter, str]:
    """
    Parse a SKILL.md file into frontmatter and body.

    Args:
        content: Raw markdown content.

    Returns:
        Tuple of (frontmatter, body).

    Raises:
        FrontmatterError: If frontmatter is missing, is not valid YAML,
            or is not a mapping.
    """
    match = _FRONTMATTER_RE.match(content.lstrip("\ufeff"))
    if not match:
        raise FrontmatterError("descriptor must start with YAML frontmatter (---)")

    frontmatter_yaml = match.group(1) or ""
    body = match.group(2).strip()

    try:
        data = _yaml.safe_load(frontmatter_yaml)
    except _yaml.YAMLError as e:
        # Hand-written descriptors often carry unquoted colons ("Use when X: Y").
        data = _parse_flat_frontmatter(frontmatter_yaml)
        if not data:
            raise FrontmatterError(f"Invalid YAML in frontmatter: {e}") from e
        _logger.debug("Frontmatter is not strict YAML, read it line by line: %s", e)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"frontmatter must be a YAML mapping, got {type(data).__name__}"
        )

    try:
        frontmatter = SkillFrontmatter.model_validate(data)
    except _pydantic.ValidationError as e:
        raise FrontmatterError(f"Invalid skill frontmatter: {e}") from e

    return frontmatter, body


def load_skill(
    skill_dir: _pathlib.Path,
    descriptor_name: str = constants.DEFAULT_DESCRIPTOR_NAME,
) -> Skill:
    """
    Load a skill from a directory.

    Args:
        skill_dir: Path to skill directory (must contain the descriptor).
        descriptor_name: Descriptor file name.

    Returns:
        Parsed Skill instance.

    Raises:
        FileNotFoundError: If the descriptor doesn't exist.
        FrontmatterError: If the descriptor is invalid.
    """
    skill_file = skill_dir / descriptor_name
    if not skill_file.is_file():
        raise FileNotFoundError(f"{descriptor_name} not found: {skill_file}")

    _logger.debug("Parsing %s", skill_file)
    content = skill_file.read_text(encoding="utf-8", errors="replace")
    frontmatter, body = parse_skill_markdown(content)

    return Skill(
        frontmatter=frontmatter,
        body=body,
        path=skill_dir,
        descriptor_name=descriptor_name,
    )
