"""
Skill validation.

Each skill is checked in order, stopping at the first error:

1. The descriptor file exists.
2. Its frontmatter can be parsed.
3. The frontmatter has a `name`.
4. The frontmatter has a `description`.
5. The description starts with the required prefix (warning only).

Results are yielded per skill as they are produced so callers can print
them immediately, and are collected into a ValidationReport.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import logging as _logging
import typing as _typing

import skillkeeper.constants as constants
import skillkeeper.skills.discovery as discovery
import skillkeeper.skills.skill as skill_module

_logger = _logging.getLogger(__name__)


class Severity(str, _enum.Enum):
    """How serious a validation finding is."""

    ERROR = "error"
    WARNING = "warning"


class CheckStatus(str, _enum.Enum):
    """Outcome of validating a single skill."""

    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"


@_dataclasses.dataclass(frozen=True)
class Issue:
    """One validation finding."""

    severity: Severity
    code: str
    message: str
    skill: str | None = None

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "skill": self.skill,
        }


@_dataclasses.dataclass
class SkillCheck:
    """Validation outcome for one skill."""

    name: str
    issues: list[Issue] = _dataclasses.field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    @property
    def status(self) -> CheckStatus:
        if self.errors:
            return CheckStatus.FAILED
        if self.warnings:
            return CheckStatus.WARNING
        return CheckStatus.PASSED

    @property
    def is_valid(self) -> bool:
        """Structurally valid: no errors (warnings allowed)."""
        return not self.errors

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "status": self.status.value,
            "issues": [i.to_dict() for i in self.issues],
        }


@_dataclasses.dataclass
class ValidationReport:
    """Aggregated result of a validation run."""

    checks: list[SkillCheck] = _dataclasses.field(default_factory=list)
    catalog_issues: list[Issue] = _dataclasses.field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(len(c.errors) for c in self.checks) + sum(
            1 for i in self.catalog_issues if i.severity is Severity.ERROR
        )

    @property
    def warning_count(self) -> int:
        return sum(len(c.warnings) for c in self.checks) + sum(
            1 for i in self.catalog_issues if i.severity is Severity.WARNING
        )

    @property
    def passed_count(self) -> int:
        return sum(1 for c in self.checks if c.is_valid)

    @property
    def failed_count(self) -> int:
        return sum(1 for c in self.checks if not c.is_valid)

    @property
    def exit_code(self) -> int:
        """Process exit status: 1 when any error was found, else 0."""
        return 1 if self.error_count else 0

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "skills": [c.to_dict() for c in self.checks],
            "catalog_issues": [i.to_dict() for i in self.catalog_issues],
            "summary": {
                "skills": len(self.checks),
                "passed": self.passed_count,
                "failed": self.failed_count,
                "errors": self.error_count,
                "warnings": self.warning_count,
            },
        }


class SkillValidator:
    """Applies the descriptor checks to skill directories."""

    def __init__(
        self,
        description_prefix: str = constants.DEFAULT_DESCRIPTION_PREFIX,
    ) -> None:
        """
        Initialize the validator.

        Args:
            description_prefix: Text descriptions are expected to start with.
        """
        self._description_prefix = description_prefix

    def check(self, directory: discovery.SkillDirectory) -> SkillCheck:
        """Validate one skill directory."""
        result = SkillCheck(name=directory.name)

        def error(code: str, message: str) -> SkillCheck:
            result.issues.append(Issue(Severity.ERROR, code, message, directory.name))
            return result

        if not directory.has_descriptor:
            return error(
                "missing-descriptor",
                f"{directory.descriptor_name} not found",
            )

        try:
            skill = skill_module.load_skill(directory.path, directory.descriptor_name)
        except skill_module.FrontmatterError as e:
            return error("invalid-frontmatter", str(e))
        except OSError as e:
            _logger.warning("Cannot read %s: %s", directory.descriptor_path, e)
            return error("unreadable-descriptor", f"cannot read descriptor: {e}")

        if skill.name is None:
            return error("missing-name", "'name' field not found in frontmatter")

        if skill.description is None:
            return error(
                "missing-description",
                "'description' field not found in frontmatter",
            )

        if self._description_prefix and not skill.description.startswith(
            self._description_prefix
        ):
            result.issues.append(
                Issue(
                    Severity.WARNING,
                    "description-prefix",
                    f"description does not start with '{self._description_prefix}'",
                    directory.name,
                )
            )

        return result

    def iter_checks(
        self,
        directories: _typing.Iterable[discovery.SkillDirectory],
    ) -> _typing.Iterator[SkillCheck]:
        """Validate directories one at a time, in the order given."""
        for directory in directories:
            yield self.check(directory)
