"""
Skill catalog: lookup, search, categories and statistics.

The catalog coordinates discovery, parsing and validation for one skills
root. Categories come from an optional manifest (categories.yaml at the
skills root) and from the `category` key in each skill's frontmatter, so
new skills show up in grouped listings without editing any hardcoded list.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import yaml as _yaml

import skillkeeper.constants as constants
import skillkeeper.skills.discovery as discovery
import skillkeeper.skills.skill as skill_module
import skillkeeper.skills.validator as validator

if _typing.TYPE_CHECKING:
    import skillkeeper.config as _config

_logger = _logging.getLogger(__name__)


class SkillNotFoundError(LookupError):
    """Raised when a skill identifier has no directory or descriptor."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Skill '{name}' not found")


class ManifestError(ValueError):
    """Raised when the category manifest cannot be read or has the wrong shape."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in category manifest {path}: {message}")


@_dataclasses.dataclass(frozen=True)
class SkillSummary:
    """Identifier and description of one skill, as shown in listings."""

    name: str
    description: str | None
    category: str | None
    path: _pathlib.Path

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "path": str(self.path),
        }


@_dataclasses.dataclass
class CategoryGroup:
    """A named category and its skills, in display order."""

    name: str
    skills: list[SkillSummary] = _dataclasses.field(default_factory=list)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "skills": [s.to_dict() for s in self.skills],
        }


@_dataclasses.dataclass
class CatalogStats:
    """Counts describing a skills root."""

    root: _pathlib.Path
    descriptor_files: int
    skill_directories: int
    valid: int
    invalid: int
    warnings: int
    categories: dict[str, int]

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "root": str(self.root),
            "descriptor_files": self.descriptor_files,
            "skill_directories": self.skill_directories,
            "valid": self.valid,
            "invalid": self.invalid,
            "warnings": self.warnings,
            "categories": dict(self.categories),
        }


class SkillCatalog:
    """
    All skills under one skills root.

    Example:
        catalog = SkillCatalog(pathlib.Path("skills"))
        for group in catalog.categorize():
            print(group.name, [s.name for s in group.skills])
        report = catalog.validate()
        raise SystemExit(report.exit_code)
    """

    def __init__(
        self,
        root: _pathlib.Path,
        *,
        descriptor_name: str = constants.DEFAULT_DESCRIPTOR_NAME,
        description_prefix: str = constants.DEFAULT_DESCRIPTION_PREFIX,
        manifest_name: str = constants.DEFAULT_MANIFEST_NAME,
    ) -> None:
        """
        Initialize the catalog.

        Args:
            root: Skills root directory.
            descriptor_name: Descriptor file name inside each skill directory.
            description_prefix: Text descriptions are expected to start with.
            manifest_name: Category manifest file name at the root.
        """
        self._discovery = discovery.SkillDiscovery(root, descriptor_name)
        self._validator = validator.SkillValidator(description_prefix)
        self._manifest_name = manifest_name

    @classmethod
    def from_settings(
        cls,
        settings: _config.Settings,
        root: _pathlib.Path | None = None,
    ) -> SkillCatalog:
        """Create a catalog using the configured skills root and rules."""
        return cls(
            root if root is not None else settings.resolve_skills_dir(),
            descriptor_name=settings.validation.descriptor_name,
            description_prefix=settings.validation.description_prefix,
            manifest_name=settings.validation.manifest_name,
        )

    @property
    def root(self) -> _pathlib.Path:
        """Skills root directory."""
        return self._discovery.root

    @property
    def manifest_path(self) -> _pathlib.Path:
        """Path of the category manifest (may not exist)."""
        return self.root / self._manifest_name

    # Lookup
    def directories(self) -> list[discovery.SkillDirectory]:
        """All skill directories, sorted by name."""
        return self._discovery.discover()

    def get(self, name: str, *, require_descriptor: bool = True) -> discovery.SkillDirectory:
        """
        Get a skill directory by identifier.

        Args:
            name: Skill identifier (directory name).
            require_descriptor: Also require the descriptor file to exist.

        Raises:
            SkillNotFoundError: If there is no such skill.
            SkillsDirectoryNotFoundError: If the skills root is missing.
        """
        directory = self._discovery.get(name)
        if directory is None or (require_descriptor and not directory.has_descriptor):
            raise SkillNotFoundError(name)
        return directory

    def load(self, name: str) -> skill_module.Skill:
        """
        Parse a skill's descriptor.

        Raises:
            SkillNotFoundError: If there is no such skill.
            FrontmatterError: If the descriptor cannot be parsed.
        """
        directory = self.get(name)
        return skill_module.load_skill(directory.path, directory.descriptor_name)

    def summarize(self, directory: discovery.SkillDirectory) -> SkillSummary:
        """Build the listing summary for a skill directory."""
        description: str | None = None
        category: str | None = None
        try:
            skill = skill_module.load_skill(directory.path, directory.descriptor_name)
        except FileNotFoundError:
            pass
        except (skill_module.FrontmatterError, OSError) as e:
            _logger.debug("Cannot summarize %s: %s", directory.name, e)
        else:
            description = skill.description
            category = skill.category
        return SkillSummary(directory.name, description, category, directory.path)

    def summaries(self) -> list[SkillSummary]:
        """Summaries of every skill that has a descriptor, in directory order."""
        return [self.summarize(d) for d in self.directories() if d.has_descriptor]

    # Search
    def search(self, keyword: str) -> list[SkillSummary]:
        """
        Find skills whose descriptor contains `keyword`, ignoring case.

        The whole descriptor file is searched, not only name and
        description. Results keep directory order.

        Raises:
            ValueError: If the keyword is empty or only whitespace.
        """
        if not keyword or not keyword.strip():
            raise ValueError("search keyword must not be empty")

        needle = keyword.casefold()
        matches: list[SkillSummary] = []
        for directory in self.directories():
            if not directory.has_descriptor:
                continue
            try:
                text = directory.read_descriptor()
            except OSError as e:
                _logger.warning("Cannot read %s: %s", directory.descriptor_path, e)
                continue
            if needle in text.casefold():
                matches.append(self.summarize(directory))
        _logger.debug("Search for %r matched %d skill(s)", keyword, len(matches))
        return matches

    # Categories
    def load_manifest(self) -> dict[str, list[str]] | None:
        """
        Read the category manifest.

        Returns:
            Ordered mapping of category name to skill identifiers, or None
            if the skills root has no manifest.

        Raises:
            ManifestError: If the manifest is unreadable or malformed.
        """
        path = self.manifest_path
        if not path.is_file():
            return None

        try:
            data = _yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ManifestError(path, f"cannot read file: {e}") from e
        except _yaml.YAMLError as e:
            raise ManifestError(path, f"invalid YAML: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict) or not isinstance(data.get("categories", {}), dict):
            raise ManifestError(path, "expected a 'categories' mapping")

        manifest: dict[str, list[str]] = {}
        for category, members in (data.get("categories") or {}).items():
            if members is None:
                members = []
            if not isinstance(members, list):
                raise ManifestError(path, f"category '{category}' must be a list of skills")
            manifest[str(category)] = [str(m) for m in members]
        return manifest

    def categorize(self) -> list[CategoryGroup]:
        """
        Group skills (those with a descriptor) by category.

        Order: manifest categories in file order, then categories first
        named in frontmatter, then "Uncategorized". A skill listed in the
        manifest stays in its manifest category. Empty groups are dropped.
        """
        summaries = self.summaries()
        by_name = {s.name: s for s in summaries}
        groups: dict[str, CategoryGroup] = {}
        assigned: set[str] = set()

        for category, members in (self.load_manifest() or {}).items():
            group = groups.setdefault(category, CategoryGroup(category))
            for member in members:
                if member in by_name and member not in assigned:
                    group.skills.append(by_name[member])
                    assigned.add(member)

        leftovers: list[SkillSummary] = []
        for summary in summaries:
            if summary.name in assigned:
                continue
            if summary.category:
                groups.setdefault(summary.category, CategoryGroup(summary.category))
                groups[summary.category].skills.append(summary)
            else:
                leftovers.append(summary)

        if leftovers:
            groups.setdefault(constants.UNCATEGORIZED, CategoryGroup(constants.UNCATEGORIZED))
            groups[constants.UNCATEGORIZED].skills.extend(leftovers)

        return [g for g in groups.values() if g.skills]

    def manifest_issues(self) -> list[validator.Issue]:
        """
        Check the category manifest against the skill directories.

        Returns no issues when there is no manifest.
        """
        try:
            manifest = self.load_manifest()
        except ManifestError as e:
            return [validator.Issue(validator.Severity.ERROR, "invalid-manifest", str(e))]
        if manifest is None:
            return []

        issues: list[validator.Issue] = []
        directories = {d.name: d for d in self.directories()}
        seen: set[str] = set()

        for category, members in manifest.items():
            for member in members:
                if member in seen:
                    issues.append(
                        validator.Issue(
                            validator.Severity.WARNING,
                            "manifest-duplicate-skill",
                            f"listed more than once in {self._manifest_name} "
                            f"(again under '{category}')",
                            member,
                        )
                    )
                    continue
                seen.add(member)
                if member not in directories:
                    issues.append(
                        validator.Issue(
                            validator.Severity.WARNING,
                            "manifest-missing-skill",
                            f"listed under '{category}' in {self._manifest_name} "
                            "but no such skill directory",
                            member,
                        )
                    )

        for name, directory in directories.items():
            if name in seen or not directory.has_descriptor:
                continue
            if self.summarize(directory).category is None:
                issues.append(
                    validator.Issue(
                        validator.Severity.WARNING,
                        "uncategorized-skill",
                        f"not listed in {self._manifest_name} and has no 'category' field",
                        name,
                    )
                )

        return issues

    # Validation
    def validate(
        self,
        name: str | None = None,
        *,
        on_check: _typing.Callable[[validator.SkillCheck], None] | None = None,
    ) -> validator.ValidationReport:
        """
        Validate every skill, or a single skill by name.

        Args:
            name: Only validate this skill (manifest checks are skipped).
            on_check: Called with each skill's result as soon as it is ready.

        Raises:
            SkillNotFoundError: If `name` has no skill directory.
        """
        if name is not None:
            directories = [self.get(name, require_descriptor=False)]
        else:
            directories = self.directories()

        report = validator.ValidationReport()
        for check in self._validator.iter_checks(directories):
            report.checks.append(check)
            if on_check is not None:
                on_check(check)

        if name is None:
            report.catalog_issues.extend(self.manifest_issues())

        _logger.debug(
            "Validated %d skill(s): %d error(s), %d warning(s)",
            len(report.checks),
            report.error_count,
            report.warning_count,
        )
        return report

    # Statistics
    def stats(self) -> CatalogStats:
        """Compute statistics from the files on disk."""
        report = self.validate()
        return CatalogStats(
            root=self.root,
            descriptor_files=self._discovery.count_descriptor_files(),
            skill_directories=len(report.checks),
            valid=report.passed_count,
            invalid=report.failed_count,
            warnings=report.warning_count,
            categories={g.name: len(g.skills) for g in self.categorize()},
        )
