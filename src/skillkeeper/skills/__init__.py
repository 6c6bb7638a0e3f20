"""
Skill management for Skillkeeper.

A skill is a directory under the skills root holding a SKILL.md
descriptor: YAML frontmatter (name, description, optional category)
followed by Markdown instructions for an agent runtime.

This package provides:
- Discovery of skill directories
- Frontmatter parsing
- Validation with per-skill results and an aggregated report
- Search, category grouping and statistics
- Installation into an agent runtime's skill directory
"""

from skillkeeper.skills.catalog import (
    CategoryGroup,
    CatalogStats,
    ManifestError,
    SkillCatalog,
    SkillNotFoundError,
    SkillSummary,
)
from skillkeeper.skills.discovery import (
    SkillDirectory,
    SkillDiscovery,
    SkillsDirectoryNotFoundError,
)
from skillkeeper.skills.installer import InstallError, InstallResult, SkillInstaller
from skillkeeper.skills.skill import (
    FrontmatterError,
    Skill,
    SkillFrontmatter,
    load_skill,
    parse_skill_markdown,
)
from skillkeeper.skills.validator import (
    CheckStatus,
    Issue,
    Severity,
    SkillCheck,
    SkillValidator,
    ValidationReport,
)

__all__ = [
    # Core
    "Skill",
    "SkillFrontmatter",
    "SkillDirectory",
    # Parsing
    "FrontmatterError",
    "load_skill",
    "parse_skill_markdown",
    # Discovery
    "SkillDiscovery",
    "SkillsDirectoryNotFoundError",
    # Validation
    "CheckStatus",
    "Issue",
    "Severity",
    "SkillCheck",
    "SkillValidator",
    "ValidationReport",
    # Catalog
    "CatalogStats",
    "CategoryGroup",
    "ManifestError",
    "SkillCatalog",
    "SkillNotFoundError",
    "SkillSummary",
    # Install
    "InstallError",
    "InstallResult",
    "SkillInstaller",
]
