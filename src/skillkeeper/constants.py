"""
Shared constants for Skillkeeper.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Skill layout defaults
DEFAULT_DESCRIPTOR_NAME = "SKILL.md"
"""File inside each skill directory that describes the skill."""

DEFAULT_DESCRIPTION_PREFIX = "Use when"
"""Text every skill description is expected to start with."""

DEFAULT_MANIFEST_NAME = "categories.yaml"
"""Optional category manifest at the root of the skills directory."""

DEFAULT_SKILLS_SUBDIR = "skills"
"""Directory (relative to cwd) searched when no skills dir is configured."""

UNCATEGORIZED = "Uncategorized"
"""Category shown for skills that belong to no category."""

# Install locations, keyed by install target
INSTALL_TARGETS: dict[str, tuple[str, ...]] = {
    "opencode": (".config", "opencode", "skill"),
    "claude": (".claude", "skills"),
}
"""Install directory (relative to the home directory) for each target."""

DEFAULT_INSTALL_TARGET = "opencode"
"""Install target used when none is configured."""
