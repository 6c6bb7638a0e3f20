"""
Skillkeeper - manage a directory of agent skills.

Lists, searches, validates and installs skills: directories holding a
SKILL.md descriptor with YAML frontmatter.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("skillkeeper")
__version_info__: tuple[int, int, int] = tuple(  # type: ignore[assignment]
    int(x) for x in _raw_version.split(".")[:3]
)
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Skillkeeper Contributors"

from skillkeeper.config import Settings  # noqa: E402
from skillkeeper.skills import SkillCatalog  # noqa: E402

__all__ = ["__version__", "__version_info__", "Settings", "SkillCatalog"]
