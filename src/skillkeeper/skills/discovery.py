"""
Skill directory discovery.

Every non-hidden directory directly under the skills root is a skill; its
name is the skill identifier. Directories are returned sorted by name so
every command walks skills in the same order.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import skillkeeper.constants as constants

_logger = _logging.getLogger(__name__)


class SkillsDirectoryNotFoundError(FileNotFoundError):
    """Raised when the skills root directory does not exist."""

    def __init__(self, path: _pathlib.Path) -> None:
        self.path = path
        super().__init__(f"Skills directory not found: {path}")


@_dataclasses.dataclass(frozen=True)
class SkillDirectory:
    """A candidate skill: a directory under the skills root."""

    path: _pathlib.Path
    """Path to the skill directory."""

    descriptor_name: str = constants.DEFAULT_DESCRIPTOR_NAME
    """Descriptor file name expected inside the directory."""

    @property
    def name(self) -> str:
        """Skill identifier (the directory name)."""
        return self.path.name

    @property
    def descriptor_path(self) -> _pathlib.Path:
        """Path to the descriptor file (may not exist)."""
        return self.path / self.descriptor_name

    @property
    def has_descriptor(self) -> bool:
        """Whether the descriptor file exists."""
        return self.descriptor_path.is_file()

    def read_descriptor(self) -> str:
        """
        Read the descriptor as text.

        Undecodable bytes are replaced rather than raising.

        Raises:
            FileNotFoundError: If the descriptor doesn't exist.
        """
        return self.descriptor_path.read_text(encoding="utf-8", errors="replace")

    def read_descriptor_bytes(self) -> bytes:
        """Read the descriptor exactly as stored on disk."""
        return self.descriptor_path.read_bytes()


class SkillDiscovery:
    """
    Enumerates skill directories under a skills root.

    The root itself must exist; individual skill directories may lack a
    descriptor, and callers decide what that means.
    """

    def __init__(
        self,
        root: _pathlib.Path,
        descriptor_name: str = constants.DEFAULT_DESCRIPTOR_NAME,
    ) -> None:
        """
        Initialize skill discovery.

        Args:
            root: Skills root directory.
            descriptor_name: Descriptor file name inside each skill directory.
        """
        self._root = root
        self._descriptor_name = descriptor_name

    @property
    def root(self) -> _pathlib.Path:
        """Skills root directory."""
        return self._root

    @property
    def descriptor_name(self) -> str:
        """Descriptor file name."""
        return self._descriptor_name

    def ensure_root(self) -> None:
        """Raise SkillsDirectoryNotFoundError if the root is not a directory."""
        if not self._root.is_dir():
            raise SkillsDirectoryNotFoundError(self._root)

    def iter_directories(self) -> _typing.Iterator[SkillDirectory]:
        """
        Yield every skill directory, sorted by name.

        Raises:
            SkillsDirectoryNotFoundError: If the root does not exist.
        """
        self.ensure_root()
        _logger.debug("Scanning skills in %s", self._root)

        for path in sorted(self._root.iterdir(), key=lambda p: p.name):
            if path.name.startswith(".") or not path.is_dir():
                continue
            yield SkillDirectory(path, self._descriptor_name)

    def discover(self) -> list[SkillDirectory]:
        """Return all skill directories as a list."""
        return list(self.iter_directories())

    def get(self, name: str) -> SkillDirectory | None:
        """
        Look up a skill directory by identifier.

        Names containing path separators or pointing outside the root are
        never found.
        """
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            return None
        self.ensure_root()
        path = self._root / name
        if name.startswith(".") or not path.is_dir():
            return None
        return SkillDirectory(path, self._descriptor_name)

    def count_descriptor_files(self) -> int:
        """Count descriptor files anywhere below the root (recursive)."""
        self.ensure_root()
        return sum(1 for p in self._root.rglob(self._descriptor_name) if p.is_file())
