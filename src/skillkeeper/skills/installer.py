"""
Install skills into an agent runtime's skill directory.

Installing copies the whole skill directory to `<install_dir>/<name>`.
An existing installation with the same name is always replaced: it is
removed first, so the result mirrors the source exactly. The copy is not
transactional; a failure part way through can leave a partial copy.
A destination that overlaps the skill directory itself is refused before
anything is removed.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import shutil as _shutil
import typing as _typing

import skillkeeper.skills.discovery as discovery

_logger = _logging.getLogger(__name__)


class InstallError(Exception):
    """Raised when a skill cannot be copied to the install directory."""

    def __init__(self, name: str, destination: _pathlib.Path, reason: str) -> None:
        self.name = name
        self.destination = destination
        super().__init__(f"Failed to install skill {name} to {destination}: {reason}")


@_dataclasses.dataclass(frozen=True)
class InstallResult:
    """Outcome of installing one skill."""

    name: str
    source: _pathlib.Path
    destination: _pathlib.Path
    replaced: bool
    """True when an earlier installation was overwritten."""

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "source": str(self.source),
            "destination": str(self.destination),
            "replaced": self.replaced,
        }


class SkillInstaller:
    """Copies skill directories into an install directory."""

    def __init__(self, install_dir: _pathlib.Path) -> None:
        """
        Initialize the installer.

        Args:
            install_dir: Directory that receives one sub-directory per skill.
        """
        self._install_dir = install_dir

    @property
    def install_dir(self) -> _pathlib.Path:
        """Directory skills are installed into."""
        return self._install_dir

    def destination_for(self, name: str) -> _pathlib.Path:
        """Where a skill with this identifier is installed."""
        return self._install_dir / name

    def install(self, directory: discovery.SkillDirectory) -> InstallResult:
        """
        Install one skill, replacing any earlier installation.

        Raises:
            InstallError: If the copy fails, or if the destination and the
                source directory overlap.
        """
        destination = self.destination_for(directory.name)
        self._check_overlap(directory, destination)
        replaced = destination.exists() or destination.is_symlink()

        try:
            self._install_dir.mkdir(parents=True, exist_ok=True)
            if replaced:
                _logger.debug("Removing previous installation at %s", destination)
                if destination.is_dir() and not destination.is_symlink():
                    _shutil.rmtree(destination)
                else:
                    destination.unlink()
            _shutil.copytree(directory.path, destination, symlinks=True)
        except OSError as e:
            raise InstallError(directory.name, destination, str(e)) from e

        _logger.debug("Copied %s to %s", directory.path, destination)
        return InstallResult(directory.name, directory.path, destination, replaced)

    def _check_overlap(
        self,
        directory: discovery.SkillDirectory,
        destination: _pathlib.Path,
    ) -> None:
        """Refuse destinations that would remove or nest inside the source."""
        source = directory.path.resolve()
        target = destination.resolve()
        if target == source:
            raise InstallError(
                directory.name, destination, "destination is the skill's own directory"
            )
        if target.is_relative_to(source):
            raise InstallError(directory.name, destination, "destination is inside the skill")
        if source.is_relative_to(target):
            raise InstallError(directory.name, destination, "destination contains the skill")

    def install_all(
        self,
        directories: _typing.Iterable[discovery.SkillDirectory],
    ) -> list[InstallResult]:
        """
        Install every directory that has a descriptor.

        Stops at the first failure (raising InstallError); skills installed
        before it stay installed.
        """
        results: list[InstallResult] = []
        for directory in directories:
            if not directory.has_descriptor:
                _logger.debug("Skipping %s: no descriptor", directory.name)
                continue
            results.append(self.install(directory))
        return results
