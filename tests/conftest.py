"""
Shared pytest fixtures for Skillkeeper tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import click.testing as _click_testing
import pytest as _pytest

import skillkeeper.config as config

VALID_DESCRIPTION = "Use when writing Gherkin scenarios for a feature"


def write_skill(
    root: _pathlib.Path,
    name: str,
    *,
    description: str | None = VALID_DESCRIPTION,
    skill_name: str | None = None,
    extra: str = "",
    body: str | None = None,
) -> _pathlib.Path:
    """
    Create a skill directory with a SKILL.md descriptor.

    Args:
        root: Skills root.
        name: Directory name (skill identifier).
        description: Frontmatter description, or None to omit the key.
        skill_name: Frontmatter name (defaults to the directory name).
        extra: Additional frontmatter lines.
        body: Markdown after the frontmatter.

    Returns:
        Path to the skill directory.
    """
    skill_dir = root / name
    skill_dir.mkdir(parents=True, exist_ok=True)
    lines = ["---", f"name: {skill_name or name}"]
    if description is not None:
        lines.append(f"description: {description}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    text = "\n".join(lines) + "\n" + (body if body is not None else f"\n# {name}\n\nSteps.\n")
    (skill_dir / "SKILL.md").write_text(text, encoding="utf-8")
    return skill_dir


@_pytest.fixture(autouse=True)
def isolated_env(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Iterator[None]:
    """
    Isolate every test from the user's environment and config files.

    Clears SKILLKEEPER_* variables, points the user config directory and
    HOME at empty temporary directories, and runs the test from an empty
    working directory so no project config is picked up.
    """
    for key in list(_os.environ):
        if key.startswith("SKILLKEEPER_"):
            monkeypatch.delenv(key)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("SKILLKEEPER_CONFIG_DIR", str(home / ".config" / "skillkeeper"))

    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield


@_pytest.fixture
def home_dir(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """The temporary HOME set up by isolated_env."""
    return tmp_path / "home"


@_pytest.fixture
def clean_settings() -> config.Settings:
    """Settings built only from the bundled defaults."""
    return config.Settings.construct_without_dotenv()


@_pytest.fixture
def skills_root(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """An empty skills root directory."""
    root = tmp_path / "skills"
    root.mkdir()
    return root


@_pytest.fixture
def populated_root(skills_root: _pathlib.Path) -> _pathlib.Path:
    """
    A skills root with a mix of valid and broken skills.

    - bdd-scenario-writer: valid
    - code-reviewer: valid, category "Quality"
    - legacy-helper: description without the "Use when" prefix (warning)
    - no-description: frontmatter lacks a description (error)
    - empty-dir: no SKILL.md at all (error)
    """
    write_skill(skills_root, "bdd-scenario-writer")
    write_skill(
        skills_root,
        "code-reviewer",
        description="Use when reviewing a pull request",
        extra="category: Quality",
    )
    write_skill(skills_root, "legacy-helper", description="Helps with legacy code")
    write_skill(skills_root, "no-description", description=None)
    (skills_root / "empty-dir").mkdir()
    return skills_root


@_pytest.fixture
def runner() -> _click_testing.CliRunner:
    """Click test runner."""
    return _click_testing.CliRunner()


@_pytest.fixture
def make_skill() -> _typing.Callable[..., _pathlib.Path]:
    """The write_skill helper, for tests that build their own layouts."""
    return write_skill
