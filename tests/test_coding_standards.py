"""
Tests that enforce coding standards.

These tests verify that the codebase follows our import conventions:

- No `from X import Y` outside __init__.py (re-exports are allowed there),
  except `from __future__` and imports under `if TYPE_CHECKING:`.
- Third-party and standard library modules are imported with a private
  alias (`import pathlib as _pathlib`) so they never leak as attributes
  of our modules.
"""

import ast as _ast
import pathlib as _pathlib

import pytest as _pytest

# Directories to check
SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "skillkeeper"
TESTS_DIR = _pathlib.Path(__file__).parent.parent / "tests"

PACKAGE = "skillkeeper"


def _get_python_files(directory: _pathlib.Path) -> list[_pathlib.Path]:
    """Get all Python files in a directory, recursively."""
    return sorted(directory.rglob("*.py"))


def _is_type_checking_block(node: _ast.AST) -> bool:
    if not isinstance(node, _ast.If):
        return False
    test = node.test
    if isinstance(test, _ast.Name):
        return test.id == "TYPE_CHECKING"
    return isinstance(test, _ast.Attribute) and test.attr == "TYPE_CHECKING"


def _iter_runtime_imports(tree: _ast.Module) -> list[_ast.Import | _ast.ImportFrom]:
    """Collect import statements, skipping TYPE_CHECKING blocks."""
    found: list[_ast.Import | _ast.ImportFrom] = []

    def visit(node: _ast.AST) -> None:
        if _is_type_checking_block(node):
            return
        if isinstance(node, (_ast.Import, _ast.ImportFrom)):
            found.append(node)
            return
        for child in _ast.iter_child_nodes(node):
            visit(child)

    visit(tree)
    return found


def find_from_imports(content: str) -> list[tuple[int, str]]:
    """
    Find forbidden 'from X import Y' statements.

    Returns list of (line_number, module) tuples.
    """
    violations: list[tuple[int, str]] = []
    for node in _iter_runtime_imports(_ast.parse(content)):
        if isinstance(node, _ast.ImportFrom) and node.module != "__future__":
            violations.append((node.lineno, node.module or "."))
    return violations


def find_unaliased_imports(content: str) -> list[tuple[int, str]]:
    """
    Find external modules imported without a private alias.

    Returns list of (line_number, module) tuples.
    """
    violations: list[tuple[int, str]] = []
    for node in _iter_runtime_imports(_ast.parse(content)):
        if not isinstance(node, _ast.Import):
            continue
        for alias in node.names:
            if alias.name.split(".")[0] == PACKAGE:
                continue
            if not (alias.asname or "").startswith("_"):
                violations.append((node.lineno, alias.name))
    return violations


def _collect(
    directory: _pathlib.Path,
    finder,
    *,
    skip_init: bool = True,
) -> list[str]:
    violations: list[str] = []
    for path in _get_python_files(directory):
        if skip_init and path.name == "__init__.py":
            continue
        if path.name == "test_coding_standards.py":
            continue
        for line_num, module in finder(path.read_text(encoding="utf-8")):
            violations.append(f"{path}:{line_num}: {module}")
    return violations


class TestImportStyle:
    """Tests for import style compliance."""

    @_pytest.mark.parametrize("directory", [SRC_DIR, TESTS_DIR], ids=["src", "tests"])
    def test_no_from_imports(self, directory: _pathlib.Path) -> None:
        """Modules should not use the 'from X import Y' pattern."""
        violations = _collect(directory, find_from_imports)
        if violations:
            msg = "Found forbidden 'from X import Y' imports:\n"
            msg += "\n".join(f"  {v}" for v in violations)
            msg += "\n\nUse 'import X as _x' (external) or 'import X as x' (internal) instead."
            _pytest.fail(msg)

    def test_external_imports_are_private(self) -> None:
        """External modules in src are bound to underscore-prefixed names."""
        violations = _collect(SRC_DIR, find_unaliased_imports, skip_init=False)
        if violations:
            msg = "Found external imports without a private alias:\n"
            msg += "\n".join(f"  {v}" for v in violations)
            _pytest.fail(msg)


class TestImportDetection:
    """Tests for the import detection logic itself."""

    def test_detects_from_import(self) -> None:
        assert find_from_imports("from pathlib import Path") == [(1, "pathlib")]

    def test_allows_future_imports(self) -> None:
        assert find_from_imports("from __future__ import annotations") == []

    def test_ignores_type_checking_block(self) -> None:
        content = """
import typing as _typing

if _typing.TYPE_CHECKING:
    from some_module import SomeType

def foo():
    pass
"""
        assert find_from_imports(content) == []

    def test_detects_import_after_type_checking(self) -> None:
        content = """
import typing as _typing

if _typing.TYPE_CHECKING:
    from allowed import Type

from forbidden import Other
"""
        assert find_from_imports(content) == [(7, "forbidden")]

    def test_detects_nested_from_import(self) -> None:
        """Imports inside functions are checked too."""
        content = "def f():\n    from os import path\n"
        assert find_from_imports(content) == [(2, "os")]

    def test_unaliased_external_import(self) -> None:
        assert find_unaliased_imports("import yaml") == [(1, "yaml")]
        assert find_unaliased_imports("import yaml as yml") == [(1, "yaml")]

    def test_aliased_and_internal_imports_pass(self) -> None:
        content = "import yaml as _yaml\nimport skillkeeper.skills as skills\nimport skillkeeper\n"
        assert find_unaliased_imports(content) == []
