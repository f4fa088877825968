"""
Project conventions checked against the source tree.

- Modules import with ``import x as _x``; only package ``__init__`` files
  re-export names with ``from``
- Writes share structure, so nothing in the package deep-copies
- Modules that log do it through a module-level ``_logger``
"""

import ast as _ast
import pathlib as _pathlib

import pytest as _pytest

ROOT = _pathlib.Path(__file__).parent.parent
PACKAGE_DIR = ROOT / "src" / "unchanged"
TESTS_DIR = ROOT / "tests"

PACKAGE_MODULES = sorted(PACKAGE_DIR.rglob("*.py"))
TEST_MODULES = sorted(TESTS_DIR.rglob("*.py"))


def _parse(path: _pathlib.Path) -> _ast.Module:
    return _ast.parse(path.read_text(), filename=str(path))


def _label(path: _pathlib.Path) -> str:
    return str(path.relative_to(ROOT))


def from_imports(tree: _ast.Module) -> list[tuple[int, str]]:
    """List (line, module) for every ``from module import ...`` except __future__."""
    return [
        (node.lineno, node.module or ".")
        for node in _ast.walk(tree)
        if isinstance(node, _ast.ImportFrom) and node.module != "__future__"
    ]


def unaliased_imports(tree: _ast.Module) -> list[tuple[int, str]]:
    """List (line, name) for imports of other distributions lacking an ``_`` alias."""
    found: list[tuple[int, str]] = []
    for node in _ast.walk(tree):
        if not isinstance(node, _ast.Import):
            continue
        for alias in node.names:
            if alias.name.split(".")[0] == "unchanged":
                continue
            if not (alias.asname or "").startswith("_"):
                found.append((node.lineno, alias.name))
    return found


def deepcopy_uses(tree: _ast.Module) -> list[int]:
    """Lines that mention deepcopy as a name, attribute or imported symbol."""
    lines: list[int] = []
    for node in _ast.walk(tree):
        if isinstance(node, _ast.Attribute) and node.attr == "deepcopy":
            lines.append(node.lineno)
        elif isinstance(node, _ast.Name) and node.id == "deepcopy":
            lines.append(node.lineno)
        elif isinstance(node, _ast.ImportFrom) and any(a.name == "deepcopy" for a in node.names):
            lines.append(node.lineno)
    return sorted(lines)


def imports_logging(tree: _ast.Module) -> bool:
    return any(
        isinstance(node, _ast.Import) and any(alias.name == "logging" for alias in node.names)
        for node in tree.body
    )


def defines_module_logger(tree: _ast.Module) -> bool:
    """Check for a top-level ``_logger = _logging.getLogger(__name__)``."""
    for node in tree.body:
        if not isinstance(node, _ast.Assign) or not isinstance(node.value, _ast.Call):
            continue
        targets = [target.id for target in node.targets if isinstance(target, _ast.Name)]
        call = node.value
        if (
            targets == ["_logger"]
            and isinstance(call.func, _ast.Attribute)
            and call.func.attr == "getLogger"
            and len(call.args) == 1
            and isinstance(call.args[0], _ast.Name)
            and call.args[0].id == "__name__"
        ):
            return True
    return False


class TestCheckers:
    """The checkers flag what they are meant to flag."""

    def test_from_import_found(self) -> None:
        """from-imports are reported, __future__ is not."""
        tree = _ast.parse("from __future__ import annotations\nimport os as _os\nfrom os import path\n")

        assert from_imports(tree) == [(3, "os")]

    def test_unaliased_import_found(self) -> None:
        """Bare and public aliases are reported, package imports are not."""
        tree = _ast.parse("import json\nimport yaml as y\nimport re as _re\nimport unchanged.errors as errors\n")

        assert unaliased_imports(tree) == [(1, "json"), (2, "yaml")]

    def test_deepcopy_found(self) -> None:
        """Every spelling of deepcopy is caught."""
        tree = _ast.parse("import copy as _copy\n_copy.deepcopy(x)\nfrom copy import deepcopy\n")

        assert deepcopy_uses(tree) == [2, 3]

    def test_module_logger_recognised(self) -> None:
        """Only the module-name logger assignment counts."""
        good = _ast.parse("import logging as _logging\n_logger = _logging.getLogger(__name__)\n")
        named = _ast.parse("import logging as _logging\n_logger = _logging.getLogger('x')\n")

        assert defines_module_logger(good)
        assert not defines_module_logger(named)


class TestImportStyle:
    """Import conventions across the package and its tests."""

    @_pytest.mark.parametrize("path", PACKAGE_MODULES + TEST_MODULES, ids=_label)
    def test_no_from_imports_outside_init(self, path: _pathlib.Path) -> None:
        """Names are reached through module aliases, except in __init__ re-exports."""
        if path.name == "__init__.py" and path.is_relative_to(PACKAGE_DIR):
            _pytest.skip("package __init__ re-exports")

        assert from_imports(_parse(path)) == []

    @_pytest.mark.parametrize("path", PACKAGE_MODULES, ids=_label)
    def test_external_imports_are_private(self, path: _pathlib.Path) -> None:
        """Standard library and third-party modules are bound to _-prefixed names."""
        assert unaliased_imports(_parse(path)) == []


class TestStructuralSharing:
    """Writes copy only what lies on the path."""

    @_pytest.mark.parametrize("path", PACKAGE_MODULES, ids=_label)
    def test_no_deepcopy(self, path: _pathlib.Path) -> None:
        """The package never deep-copies."""
        assert deepcopy_uses(_parse(path)) == []


class TestLogging:
    """Logging goes through per-module loggers."""

    @_pytest.mark.parametrize("path", PACKAGE_MODULES, ids=_label)
    def test_module_logger(self, path: _pathlib.Path) -> None:
        """A module importing logging defines _logger from __name__."""
        tree = _parse(path)
        if not imports_logging(tree):
            _pytest.skip("module does not log")

        assert defines_module_logger(tree)
