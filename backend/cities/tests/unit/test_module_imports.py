"""Type-only imports must not be evaluated at runtime on any supported Python.

Modules that import names under ``if TYPE_CHECKING:`` use them in
annotations, so they need postponed annotation evaluation.
"""

import ast
import importlib
from pathlib import Path

import pytest

_BACKEND_ROOT = Path(__file__).resolve().parents[3]
_PACKAGES = ("cities", "shared")


def _source_files() -> list[Path]:
    return sorted(py_file for package in _PACKAGES for py_file in (_BACKEND_ROOT / package).rglob("*.py"))


def _has_type_checking_block(tree: ast.Module) -> bool:
    return any(
        isinstance(node, ast.If) and isinstance(node.test, ast.Name) and node.test.id == "TYPE_CHECKING"
        for node in tree.body
    )


def _has_future_annotations(tree: ast.Module) -> bool:
    return any(
        isinstance(node, ast.ImportFrom)
        and node.module == "__future__"
        and any(alias.name == "annotations" for alias in node.names)
        for node in tree.body
    )


def test_type_checking_modules_postpone_annotations():
    violations = []
    for py_file in _source_files():
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
        if _has_type_checking_block(tree) and not _has_future_annotations(tree):
            violations.append(str(py_file.relative_to(_BACKEND_ROOT)))
    assert violations == [], f"missing 'from __future__ import annotations': {violations}"


@pytest.mark.parametrize(
    "module",
    [
        "cities.session.manager",
        "cities.messaging.router",
        "cities.server.app",
        "shared.db.achievement_repository",
    ],
)
def test_module_imports(module):
    assert importlib.import_module(module) is not None
