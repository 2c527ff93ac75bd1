from __future__ import annotations

import ast
import sys
from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = ROOT / "src" / "chrome_trace_converter"

# Import name -> distribution name on the index.
DISTRIBUTIONS = {
    "capnp": "pycapnp",
    "pydantic": "pydantic",
    "pydantic_core": "pydantic-core",
    "pydantic_settings": "pydantic-settings",
    "typer": "typer",
}


def _third_party_imports():
    found = set()
    for py_file in SRC_DIR.rglob("*.py"):
        tree = ast.parse(py_file.read_text(encoding="utf-8"))
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                names = [alias.name for alias in node.names]
            elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
                names = [node.module]
            else:
                continue
            for name in names:
                top = name.split(".")[0]
                if top != "__future__" and top not in sys.stdlib_module_names:
                    found.add(top)
    return found


def test_every_imported_library_is_declared():
    project = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    declared = {
        dep.split(">")[0].split("=")[0].split("<")[0].strip().lower()
        for dep in project["dependencies"]
    }
    imported = _third_party_imports()
    unknown = imported - set(DISTRIBUTIONS)
    assert not unknown, f"Add a distribution mapping for {sorted(unknown)}"
    missing = sorted(DISTRIBUTIONS[name] for name in imported if DISTRIBUTIONS[name] not in declared)
    assert not missing, f"Imported but not declared in pyproject.toml: {missing}"
