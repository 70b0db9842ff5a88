"""
Tests for the installable module list.
"""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _project():
    with PYPROJECT.open("rb") as fh:
        return tomllib.load(fh)


class TestModules:
    def test_streamlit_script_is_not_installed(self):
        assert "app" not in _project()["tool"]["setuptools"]["py-modules"]

    def test_core_modules_are_installed(self):
        modules = set(_project()["tool"]["setuptools"]["py-modules"])
        assert modules == {"config", "defaults", "export", "model", "wizard"}

    def test_settings_library_declared(self):
        deps = " ".join(_project()["project"]["dependencies"])
        assert "pydantic-settings" in deps
