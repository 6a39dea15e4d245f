"""Tests for the package metadata."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def test_project_metadata_does_not_point_at_internal_docs():
    project = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))["project"]
    assert project["name"] == "reparai-diagnostic-funnel"
    assert "readme" not in project
