"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from taskboard.main import app, get_repository
from taskboard.repos.json_file import JsonFileRepository


@pytest.fixture()
def data_repo(tmp_path: Path) -> JsonFileRepository:
    """A repository on a fresh data file, wired into the app for this test."""
    repo = JsonFileRepository(tmp_path / "app-data.json")
    app.dependency_overrides[get_repository] = lambda: repo
    yield repo
    app.dependency_overrides.clear()
