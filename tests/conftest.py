from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskflow_api.main import create_app
from taskflow_api.settings import Settings


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every data file at a per-test temporary directory."""
    return Settings(
        persistence_backend="json",
        tasks_file_path=str(tmp_path / "data" / "tasks.json"),
        quotes_file_path=str(tmp_path / "data" / "quotes.json"),
        weather_api_key=None,
        default_city="Dubai",
        static_dir=None,
    )


@pytest.fixture()
def client(settings: Settings) -> TestClient:
    """Client over a fresh app whose task file holds the seed collection."""
    return TestClient(create_app(settings))


@pytest.fixture()
def empty_client(settings: Settings) -> TestClient:
    """Client over a fresh app whose task file holds an empty collection."""
    path = Path(settings.tasks_file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([]), encoding="utf-8")
    return TestClient(create_app(settings))
