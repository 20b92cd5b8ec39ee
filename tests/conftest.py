"""Shared pytest fixtures for the Cesta test suite."""

from __future__ import annotations

from typing import Dict, Generator, List

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from cesta.config import get_settings
from cesta.db.repository import reset_repository_state
from cesta.models.ingredients import AggregatedIngredient
from cesta.server.app import create_app


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def auth_headers() -> Dict[str, str]:
    """Headers for mutating endpoints; empty when no API token is configured."""

    token = get_settings().api_token
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def checklist() -> List[AggregatedIngredient]:
    """A small aggregated checklist with one unchecked entry."""

    return [
        AggregatedIngredient(id="arroz", name="Arroz", quantity=1.0, unit="kg"),
        AggregatedIngredient(id="feijao", name="Feijão", quantity=500.0, unit="g"),
        AggregatedIngredient(id="sal", name="Sal", quantity=1.0, unit="un", checked=False),
    ]


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database location."""

    db_path = tmp_path / "test_cesta.db"
    monkeypatch.setenv("CESTA_DATABASE_PATH", str(db_path))
    monkeypatch.delenv("CESTA_API_TOKEN", raising=False)
    monkeypatch.delenv("CESTA_DEFAULT_USER_ID", raising=False)
    get_settings.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    monkeypatch.delenv("CESTA_DATABASE_PATH", raising=False)
    get_settings.cache_clear()
