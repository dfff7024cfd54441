"""
Pytest configuration and fixtures for the Survey Data API tests.

Every test gets its own SQLite file under ``tmp_path`` so tests never
share state.
"""

import asyncio
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Keep the import‑time app away from the project database.
os.environ.setdefault("DATABASE_URL", "test_import_time.db")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from survey_data_api.app.core.config import Settings
from survey_data_api.app.core.db import RecordStore
from survey_data_api.app.main import create_app
from survey_data_api.app.services.record_service import RecordService


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "survey_test.db")


@pytest.fixture
def store(db_path: str) -> RecordStore:
    """A record store with its schema applied and no rows."""
    record_store = RecordStore(db_path)
    record_store.init_schema()
    return record_store


@pytest.fixture
def service(store: RecordStore) -> RecordService:
    return RecordService(store)


@pytest.fixture
def seeded_service(service: RecordService) -> RecordService:
    """A gateway whose store holds exactly the default dataset."""
    asyncio.run(service.ensure_seeded())
    return service


@pytest.fixture
def test_settings(db_path: str) -> Settings:
    return Settings(database_url=db_path, log_level="WARNING", seed_on_startup=True)


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """Test client for an app that has run its startup (schema + seed)."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_record() -> dict:
    return {"age": "35-44", "gender": "Female", "location": "Asia", "device": "Mobile"}
