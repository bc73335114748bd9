"""Top-level pytest configuration for the repository test suites."""

from __future__ import annotations

from typing import Generator
from unittest.mock import patch

import pytest

from easydb_realtime.adapters.realtime_db import FirebaseRealtimeDatabase

from tests.utils.mocks.realtime_db import FakeRealtimeDatabase


_RTDB_ENV_VARS = (
    "EASYDB_RTDB_URL",
    "FIREBASE_DATABASE_URL",
    "GOOGLE_CLOUD_PROJECT",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "FIREBASE_DATABASE_EMULATOR_HOST",
    "EASYDB_RTDB_APP_NAME",
    "EASYDB_RTDB_HTTP_TIMEOUT_S",
)


def pytest_configure(config: pytest.Config) -> None:  # pragma: no cover - configuration hook
    """Register global markers used across the repository."""

    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests against an emulator")
    config.addinivalue_line("markers", "streams: Live stream behaviour")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Ensure sensible default markers based on collection context."""

    for item in items:
        if not any(marker.name == "integration" for marker in item.iter_markers()):
            item.add_marker(pytest.mark.unit)

        if "stream" in str(item.fspath):
            item.add_marker(pytest.mark.streams)


@pytest.fixture(autouse=True)
def _isolated_rtdb_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shells from leaking database settings into tests."""

    for name in _RTDB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_db() -> FakeRealtimeDatabase:
    """Empty in-memory Realtime Database."""

    return FakeRealtimeDatabase()


@pytest.fixture
def repo(fake_db: FakeRealtimeDatabase) -> Generator[FirebaseRealtimeDatabase, None, None]:
    """Repository wired to the fake database, with Firebase app lookup disabled."""

    with patch("easydb_realtime.adapters.realtime_db.client.firebase_admin.get_app", side_effect=ValueError("no app")):
        yield FirebaseRealtimeDatabase(database=fake_db)
