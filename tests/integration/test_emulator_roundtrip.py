"""End-to-end checks against a local Realtime Database emulator.

Run with ``EASYDB_RTDB_EMULATOR_TEST=localhost:9000`` after
``firebase emulators:start --only database``.
"""

import os
import uuid

import pytest

from easydb_realtime import SERVER_TIMESTAMP, FirebaseRealtimeDatabase, RealtimeDatabaseConfig

from tests.utils.assertions import assert_equals, assert_is_none, assert_record_ids, assert_true

EMULATOR_HOST = os.getenv("EASYDB_RTDB_EMULATOR_TEST")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not EMULATOR_HOST, reason="EASYDB_RTDB_EMULATOR_TEST not set"),
]


@pytest.fixture(scope="module")
def emulator_repo():
    config = RealtimeDatabaseConfig(
        database_url="https://easydb-test-default-rtdb.firebaseio.com",
        project_id="easydb-test",
        emulator_host=EMULATOR_HOST,
        app_name=f"emulator-{uuid.uuid4().hex[:8]}",
    )
    repo = FirebaseRealtimeDatabase(config)
    repo.init()
    # The SDK reads the emulator host once, when the app's database service is built
    repo.database.reference("/")
    return repo


@pytest.fixture
def collection():
    return f"it_{uuid.uuid4().hex[:12]}"


class TestEmulatorRoundtrip:
    def test_set_watch_delete(self, emulator_repo, collection):
        emulator_repo.set(collection, "u1", {"name": "ada", "created_at": SERVER_TIMESTAMP})

        with emulator_repo.watch(collection, "u1") as stream:
            record = stream.get(timeout=10)
            assert_equals(record["name"], "ada")
            assert_true(isinstance(record["created_at"], int))

            emulator_repo.delete(collection, "u1")
            assert_is_none(stream.get(timeout=10))

    def test_update_merges(self, emulator_repo, collection):
        emulator_repo.set(collection, "u1", {"a": 1, "b": 2})
        emulator_repo.update(collection, "u1", {"b": 3})

        with emulator_repo.watch(collection, "u1") as stream:
            assert_equals(stream.get(timeout=10), {"a": 1, "b": 3})

        emulator_repo.delete(collection, "u1")

    def test_watch_query(self, emulator_repo, collection):
        emulator_repo.set(collection, "u1", {"status": "online"})
        emulator_repo.set(collection, "u2", {"status": "offline"})
        emulator_repo.set(collection, "u3", {"status": "online"})

        with emulator_repo.watch_query(collection, {"status": "online"}) as stream:
            assert_record_ids(stream.get(timeout=10), ["u1", "u3"])

        for record_id in ("u1", "u2", "u3"):
            emulator_repo.delete(collection, record_id)
