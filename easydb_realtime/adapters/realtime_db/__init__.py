"""Firebase Realtime Database repository and helpers."""

# Adapters Realtime Database package exports
from .base import ConfigurationError, RepositoryError, Snapshot, WriteError  # noqa: F401
from .client import RealtimeDatabase, RealtimeDatabaseClientFactory, ensure_app, health_check  # noqa: F401
from .repository import FirebaseRealtimeDatabase  # noqa: F401
from .snapshots import SERVER_VALUE_TIMESTAMP, SnapshotMirror, resolve_server_values, to_collection, to_record, to_records  # noqa: F401
from .streams import SnapshotStream  # noqa: F401
