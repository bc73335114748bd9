"""Streaming repository over the Firebase Realtime Database."""

from .adapters.realtime_db import (
    ConfigurationError,
    FirebaseRealtimeDatabase,
    RepositoryError,
    SnapshotStream,
    WriteError,
)
from .config import RealtimeDatabaseConfig
from .contracts import SERVER_TIMESTAMP, Record, StreamRepository

__all__ = [
    "SERVER_TIMESTAMP",
    "ConfigurationError",
    "FirebaseRealtimeDatabase",
    "RealtimeDatabaseConfig",
    "Record",
    "RepositoryError",
    "SnapshotStream",
    "StreamRepository",
    "WriteError",
]
