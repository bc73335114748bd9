"""Configuration utilities and loaders."""

from .realtime_db import DEFAULT_APP_NAME, RealtimeDatabaseConfig

__all__ = [
    "DEFAULT_APP_NAME",
    "RealtimeDatabaseConfig",
]
