"""Provider-neutral repository contracts."""

from .repository import SERVER_TIMESTAMP, Record, StreamRepository

__all__ = [
    "SERVER_TIMESTAMP",
    "Record",
    "StreamRepository",
]
