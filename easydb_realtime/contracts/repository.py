"""Generic streaming repository contract shared by all database providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Mapping, Optional


class _ServerTimestamp:
    """Marker for a field the backend must fill with its own write time."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"

    def __copy__(self) -> "_ServerTimestamp":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_ServerTimestamp":
        return self

    def __reduce__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()

Record = Dict[str, Any]


class StreamRepository(ABC):
    """Streaming key-value repository interface.

    Records live in named collections and are addressed by ``(collection, id)``.
    Reads are live: every ``watch*`` call returns an iterator that yields the
    current value each time the backend reports a change, until it is closed.
    """

    SERVER_TIMESTAMP = SERVER_TIMESTAMP

    @abstractmethod
    def init(self) -> None:
        """Prepare the backend connection."""
        pass

    @abstractmethod
    def watch(self, collection: str, id: str) -> Iterator[Optional[Record]]:
        """Stream one record, ``None`` while it is absent."""
        pass

    @abstractmethod
    def watch_all(self, collection: str) -> Iterator[Optional[Dict[str, Record]]]:
        """Stream the raw id -> record mapping of a collection."""
        pass

    @abstractmethod
    def watch_query(self, collection: str, where: Optional[Mapping[str, Any]] = None) -> Iterator[List[Record]]:
        """Stream the records of a collection matching every ``where`` equality."""
        pass

    @abstractmethod
    def set(self, collection: str, id: str, data: Mapping[str, Any]) -> None:
        """Replace a record."""
        pass

    @abstractmethod
    def update(self, collection: str, id: str, data: Mapping[str, Any]) -> None:
        """Merge fields into a record."""
        pass

    @abstractmethod
    def delete(self, collection: str, id: str) -> None:
        """Remove a record."""
        pass


__all__ = ["SERVER_TIMESTAMP", "Record", "StreamRepository"]
