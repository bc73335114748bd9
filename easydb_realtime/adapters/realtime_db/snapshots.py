"""Pure snapshot reshaping helpers.

Everything here is independent of live listeners so it can be exercised with
plain values. ``SnapshotMirror`` rebuilds the full value of a watched node
from the ``put``/``patch`` deltas the Realtime Database listener delivers.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Dict, List, Mapping, Optional

from easydb_realtime.contracts import SERVER_TIMESTAMP, Record

from .base import Snapshot


logger = logging.getLogger(__name__)

# Placeholder the Realtime Database replaces with its own clock at write time
SERVER_VALUE_TIMESTAMP: Dict[str, str] = {".sv": "timestamp"}


def resolve_server_values(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Swap every top-level ``SERVER_TIMESTAMP`` for the backend placeholder."""

    return {
        key: dict(SERVER_VALUE_TIMESTAMP) if value == SERVER_TIMESTAMP else value
        for key, value in data.items()
    }


def to_record(snapshot: Snapshot) -> Optional[Record]:
    """Reshape a single record node; non-mapping values count as absent."""

    if not snapshot.exists or not isinstance(snapshot.value, Mapping):
        return None

    return dict(snapshot.value)


def to_collection(snapshot: Snapshot) -> Optional[Dict[str, Record]]:
    """Reshape a collection root into its raw id -> body mapping."""

    if not snapshot.exists or not isinstance(snapshot.value, Mapping):
        return None

    return dict(snapshot.value)


def matches(record: Mapping[str, Any], where: Mapping[str, Any]) -> bool:
    """True when every ``where`` field is present and equal in ``record``."""

    for field, expected in where.items():
        if field not in record or record[field] != expected:
            return False

    return True


def to_records(snapshot: Snapshot, where: Optional[Mapping[str, Any]] = None) -> List[Record]:
    """Flatten a collection root into filtered records carrying their ``id``."""

    if not snapshot.exists or not isinstance(snapshot.value, Mapping):
        return []

    where = where or {}
    items: List[Record] = []

    for key, value in snapshot.value.items():
        if not isinstance(value, Mapping):
            continue

        item = dict(value)
        item["id"] = key

        if not where or matches(item, where):
            items.append(item)

    return items


def split_path(path: str) -> List[str]:
    """Split a listener event path such as ``/a/b`` into its segments."""

    return [segment for segment in (path or "").split("/") if segment]


class SnapshotMirror:
    """Local copy of one watched node, kept current from listener events."""

    def __init__(self) -> None:
        self._value: Any = None
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(copy.deepcopy(self._value))

    def apply(self, event_type: str, path: str, data: Any) -> Optional[Snapshot]:
        """Fold one listener event in and return the resulting snapshot.

        Returns None for event types that carry no data change.
        """

        segments = split_path(path)

        with self._lock:
            if event_type == "put":
                self._value = self._put(self._value, segments, copy.deepcopy(data))
            elif event_type == "patch":
                if not isinstance(data, Mapping):
                    logger.debug(f"Ignoring patch with non-mapping payload at {path!r}")
                    return None
                for key, child in data.items():
                    self._value = self._put(self._value, segments + split_path(key), copy.deepcopy(child))
            else:
                logger.debug(f"Ignoring listener event {event_type!r} at {path!r}")
                return None

            return Snapshot(copy.deepcopy(self._value))

    @classmethod
    def _put(cls, node: Any, segments: List[str], value: Any) -> Any:
        """Return ``node`` with ``value`` written at ``segments``; None deletes."""

        if not segments:
            return cls._prune(value)

        head, rest = segments[0], segments[1:]

        if isinstance(node, list):
            # The SDK decodes integer-keyed nodes as lists; edit them as mappings
            node = {str(index): item for index, item in enumerate(node) if item is not None}
        elif not isinstance(node, dict):
            if value is None:
                return node
            node = {}

        child = cls._put(node.get(head), rest, value)
        if child is None:
            node.pop(head, None)
        else:
            node[head] = child

        return node or None

    @classmethod
    def _prune(cls, value: Any) -> Any:
        """Drop empty mappings, which the backend never stores."""

        if isinstance(value, dict):
            pruned = {}
            for key, child in value.items():
                child = cls._prune(child)
                if child is not None:
                    pruned[key] = child
            return pruned or None

        return value


__all__ = [
    "SERVER_VALUE_TIMESTAMP",
    "SnapshotMirror",
    "matches",
    "resolve_server_values",
    "split_path",
    "to_collection",
    "to_record",
    "to_records",
]
