"""Streaming repository backed by the Firebase Realtime Database."""

from __future__ import annotations

import logging
import threading
from functools import partial
from typing import Any, Dict, List, Mapping, Optional

import firebase_admin
from firebase_admin import exceptions as firebase_exceptions

from easydb_realtime.config import DEFAULT_APP_NAME, RealtimeDatabaseConfig
from easydb_realtime.contracts import Record, StreamRepository

from .base import DatabaseBoundary, ReferenceBoundary, write_error_from
from .client import RealtimeDatabase, ensure_app
from .snapshots import resolve_server_values, to_collection, to_record, to_records
from .streams import SnapshotStream

# Failures a mutation may raise: backend rejections and SDK argument checks
_WRITE_FAILURES = (firebase_exceptions.FirebaseError, ValueError, TypeError)


class FirebaseRealtimeDatabase(StreamRepository):
    """Realtime Database implementation of ``StreamRepository``.

    Records live at ``/{collection}/{id}``. The database handle is resolved
    once: from ``database`` when injected, otherwise from ``app`` or the
    Firebase app initialised by ``init()``.
    """

    def __init__(
        self,
        config: Optional[RealtimeDatabaseConfig] = None,
        *,
        app: Optional[firebase_admin.App] = None,
        database: Optional[DatabaseBoundary] = None,
        max_pending: int = 0,
    ):
        """Constructor injection only; nothing touches the network here."""

        self.config = config # Used by init() when no app exists yet
        self._app = app # Firebase app
        self._database = database # Database handle
        self._injected = database is not None
        self._max_pending = max_pending # Per-stream queue bound, 0 is unbounded
        self._lock = threading.Lock()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def database(self) -> DatabaseBoundary:
        """Database handle, resolved once on first use."""

        if self._database is None:
            with self._lock:
                if self._database is None:
                    if self._app is None:
                        self._app = ensure_app(self.config, name=self._app_name)
                    self._database = RealtimeDatabase(self._app)

        return self._database

    @property
    def _app_name(self) -> str:
        return self.config.app_name if self.config is not None else DEFAULT_APP_NAME

    def init(self) -> None:
        """Ensure the Firebase app exists, initialising it from config if needed."""

        if self._injected:
            return

        with self._lock:
            if self._app is None:
                self._app = ensure_app(self.config, name=self._app_name)
            if self._database is None:
                self._database = RealtimeDatabase(self._app)

        self.logger.info(f"Realtime database ready on app {self._app.name!r}")

    def _ref(self, collection: str, id: Optional[str] = None) -> ReferenceBoundary:
        ref = self.database.reference(collection)

        return ref.child(id) if id is not None else ref

    # Streams --------------------------------------------------------------

    def watch(self, collection: str, id: str) -> SnapshotStream[Optional[Record]]:
        """Stream one record; ``None`` while absent or not a mapping."""

        return SnapshotStream(
            self._ref(collection, id),
            to_record,
            max_pending=self._max_pending,
            label=f"{collection}/{id}",
        )

    def watch_all(self, collection: str) -> SnapshotStream[Optional[Dict[str, Record]]]:
        """Stream the raw id -> record mapping of a collection."""

        return SnapshotStream(
            self._ref(collection),
            to_collection,
            max_pending=self._max_pending,
            label=collection,
        )

    def watch_query(self, collection: str, where: Optional[Mapping[str, Any]] = None) -> SnapshotStream[List[Record]]:
        """Stream matching records, filtered client-side on every change."""

        criteria = dict(where or {})

        return SnapshotStream(
            self._ref(collection),
            partial(to_records, where=criteria),
            max_pending=self._max_pending,
            label=f"{collection}?{criteria}" if criteria else collection,
        )

    # Writes ---------------------------------------------------------------

    def set(self, collection: str, id: str, data: Mapping[str, Any]) -> None:
        """Replace the record with ``data``."""

        payload = resolve_server_values(data)

        try:
            self._ref(collection, id).set(payload)
        except _WRITE_FAILURES as exc:
            raise write_error_from(f"set {collection}/{id}", exc) from exc

        self.logger.debug(f"Set {collection}/{id} ({len(payload)} fields)")

    def update(self, collection: str, id: str, data: Mapping[str, Any]) -> None:
        """Merge ``data`` into the record, leaving other fields untouched."""

        payload = resolve_server_values(data)
        if not payload:
            self.logger.debug(f"Skipping empty update for {collection}/{id}")
            return

        try:
            self._ref(collection, id).update(payload)
        except _WRITE_FAILURES as exc:
            raise write_error_from(f"update {collection}/{id}", exc) from exc

        self.logger.debug(f"Updated {collection}/{id} ({len(payload)} fields)")

    def delete(self, collection: str, id: str) -> None:
        """Remove the record node; deleting an absent record succeeds."""

        try:
            self._ref(collection, id).delete()
        except _WRITE_FAILURES as exc:
            raise write_error_from(f"delete {collection}/{id}", exc) from exc

        self.logger.debug(f"Deleted {collection}/{id}")


__all__ = ["FirebaseRealtimeDatabase"]
