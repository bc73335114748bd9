"""Firebase app factory and database handle for the Realtime Database."""

import logging
import os
import threading
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, db
from google.auth import default
from google.auth.exceptions import DefaultCredentialsError

from easydb_realtime.config import DEFAULT_APP_NAME, RealtimeDatabaseConfig

from .base import ConfigurationError, DatabaseBoundary, ReferenceBoundary


logger = logging.getLogger(__name__)

_init_lock = threading.Lock()


class RealtimeDatabase:
    """Database handle bound to one initialised Firebase app."""

    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    @property
    def app(self) -> firebase_admin.App:
        return self._app

    def reference(self, path: str = "/") -> ReferenceBoundary:
        return db.reference(path, app=self._app)


class RealtimeDatabaseClientFactory:
    """Firebase app factory."""

    @staticmethod
    def get_existing_app(name: Optional[str] = None) -> Optional[firebase_admin.App]:
        """Return the initialised app called ``name``, or None."""

        try:
            return firebase_admin.get_app(name or DEFAULT_APP_NAME)
        except ValueError:
            return None

    @staticmethod
    def create_app(config: RealtimeDatabaseConfig) -> firebase_admin.App:
        """Initialise a Firebase app from configuration."""

        problems = config.validate()
        if problems:
            raise ConfigurationError(f"Invalid realtime database configuration: {'; '.join(problems)}")

        options = config.to_app_options()
        credential = None

        try:
            if config.uses_emulator:
                # The SDK swaps in emulator credentials for database calls
                os.environ["FIREBASE_DATABASE_EMULATOR_HOST"] = config.emulator_host
                logger.info(f"Using Realtime Database emulator at {config.emulator_host}")
            elif config.credentials_path:
                logger.info(f"Using service account credentials from {config.credentials_path}")
                credential = credentials.Certificate(config.credentials_path)
            else:
                credential = credentials.ApplicationDefault()
                if "projectId" not in options:
                    try:
                        _, project_id = default()
                        if project_id:
                            options["projectId"] = project_id
                        logger.info(f"Using ADC credentials for project: {project_id}")
                    except DefaultCredentialsError as e:
                        logger.warning(f"Failed to get project ID from ADC: {e}")

            app = firebase_admin.initialize_app(credential, options=options, name=config.app_name)
        except (ValueError, OSError) as e:
            logger.error(f"Failed to initialise Firebase app {config.app_name!r}: {e}")
            raise ConfigurationError(f"Failed to initialise Firebase app: {e}", original_error=e) from e

        logger.info(f"Firebase app {config.app_name!r} initialised for {config.database_url}")

        return app


def ensure_app(config: Optional[RealtimeDatabaseConfig] = None, *, name: Optional[str] = None) -> firebase_admin.App:
    """Return the process-wide app, initialising it from ``config`` at most once."""

    app_name = name or (config.app_name if config is not None else DEFAULT_APP_NAME)

    with _init_lock:
        app = RealtimeDatabaseClientFactory.get_existing_app(app_name)
        if app is not None:
            logger.debug(f"Reusing Firebase app {app_name!r}")
            return app

        if config is None:
            raise ConfigurationError()

        return RealtimeDatabaseClientFactory.create_app(config)


def health_check(database: DatabaseBoundary) -> Dict[str, Any]:
    """Perform a shallow root read to verify connectivity and credentials."""

    try:
        database.reference("/").get(shallow=True)

        result = {
            'status': 'healthy',
            'client_initialized': True,
        }
    except Exception as e:
        logger.error(f"Realtime Database health check failed: {e}")
        result = {
            'status': 'unhealthy',
            'error': str(e),
            'client_initialized': False,
        }

    return result


__all__ = [
    "RealtimeDatabase",
    "RealtimeDatabaseClientFactory",
    "ensure_app",
    "health_check",
]
