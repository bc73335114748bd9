"""Realtime Database connection configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "[DEFAULT]"


@dataclass
class RealtimeDatabaseConfig:
    """Settings used to initialise the Firebase app backing the repository."""

    database_url: Optional[str] = None
    project_id: Optional[str] = None
    credentials_path: Optional[str] = None
    emulator_host: Optional[str] = None
    app_name: str = DEFAULT_APP_NAME
    http_timeout_s: Optional[float] = None  # None keeps the SDK default

    @classmethod
    def from_env(cls) -> "RealtimeDatabaseConfig":
        """Load configuration from environment variables."""

        logger.info("Loading realtime database configuration from environment variables")

        timeout = os.getenv("EASYDB_RTDB_HTTP_TIMEOUT_S")

        return cls(
            database_url=os.getenv("EASYDB_RTDB_URL") or os.getenv("FIREBASE_DATABASE_URL"),
            project_id=os.getenv("GOOGLE_CLOUD_PROJECT"),
            credentials_path=os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
            emulator_host=os.getenv("FIREBASE_DATABASE_EMULATOR_HOST"),
            app_name=os.getenv("EASYDB_RTDB_APP_NAME", DEFAULT_APP_NAME),
            http_timeout_s=float(timeout) if timeout else None,
        )

    @property
    def uses_emulator(self) -> bool:
        return bool(self.emulator_host)

    def validate(self) -> List[str]:
        """Return a list of configuration problems, empty when usable."""

        problems: List[str] = []

        if not self.database_url:
            problems.append("database_url is required")
        elif not self.database_url.startswith(("http://", "https://")):
            problems.append(f"database_url must be an http(s) URL: {self.database_url}")

        if self.http_timeout_s is not None and self.http_timeout_s <= 0:
            problems.append(f"http_timeout_s must be positive: {self.http_timeout_s}")

        if not self.app_name:
            problems.append("app_name must not be empty")

        for problem in problems:
            logger.warning(f"Invalid realtime database configuration: {problem}")

        return problems

    def to_app_options(self) -> Dict[str, Any]:
        """Build the options mapping passed to ``firebase_admin.initialize_app``."""

        options: Dict[str, Any] = {"databaseURL": self.database_url}

        if self.project_id:
            options["projectId"] = self.project_id
        if self.http_timeout_s is not None:
            options["httpTimeout"] = self.http_timeout_s

        return options
