"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitCast"
    DB_FILENAME = "habitcast.db"
    DEBUG = False
    TESTING = False
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("HABITCAST_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("HABITCAST_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("HABITCAST_DATABASE_URL", self._build_sqlite_url())
        # The identity provider's proxy forwards the authenticated user id in this header.
        self.AUTH_HEADER = os.getenv("HABITCAST_AUTH_HEADER", "X-User-Id")
        self.AUTH_EMAIL_HEADER = os.getenv("HABITCAST_AUTH_EMAIL_HEADER", "X-User-Email")
        self.LOG_TO_FILE = _env_bool("HABITCAST_LOG_TO_FILE", default=True)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HABITCAST_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITCAST_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration for the pytest suite: in-memory database, no log files."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = os.getenv("HABITCAST_TEST_DATABASE_URL", "sqlite://")
        self.LOG_TO_FILE = False

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        # A single shared connection keeps the in-memory schema alive across sessions.
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
