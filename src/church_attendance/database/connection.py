from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

from ..core.constants import DEFAULT_FETCH_TIMEOUT_SECONDS
from ..core.exceptions import ConfigurationError

REQUIRED_KEYS = ("host", "user", "database")


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    timeout: int = DEFAULT_FETCH_TIMEOUT_SECONDS

    @classmethod
    def from_mapping(cls, db_config: dict, *, timeout: int = DEFAULT_FETCH_TIMEOUT_SECONDS) -> "DBConfig":
        missing = [k for k in REQUIRED_KEYS if not db_config.get(k)]
        if missing:
            raise ConfigurationError(f"Database settings missing: {', '.join(missing)}")
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config.get("password") or ""),
            database=str(db_config["database"]),
            timeout=int(timeout),
        )


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=self._config.timeout,
        )
