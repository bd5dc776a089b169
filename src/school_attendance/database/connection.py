from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    charset: str = "utf8mb4"
    connect_timeout: int = 10
    # Session offset so CURDATE()/NOW() agree with the school's calendar day.
    time_zone: Optional[str] = None

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config.get("password") or ""),
            database=str(db_config["database"]),
            charset=str(db_config.get("charset") or "utf8mb4"),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
            time_zone=db_config.get("time_zone"),
        )


class DatabaseConnection:
    """Process-wide connection factory for the attendance repositories.

    Each repository call opens and closes its own connection through
    ``db_cursor``; aggregation and rate calculations run on the fetched rows,
    never inside an open transaction.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        kwargs = dict(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            charset=self._config.charset,
            connection_timeout=self._config.connect_timeout,
        )
        if self._config.time_zone:
            kwargs["time_zone"] = self._config.time_zone
        return mysql.connector.connect(**kwargs)
