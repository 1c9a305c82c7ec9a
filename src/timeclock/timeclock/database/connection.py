from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, TypeVar

import mysql.connector

from ..core.exceptions import StorageFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation, except inside
    ``transaction()`` where every repository call on the same thread shares
    one connection until commit/rollback.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    @property
    def active_connection(self):
        """Connection bound by an enclosing ``transaction()``, if any."""
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """All store calls inside the block commit or roll back together.

        Nested blocks join the outer transaction.
        """
        if self.active_connection is not None:
            yield
            return

        try:
            conn = self.connect()
            conn.start_transaction()
        except mysql.connector.Error as e:
            raise StorageFailure(f"Could not open transaction: {e}") from e

        self._local.conn = conn
        try:
            yield
            conn.commit()
        except mysql.connector.Error as e:
            conn.rollback()
            logger.error("Transaction rolled back after storage error: %s", e)
            raise StorageFailure(str(e)) from e
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()

    def with_transaction(self, fn: Callable[[], T]) -> T:
        with self.transaction():
            return fn()
