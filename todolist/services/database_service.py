"""
database_service.py

This file implements a lightweight SQLite database service for the Todo
application.

The service is constructed explicitly and handed to the repository that
needs it; there is no module-level connection. One connection is shared by
every request, so all access goes through a re-entrant lock and a
transaction scope that commits once at its outermost exit.
"""
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog

from todolist.config import DatabaseConfig, MEMORY_DB, ensure_db_folder

logger = structlog.get_logger(__name__)


class DatabaseService:
    """
    DatabaseService Class

    Owns the SQLite connection and the todos schema.
    """
    def __init__(self, db_config: Optional[DatabaseConfig] = None, *, path: Optional[str] = None):
        if path is None:
            db_config = db_config or DatabaseConfig()
            ensure_db_folder(db_config)
            path = MEMORY_DB if db_config.in_memory else str(db_config.path)
        self.path = path

        self.db = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.RLock()
        self._depth = 0

        # WAL improves concurrent readers on file databases; memory
        # databases do not support it.
        if path != MEMORY_DB:
            self.db.execute('PRAGMA journal_mode = WAL')

        self._init_schema()
        logger.debug("database_opened", path=path)

    def _init_schema(self):
        """
        Initialize the database schema

        - TEXT primary key for UUID ids
        - done_at holds an ISO-8601 timestamp or NULL
        - "order" is indexed since every create and reorder looks it up
        """
        with self.transaction() as db:
            db.execute('''
                CREATE TABLE IF NOT EXISTS todos (
                    id TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    "order" INTEGER NOT NULL,
                    done_at TEXT
                )
            ''')
            db.execute('CREATE INDEX IF NOT EXISTS idx_todos_order ON todos ("order")')

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block of statements as one unit

        The lock is held for the whole block. Nested scopes join the
        outermost one, which commits on success and rolls back on error.
        """
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self.db
                finally:
                    self._depth -= 1
                return

            self._depth = 1
            try:
                with self.db:
                    yield self.db
            finally:
                self._depth = 0

    def close(self):
        """
        Close the database connection

        Call this on shutdown so pending writes are flushed and the file
        handle is released.
        """
        with self._lock:
            self.db.close()
        logger.debug("database_closed", path=self.path)
