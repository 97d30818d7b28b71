"""SQLiteHistoryStore — single-file store for CI caches and shared workspaces.

Keeps the whole history in one file instead of a directory tree with one
entry per action, which suits CI jobs that cache a single path.

Schema:
  history  — one row per storage key, overwritten in place on every put().
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from execlens_store.base import BaseHistoryStore
from execlens_store.codec import decode_record, encode_record
from execlens_store.errors import CorruptEntryError, HistoryWriteError
from execlens_store.keys import storage_key

if TYPE_CHECKING:
    from execlens_store.models import ActionRecord

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS history (
    key         TEXT PRIMARY KEY,
    identity    TEXT NOT NULL,
    payload     BLOB NOT NULL,
    updated_at  TEXT
);
"""


class SQLiteHistoryStore(BaseHistoryStore):
    """Stores action history in a local SQLite database file.

    The database file path defaults to `.execlens/history.db` relative to the
    current working directory. Configure via .execlens.yml:
    `store: sqlite` and `store_path: /path/to/history.db`.
    """

    def __init__(self, db_path: str = ".execlens/history.db"):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def put(self, identity: str, record: ActionRecord) -> None:
        try:
            self._conn.execute(
                """
                INSERT INTO history (key, identity, payload, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                  identity=excluded.identity,
                  payload=excluded.payload,
                  updated_at=excluded.updated_at
                """,
                (
                    storage_key(identity),
                    identity,
                    encode_record(record),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise HistoryWriteError(identity, e) from e

    def get(self, identity: str) -> ActionRecord | None:
        key = storage_key(identity)
        try:
            row = self._conn.execute("SELECT payload FROM history WHERE key=?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.warning("Could not read history entry %s: %s", key, e)
            return None
        if row is None:
            return None

        try:
            return decode_record(bytes(row[0]))
        except CorruptEntryError as e:
            logger.warning("Ignoring corrupt history entry %s: %s", key, e)
            return None

    def close(self) -> None:
        self._conn.close()
