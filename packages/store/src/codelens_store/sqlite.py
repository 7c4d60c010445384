"""SQLiteStore — local file-based store, the default backend.

Why SQLite as the default store:
- Batteries included: ships with Python, no extra dependencies.
- Durable: history survives a server restart without provisioning a database.
- Ordered reads are an indexed scan on created_at.

Schema:
  reviews  — one row per stored review, keyed by an opaque text id.
"""

from __future__ import annotations

import logging
import sqlite3
import threading

from codelens_store.base import BaseStore, new_review_id, next_timestamp
from codelens_store.errors import PersistenceError
from codelens_store.models import ReviewDraft, ReviewRecord

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS reviews (
    id              TEXT PRIMARY KEY,
    code            TEXT NOT NULL,
    review          TEXT NOT NULL,
    optimized_code  TEXT NOT NULL DEFAULT '',
    created_at      TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_reviews_created ON reviews (created_at);
"""


class SQLiteStore(BaseStore):
    """Stores review history in a local SQLite database file.

    The database file path defaults to `.codelens.db` in the current working
    directory. Configure via .codelens.yml: `store_url: sqlite:///path/to.db`.

    The server calls the store from FastAPI's worker threads, so the single
    connection is opened with check_same_thread=False and every statement
    runs under a lock.
    """

    def __init__(self, db_path: str = ".codelens.db"):
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
            self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not open review database {db_path!r}: {e}") from e

    def insert(self, draft: ReviewDraft) -> ReviewRecord:
        # The connection context manager commits on success and rolls back on error.
        with self._lock:
            try:
                with self._conn:
                    latest = self._conn.execute("SELECT MAX(created_at) FROM reviews").fetchone()[0]
                    record = ReviewRecord(
                        id=new_review_id(),
                        code=draft.code,
                        review=draft.review,
                        optimized_code=draft.optimized_code,
                        created_at=next_timestamp(latest),
                    )
                    self._conn.execute(
                        """
                        INSERT INTO reviews (id, code, review, optimized_code, created_at)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        (record.id, record.code, record.review, record.optimized_code, record.created_at),
                    )
            except sqlite3.Error as e:
                raise PersistenceError(f"Could not save review: {e}") from e
        return record

    def list_reviews(self) -> list[ReviewRecord]:
        with self._lock:
            try:
                rows = self._conn.execute("SELECT * FROM reviews ORDER BY created_at DESC").fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(f"Could not read review history: {e}") from e
        return [self._row_to_record(r) for r in rows]

    def delete(self, review_id: str) -> bool:
        with self._lock:
            try:
                with self._conn:
                    cursor = self._conn.execute("DELETE FROM reviews WHERE id=?", (review_id,))
            except sqlite3.Error as e:
                raise PersistenceError(f"Could not delete review {review_id}: {e}") from e
        removed = cursor.rowcount > 0
        if not removed:
            logger.debug("SQLiteStore.delete(): no review with id %s", review_id)
        return removed

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> ReviewRecord:
        return ReviewRecord(
            id=row["id"],
            code=row["code"],
            review=row["review"],
            optimized_code=row["optimized_code"] or "",
            created_at=row["created_at"],
        )
