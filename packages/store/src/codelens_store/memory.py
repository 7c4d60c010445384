"""In-memory store — process-local and lost on restart.

Useful for tests and throwaway demos (`store_url: memory://`). Anything that
needs history to survive a restart should use SQLiteStore or GistStore.
"""

from __future__ import annotations

import threading

from codelens_store.base import BaseStore, new_review_id, next_timestamp
from codelens_store.models import ReviewDraft, ReviewRecord


class MemoryStore(BaseStore):
    """Keeps records in a dict keyed by id."""

    def __init__(self):
        self._records: dict[str, ReviewRecord] = {}
        self._latest: str | None = None
        self._lock = threading.Lock()

    def insert(self, draft: ReviewDraft) -> ReviewRecord:
        with self._lock:
            record = ReviewRecord(
                id=new_review_id(),
                code=draft.code,
                review=draft.review,
                optimized_code=draft.optimized_code,
                created_at=next_timestamp(self._latest),
            )
            self._records[record.id] = record
            self._latest = record.created_at
        return record

    def list_reviews(self) -> list[ReviewRecord]:
        with self._lock:
            records = list(self._records.values())
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def delete(self, review_id: str) -> bool:
        with self._lock:
            return self._records.pop(review_id, None) is not None
