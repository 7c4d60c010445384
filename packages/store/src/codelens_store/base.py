"""Abstract store interface.

Every storage backend (SQLite, Gist, in-memory) implements this interface.
The server depends on BaseStore, not on a concrete backend, so backends are
swappable without touching the service or route code.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codelens_store.models import ReviewDraft, ReviewRecord


def new_review_id() -> str:
    """Return an opaque, never-reused record id."""
    return uuid.uuid4().hex


def next_timestamp(latest: str | None = None) -> str:
    """Return an ISO-8601 UTC timestamp strictly later than ``latest``.

    Two inserts inside the same clock tick (or after a clock step backwards)
    would otherwise share a timestamp and make the newest-first order
    ambiguous, so the result is bumped one microsecond past ``latest``.
    """
    now = datetime.now(timezone.utc)
    if latest:
        previous = datetime.fromisoformat(latest)
        if now <= previous:
            now = previous + timedelta(microseconds=1)
    return now.isoformat(timespec="microseconds")


class BaseStore(ABC):
    """Pluggable persistence layer for review history.

    Implementations raise PersistenceError when the backend fails. They never
    raise for a delete of an id that does not exist.
    """

    @abstractmethod
    def insert(self, draft: ReviewDraft) -> ReviewRecord:
        """Assign id and created_at, persist the record, and return it."""

    @abstractmethod
    def list_reviews(self) -> list[ReviewRecord]:
        """Return every record, newest first.

        Returns an empty list if no reviews exist.
        """

    @abstractmethod
    def delete(self, review_id: str) -> bool:
        """Remove a record. Returns True only if something was removed."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional. Subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
