"""GistStore — zero-infrastructure shared review history via GitHub Gist.

Why Gist as the shared store:
- Zero infra: no DB to provision, no server to maintain.
- Built-in access control: Gist ACL == GitHub account access, so a small team
  can browse the same history from several servers.

Data format: a single JSON file named `codelens_history.json` inside the Gist.
The file contains a JSON array of ReviewRecord dicts in insertion order.
Every write is a read-modify-write of the whole file; the lock only protects
against concurrent writers inside one process.
"""

from __future__ import annotations

import json
import logging
import threading

from codelens_store.base import BaseStore, new_review_id, next_timestamp
from codelens_store.errors import PersistenceError
from codelens_store.models import ReviewDraft, ReviewRecord

logger = logging.getLogger(__name__)

_GIST_FILENAME = "codelens_history.json"


class GistStore(BaseStore):
    """Stores review history in a GitHub Gist as a JSON array.

    list_reviews() reads the full array and sorts in memory, which is fine for
    hundreds or low thousands of records. For more than that, use SQLiteStore.
    """

    def __init__(self, gist_id: str, token: str):
        try:
            from github import Github
        except ImportError:
            raise ImportError("PyGithub is required for GistStore. Install it with: pip install PyGithub")
        self._gist_id = gist_id
        self._gh = Github(token)
        self._lock = threading.Lock()

    def _get_gist(self):
        return self._gh.get_gist(self._gist_id)

    def insert(self, draft: ReviewDraft) -> ReviewRecord:
        """Append a review record to the Gist JSON file."""
        with self._lock:
            try:
                gist = self._get_gist()
                existing = self._read_records(gist)
                latest = max((r.get("createdAt", "") for r in existing), default=None)
                record = ReviewRecord(
                    id=new_review_id(),
                    code=draft.code,
                    review=draft.review,
                    optimized_code=draft.optimized_code,
                    created_at=next_timestamp(latest or None),
                )
                existing.append(record.to_dict())
                self._write_records(gist, existing)
            except PersistenceError:
                raise
            except Exception as e:
                logger.warning("GistStore.insert() failed (%s): %s", type(e).__name__, e)
                raise PersistenceError(f"Could not save review to Gist ({type(e).__name__}: {e})") from e
        return record

    def list_reviews(self) -> list[ReviewRecord]:
        """Return every record in the Gist, newest first."""
        try:
            records = self._read_records(self._get_gist())
        except PersistenceError:
            raise
        except Exception as e:
            logger.warning("GistStore.list_reviews() failed: %s", e)
            raise PersistenceError(f"Could not read review history from Gist ({type(e).__name__}: {e})") from e

        results = [ReviewRecord.from_dict(r) for r in records]
        results.sort(key=lambda r: r.created_at, reverse=True)
        return results

    def delete(self, review_id: str) -> bool:
        with self._lock:
            try:
                gist = self._get_gist()
                existing = self._read_records(gist)
                remaining = [r for r in existing if r.get("id") != review_id]
                if len(remaining) == len(existing):
                    return False
                self._write_records(gist, remaining)
            except PersistenceError:
                raise
            except Exception as e:
                logger.warning("GistStore.delete() failed (%s): %s", type(e).__name__, e)
                raise PersistenceError(f"Could not delete review from Gist ({type(e).__name__}: {e})") from e
        return True

    def _read_records(self, gist) -> list[dict]:
        """Read the current JSON array from the Gist file, or return []."""
        file_obj = gist.files.get(_GIST_FILENAME)
        if file_obj is None:
            return []
        try:
            data = json.loads(file_obj.content) or []
        except (json.JSONDecodeError, TypeError) as e:
            raise PersistenceError(f"{_GIST_FILENAME} in gist {self._gist_id} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise PersistenceError(f"{_GIST_FILENAME} in gist {self._gist_id} does not hold a JSON array")
        return data

    @staticmethod
    def _write_records(gist, records: list[dict]) -> None:
        from github import InputFileContent

        gist.edit(files={_GIST_FILENAME: InputFileContent(json.dumps(records, indent=2))})
