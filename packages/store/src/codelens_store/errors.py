from __future__ import annotations

from typing import Any


class PersistenceError(Exception):
    """The store is unreachable or rejected a read or write.

    ``result`` carries whatever was generated before the write failed, so the
    HTTP layer can still hand the review text back to the caller.
    """

    def __init__(self, message: str, result: Any = None):
        super().__init__(message)
        self.message = message
        self.result = result
