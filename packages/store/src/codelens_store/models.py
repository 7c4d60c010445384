"""Review history data models.

Decoupled from codelens_core so the store layer can be used independently
and codelens_core has no knowledge of persistence concerns.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewDraft:
    """A generated review that has not been stored yet.

    The store assigns ``id`` and ``created_at`` when it turns a draft into a
    ReviewRecord.
    """

    code: str
    review: str
    optimized_code: str = ""


@dataclass(frozen=True)
class ReviewRecord:
    """A completed snippet review persisted to the store."""

    id: str
    code: str
    review: str
    optimized_code: str
    created_at: str  # ISO-8601 UTC timestamp, microsecond precision

    def to_dict(self) -> dict:
        """Wire form used by the HTTP API and the Gist file."""
        return {
            "id": self.id,
            "code": self.code,
            "review": self.review,
            "optimizedCode": self.optimized_code,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> ReviewRecord:
        return cls(
            id=d.get("id", ""),
            code=d.get("code", ""),
            review=d.get("review", ""),
            optimized_code=d.get("optimizedCode") or "",
            created_at=d.get("createdAt", ""),
        )
