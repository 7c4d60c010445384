"""Client-side review session: submission state plus the history overlay.

One submission at a time moves through IDLE → SUBMITTING → SUCCESS | FAILED.
Selecting a history entry overlays its stored text on the display without any
network call; clearing the selection shows the live result again.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from codelens_cli.client import ClientError

if TYPE_CHECKING:
    from codelens_cli.client import ReviewClient
    from codelens_store.models import ReviewRecord

logger = logging.getLogger(__name__)

EMPTY_CODE_MESSAGE = "Please enter some code!"
PLACEHOLDER_MESSAGE = "Analyzing code..."
FAILURE_MESSAGE = "Error analyzing code. Please check your backend."


class SubmitState(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class ReviewSession:
    def __init__(self, client: ReviewClient):
        self.client = client
        self.state = SubmitState.IDLE
        self.code = ""
        self.review = ""
        self.optimized_code = ""
        self.message = ""
        self.history: list[ReviewRecord] = []
        self.selected: ReviewRecord | None = None

    @property
    def can_submit(self) -> bool:
        """The analyze action is disabled while a submission is in flight."""
        return self.state is not SubmitState.SUBMITTING

    def submit(self, code: str) -> bool:
        """Submit ``code`` for review. Returns True if a request was sent.

        Blank code is rejected locally with a message and no request. Any
        failure ends in FAILED with a generic message in the review pane;
        nothing is raised to the caller.
        """
        if not self.can_submit:
            logger.debug("Ignoring submit while a review is in flight")
            return False
        if not code.strip():
            self.message = EMPTY_CODE_MESSAGE
            return False

        self.code = code
        self.message = ""
        self.state = SubmitState.SUBMITTING
        self.review = PLACEHOLDER_MESSAGE
        self.optimized_code = ""
        try:
            data = self.client.submit(code)
        except ClientError as e:
            logger.error("Review request failed: %s", e.message)
            self.state = SubmitState.FAILED
            self.review = FAILURE_MESSAGE
            return True

        self.review = data.get("review", "")
        self.optimized_code = data.get("optimizedCode") or ""
        self.state = SubmitState.SUCCESS
        self.refresh_history()
        return True

    def refresh_history(self) -> None:
        """Re-fetch the whole history. On failure the previous list is kept."""
        try:
            self.history = self.client.list_reviews()
        except ClientError as e:
            logger.error("Error fetching history: %s", e.message)

    def select(self, review_id: str) -> ReviewRecord:
        """Overlay a history entry on the display. Raises KeyError if unknown."""
        for record in self.history:
            if record.id == review_id:
                self.selected = record
                return record
        raise KeyError(review_id)

    def clear_selection(self) -> None:
        self.selected = None

    def delete(self, review_id: str) -> bool:
        removed = self.client.delete(review_id)
        if self.selected is not None and self.selected.id == review_id:
            self.selected = None
        self.refresh_history()
        return removed

    # What the display panes show: the selected entry if any, else live state.

    @property
    def displayed_review(self) -> str:
        return self.selected.review if self.selected is not None else self.review

    @property
    def displayed_code(self) -> str:
        return self.selected.code if self.selected is not None else self.code

    @property
    def displayed_optimized_code(self) -> str:
        return self.selected.optimized_code if self.selected is not None else self.optimized_code
