"""Review orchestration: validate, generate, persist.

This module bridges codelens_core and codelens_store. The core has no store
knowledge and the store has no generator knowledge, so the mapping from a
ReviewResult to a ReviewDraft happens here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from codelens_core.errors import GenerationError, ValidationError
from codelens_core.prompt import ReviewResult, build_review_prompt, parse_review
from codelens_store.errors import PersistenceError
from codelens_store.models import ReviewDraft

if TYPE_CHECKING:
    from codelens_core.providers.base import BaseGenerator
    from codelens_store.base import BaseStore
    from codelens_store.models import ReviewRecord

logger = logging.getLogger(__name__)


class ReviewService:
    """Runs one review per submission and keeps the history store current."""

    def __init__(self, generator: BaseGenerator, store: BaseStore):
        self.generator = generator
        self.store = store

    def submit_review(self, code) -> ReviewResult:
        """Review ``code`` and persist the result.

        Raises ValidationError before any network call when ``code`` is
        missing or blank, GenerationError when the generator fails (nothing is
        stored), and PersistenceError when the review was generated but could
        not be saved. The PersistenceError carries the generated result.
        """
        if not isinstance(code, str) or not code.strip():
            logger.warning("Rejected review request with empty code")
            raise ValidationError("No code provided!")

        prompt = build_review_prompt(code)
        try:
            result = parse_review(self.generator.generate(prompt))
        except GenerationError as e:
            logger.error("Review generation failed (status=%s): %s", e.status, e.message)
            raise

        draft = ReviewDraft(code=code, review=result.review, optimized_code=result.optimized_code)
        try:
            record = self.store.insert(draft)
        except PersistenceError as e:
            logger.error("Review generated but not saved: %s", e.message)
            raise PersistenceError(f"Review generated but not saved: {e.message}", result=result) from e

        logger.info("Stored review %s (%d chars of code)", record.id, len(code))
        return result

    def list_reviews(self) -> list[ReviewRecord]:
        return self.store.list_reviews()

    def delete_review(self, review_id: str) -> bool:
        removed = self.store.delete(review_id)
        logger.info("Delete review %s: %s", review_id, "removed" if removed else "not found")
        return removed
