"""Request and response bodies for the HTTP API.

Field names are snake_case in Python and camelCase on the wire, matching the
JSON the web client has always consumed.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from codelens_core.prompt import ReviewResult
from codelens_store.models import ReviewRecord


class ReviewRequest(BaseModel):
    # Optional so a missing field reaches the service and is reported as a
    # validation failure (400), the same as an empty string.
    code: Optional[str] = Field(default=None, description="Source code to review, verbatim")


class ReviewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    review: str = Field(..., description="Full review text returned by the generator")
    optimized_code: str = Field(default="", alias="optimizedCode", description="Improved code, if the reply had one")

    @classmethod
    def from_result(cls, result: ReviewResult) -> ReviewResponse:
        return cls(review=result.review, optimized_code=result.optimized_code)


class ReviewRecordOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Opaque record identifier")
    code: str = Field(..., description="Submitted code")
    review: str = Field(..., description="Stored review text")
    optimized_code: str = Field(default="", alias="optimizedCode", description="Stored optimized code")
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 UTC creation time")

    @classmethod
    def from_record(cls, record: ReviewRecord) -> ReviewRecordOut:
        return cls(
            id=record.id,
            code=record.code,
            review=record.review,
            optimized_code=record.optimized_code,
            created_at=record.created_at,
        )


class DeleteResponse(BaseModel):
    deleted: bool = Field(..., description="Whether a record was actually removed")
