"""HTTP surface: review submission and history routes.

Every error is mapped to a status code and a JSON body of the form
``{"error": <message>, "kind": <kind>}`` at this boundary. No stack trace
reaches the client.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from codelens_core.errors import GenerationError, ValidationError
from codelens_server.models import DeleteResponse, ReviewRecordOut, ReviewRequest, ReviewResponse
from codelens_server.service import ReviewService
from codelens_store.errors import PersistenceError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_review_service(request: Request) -> ReviewService:
    """Dependency to get the review service bound to this app."""
    service = getattr(request.app.state, "review_service", None)
    if service is None:
        raise RuntimeError("Review service not initialized. Build the app with create_app().")
    return service


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.post("/review", response_model=ReviewResponse)
def submit_review(
    request: ReviewRequest,
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    """Review a code snippet and store the result."""
    return ReviewResponse.from_result(review_service.submit_review(request.code))


@router.get("/reviews", response_model=List[ReviewRecordOut])
def list_reviews(review_service: ReviewService = Depends(get_review_service)) -> List[ReviewRecordOut]:
    """Return the review history, newest first."""
    return [ReviewRecordOut.from_record(r) for r in review_service.list_reviews()]


@router.delete("/review/{review_id}", response_model=DeleteResponse)
def delete_review(
    review_id: str,
    review_service: ReviewService = Depends(get_review_service),
) -> DeleteResponse:
    """Delete a stored review. Succeeds whether or not the record existed."""
    return DeleteResponse(deleted=review_service.delete_review(review_id))


def _error(status_code: int, kind: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "kind": kind, **extra})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation(_request: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, "validation", str(exc))

    @app.exception_handler(RequestValidationError)
    async def _bad_body(_request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Rejected malformed request body: %s", exc.errors())
        return _error(400, "validation", "No code provided!")

    @app.exception_handler(GenerationError)
    async def _generation(_request: Request, exc: GenerationError) -> JSONResponse:
        return _error(500, "generation", f"Error processing AI request: {exc.message}", status=exc.status)

    @app.exception_handler(PersistenceError)
    async def _persistence(_request: Request, exc: PersistenceError) -> JSONResponse:
        extra = {}
        if exc.result is not None:
            extra = {"review": exc.result.review, "optimizedCode": exc.result.optimized_code}
        return _error(500, "persistence", exc.message, **extra)

    @app.exception_handler(Exception)
    async def _unexpected(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error: %s", exc)
        return _error(500, "internal", "Internal server error")


def create_app(review_service: ReviewService) -> FastAPI:
    """Build the FastAPI app around an already-configured ReviewService."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Closing review store")
        review_service.store.close()

    app = FastAPI(title="codelens", description="AI code snippet review service", lifespan=lifespan)
    app.state.review_service = review_service

    # The browser client is served from a different origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)
    app.include_router(router)
    return app
