"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from food_recommender.api.schemas import (
    EnrollmentRequest,
    RecommendationRequest,
    analysis_payload,
    recommendation_payload,
)
from food_recommender.app_logging import configure_logging
from food_recommender.containers import AppContainer
from food_recommender.domain.errors import (
    InputError,
    NotFoundError,
    PersistenceError,
    PipelineError,
    UpstreamModelError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(
        request: Request, exc: PipelineError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "%s %s failed: %s (%s)",
                request.method,
                request.url.path,
                exc.detail,
                exc.kind,
            )
        return JSONResponse(status_code=status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = InputError(_describe_validation(exc))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=error.to_payload()
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/users", status_code=status.HTTP_201_CREATED)
    async def enroll_user(
        payload: EnrollmentRequest, request: Request
    ) -> dict[str, object]:
        """Store a profile with its embedding and return the new user id."""
        state_container: AppContainer = request.app.state.container
        user = await state_container.user_service.enroll(payload.to_profile())
        return {
            "message": "User information stored successfully",
            "user_id": user.id,
        }

    @app.post("/api/analyze-food")
    async def analyze_food(
        request: Request,
        image: UploadFile | None = File(default=None),
        user_id: int | None = Form(default=None),
    ) -> dict[str, object]:
        """Analyze an uploaded food photo for a user."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await image.read() if image is not None else None
        result = await state_container.analysis_service.analyze(user_id, image_bytes)
        return {
            "message": "Food item analyzed and stored successfully.",
            **analysis_payload(result),
        }

    @app.post("/api/recommend-food")
    async def recommend_food(
        payload: RecommendationRequest, request: Request
    ) -> dict[str, object]:
        """Recommend on an already stored food item."""
        state_container: AppContainer = request.app.state.container
        recommendation = await state_container.recommendation_service.recommend(
            payload.user_id, payload.food_item_id
        )
        return recommendation_payload(recommendation)

    return app


def _describe_validation(exc: RequestValidationError) -> str:
    """Summarize request validation errors as one line."""
    parts = []
    for item in exc.errors():
        location = ".".join(
            str(part) for part in item.get("loc", ()) if part != "body"
        )
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts) or "Invalid request"


def _status_for(exc: PipelineError) -> int:
    """Map an error kind to an HTTP status code."""
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InputError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, UpstreamModelError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, PersistenceError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR
