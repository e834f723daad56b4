"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from meal_analytics.api.analytics import router as analytics_router
from meal_analytics.api.meals import router as meals_router
from meal_analytics.api.profiles import router as profiles_router
from meal_analytics.api.reports import router as reports_router
from meal_analytics.app_logging import configure_logging
from meal_analytics.containers import AppContainer
from meal_analytics.domain.errors import (
    AnalyticsError,
    GenerationError,
    InvalidMeal,
    InvalidProfile,
    InvalidRange,
    NotFound,
    RangeTooLarge,
    StoreUnavailable,
)

_ERROR_STATUS: tuple[tuple[type[AnalyticsError], int], ...] = (
    (InvalidProfile, 422),
    (InvalidMeal, 422),
    (InvalidRange, 400),
    (RangeTooLarge, 400),
    (NotFound, 404),
    (StoreUnavailable, 503),
    (GenerationError, 502),
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(analytics_router)
    app.include_router(reports_router)
    app.include_router(profiles_router)
    app.include_router(meals_router)

    @app.exception_handler(AnalyticsError)
    async def analytics_error(request: Request, exc: AnalyticsError) -> JSONResponse:
        status_code = error_status(exc)
        if status_code >= 500:
            logger.error(
                "Request failed", extra={"path": request.url.path}, exc_info=exc
            )
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422, content={"error": validation_message(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def validation_message(exc: RequestValidationError) -> str:
    """Describe request validation errors without echoing the rejected input."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def error_status(exc: AnalyticsError) -> int:
    """Return the HTTP status for a domain error."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500
