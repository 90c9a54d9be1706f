"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from meal_planner.api.routes import router as api_router
from meal_planner.app_logging import configure_logging
from meal_planner.containers import AppContainer
from meal_planner.domain.errors import (
    MealPlannerError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Meal planner started",
            extra={"storage_backend": container.settings.storage_backend},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(api_router)

    @app.exception_handler(MealPlannerError)
    async def handle_domain_error(
        request: Request, exc: MealPlannerError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if isinstance(exc, PersistenceError):
            logger.exception(
                "Storage failure", extra={"path": request.url.path}, exc_info=exc
            )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


_STATUS_CODES: tuple[tuple[type[MealPlannerError], int], ...] = (
    (NotFoundError, 404),
    (ValidationError, 422),
    (PersistenceError, 503),
)


def _status_for(exc: MealPlannerError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 400
