"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cattle_keeper.api.activities import router as activities_router
from cattle_keeper.api.cattle import router as cattle_router
from cattle_keeper.api.images import router as images_router
from cattle_keeper.api.milk import router as milk_router
from cattle_keeper.app_logging import configure_logging
from cattle_keeper.containers import AppContainer
from cattle_keeper.errors import CattleKeeperError

API_PREFIX = "/api/v1"
API_VERSION = "1.0.0"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    started = time.monotonic()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.prepare_resources()
        except Exception:
            logger.exception("Failed to prepare image storage")
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Cattle Keeper API", version=API_VERSION, lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(CattleKeeperError)
    async def handle_domain_error(
        request: Request, exc: CattleKeeperError
    ) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request failed",
                exc_info=exc,
                extra={"path": request.url.path},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": _first_error(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = (
            "Endpoint not found"
            if exc.status_code == status.HTTP_404_NOT_FOUND
            else str(exc.detail)
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": message},
        )

    api = APIRouter(prefix=API_PREFIX)
    api.include_router(cattle_router)
    api.include_router(milk_router)
    api.include_router(activities_router)
    api.include_router(images_router)

    @api.get("")
    async def api_info() -> dict[str, object]:
        """Describe the available endpoints."""
        return {
            "name": "Cattle Keeper API",
            "version": API_VERSION,
            "description": "Record store for cattle profiles and milk yields",
            "endpoints": {
                "cattle": f"{API_PREFIX}/cattle",
                "milk": f"{API_PREFIX}/milk",
                "activities": f"{API_PREFIX}/activities",
                "images": f"{API_PREFIX}/images",
                "health": "/health",
            },
        }

    app.include_router(api)

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        """Liveness probe that also reports store reachability."""
        state_container: AppContainer = request.app.state.container
        healthy = state_container.cattle_service.is_store_reachable()
        return JSONResponse(
            status_code=(
                status.HTTP_200_OK
                if healthy
                else status.HTTP_503_SERVICE_UNAVAILABLE
            ),
            content={
                "status": "ok" if healthy else "degraded",
                "timestamp": datetime.now(tz=UTC).isoformat(),
                "database": "connected" if healthy else "disconnected",
                "uptime": round(time.monotonic() - started, 3),
            },
        )

    return app


def _first_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "Invalid request"))
    return f"{location}: {message}" if location else message
