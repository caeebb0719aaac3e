from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.auth import router as auth_router
from app.api.checkout import router as checkout_router
from app.api.images import router as images_router
from app.api.lessons import router as lessons_router
from app.api.logs import router as logs_router
from app.config import Settings, get_settings
from app.observability.history import RequestHistory
from app.observability.logging import configure_logging
from app.observability.middleware import RequestLogMiddleware
from app.services.catalog import CatalogStore
from app.services.errors import ServiceError
from app.services.inventory import InventoryAdjuster

logger = logging.getLogger(__name__)


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": "Invalid request"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an app with its own catalog and request history."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)

    app = FastAPI(title="Lesson Booking", version="0.1.0")
    app.state.settings = settings
    app.state.catalog = CatalogStore()
    app.state.adjuster = InventoryAdjuster(app.state.catalog)
    app.state.history = RequestHistory(
        max_entries=settings.max_logs,
        default_limit=settings.default_log_limit,
    )

    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    # Added last so it wraps everything else, CORS included.
    app.add_middleware(
        RequestLogMiddleware,
        history=app.state.history,
        body_preview_chars=settings.log_body_preview_chars,
    )

    app.include_router(auth_router)
    app.include_router(lessons_router)
    app.include_router(checkout_router)
    app.include_router(logs_router)
    app.include_router(images_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    if settings.public_path.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.public_path), html=True), name="public")
    else:
        logger.info("static.disabled", extra={"public_dir": settings.public_dir})

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logger.info("server.start", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
