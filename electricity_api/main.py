"""
Main application entry point for the Electricity Price API service.
Builds the services, wires them into the FastAPI app, and starts the server.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from electricity_api.api.routes import router as api_router
from electricity_api.config import Settings, settings as default_settings
from electricity_api.exceptions import (
    CredentialsMissingError,
    DatasetError,
    InvalidRequestError,
    PriceAPIException,
)
from electricity_api.logging_config import get_logger, setup_logging
from electricity_api.models.price import ErrorResponse
from electricity_api.scheduler.reloader import DatasetReloader
from electricity_api.services.auth_service import AuthService
from electricity_api.services.data_service import PriceDataService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown procedures.
    """
    # Startup
    setup_logging()
    try:
        await app.state.data_service.load()
    except DatasetError as e:
        # Queries retry the load lazily
        logger.error("Initial dataset load failed", error=str(e))
    await app.state.reloader.start()

    yield

    # Shutdown
    await app.state.reloader.stop()


async def handle_api_exception(request: Request, exc: PriceAPIException) -> JSONResponse:
    """Render a domain exception as an ErrorResponse body."""
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, code=exc.code, error=str(exc))

    body = ErrorResponse(error=str(exc), code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Render schema validation failures in the same error shape as domain errors.

    A login body that does not validate counts as missing credentials.
    """
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    logger.warning("Request validation failed", path=request.url.path, fields=fields)

    if request.url.path == request.app.url_path_for("login"):
        return await handle_api_exception(request, CredentialsMissingError())
    return await handle_api_exception(request, InvalidRequestError())


def create_app(
    settings: Optional[Settings] = None,
    auth_service: Optional[AuthService] = None,
    data_service: Optional[PriceDataService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Services are built once here and shared through app.state.

    Raises:
        ConfigurationError: If the signing secret, users or dataset path are missing
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Electricity Price API",
        description="Authenticated mean electricity price lookup by state",
        version="1.0.0",
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        lifespan=lifespan,
    )

    app.state.auth_service = auth_service or AuthService.from_settings(settings)
    app.state.data_service = data_service or PriceDataService.from_settings(settings)
    app.state.reloader = DatasetReloader(
        app.state.data_service,
        interval_seconds=settings.data_reload_interval_seconds,
    )

    app.add_exception_handler(PriceAPIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    @app.get("/")
    async def root():
        return {"message": "Electricity Price API is running!"}

    # Include API routes
    app.include_router(api_router, prefix="/api")

    return app


def run() -> None:
    """Start the API server with uvicorn."""
    uvicorn.run(
        "electricity_api.main:create_app",
        factory=True,
        host=default_settings.api_host,
        port=default_settings.api_port,
        reload=default_settings.api_reload,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
