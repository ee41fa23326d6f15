"""FastAPI application entry point.

Run with ``python -m docpdf.main`` or
``uvicorn docpdf.main:create_app --factory``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docpdf import __version__
from docpdf.api.documents import router as documents_router
from docpdf.api.health import router as health_router
from docpdf.api.schemas import ErrorResponse
from docpdf.core.config import Settings, get_settings
from docpdf.core.factory import ComponentFactory
from docpdf.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare storage and report renderer availability on startup."""
    settings: Settings = app.state.settings
    factory: ComponentFactory = app.state.factory

    logger.info(f"Starting document PDF API {__version__}")

    for directory in (settings.templates_dir, settings.output_dir):
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created directory: {directory}")

    if factory.get_renderer().is_available():
        logger.info("LibreOffice renderer is available")
    else:
        logger.warning("LibreOffice renderer not found; PDF generation will fail until it is installed")

    yield

    logger.info("Shutting down document PDF API")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers used outside the document routes."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Validation error",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    try:
        app = FastAPI(
            title="Document PDF API",
            description="Fills Word templates and renders them to PDF",
            version=__version__,
            lifespan=lifespan,
        )
        app.state.settings = settings
        app.state.factory = ComponentFactory(settings)

        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],  # Configure appropriately for production
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        app.include_router(documents_router)
        app.include_router(health_router)
        register_exception_handlers(app)

    except Exception as e:
        logger.error(f"Failed to create FastAPI app: {e}", exc_info=True)
        raise

    logger.info(f"Application ready (templates: {settings.templates_dir}, output: {settings.output_dir})")
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "docpdf.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=get_settings().log_level.lower(),
    )
