"""FastAPI routers and dependencies."""

from docpdf.api.deps import (
    get_component_factory,
    get_pdf_generator,
)
from docpdf.api.documents import router as documents_router
from docpdf.api.health import router as health_router

__all__ = [
    "get_component_factory",
    "get_pdf_generator",
    "documents_router",
    "health_router",
]
