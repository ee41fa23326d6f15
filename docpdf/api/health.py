"""Health check route."""

from fastapi import APIRouter, Depends

from docpdf import __version__
from docpdf.api.deps import get_component_factory
from docpdf.api.schemas import HealthResponse
from docpdf.core.factory import ComponentFactory

SERVICE_NAME = "document-pdf-api"

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(factory: ComponentFactory = Depends(get_component_factory)) -> HealthResponse:
    """Report liveness and whether LibreOffice can be found."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=__version__,
        renderer_available=factory.get_renderer().is_available(),
    )
