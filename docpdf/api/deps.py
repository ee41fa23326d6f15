"""FastAPI dependencies for dependency injection."""

from fastapi import Depends, Request

from docpdf.core.factory import ComponentFactory
from docpdf.services.pdf_generator import PdfGenerator


def get_component_factory(request: Request) -> ComponentFactory:
    """Return the component factory attached to the application."""
    return request.app.state.factory


def get_pdf_generator(
    factory: ComponentFactory = Depends(get_component_factory),
) -> PdfGenerator:
    """Dependency for the PDF generator.

    Args:
        factory: The application's component factory.

    Returns:
        The configured PdfGenerator.
    """
    return factory.get_pdf_generator()
