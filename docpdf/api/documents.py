"""Document generation API routes.

Fills Word templates with request variables and streams the rendered PDF.
"""

import logging
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from docpdf.api.deps import get_pdf_generator
from docpdf.api.schemas import BookmarkListResponse, ErrorResponse, GeneratePdfRequest
from docpdf.interfaces.document import TemplateNotFoundError
from docpdf.services.pdf_generator import PdfGenerator

logger = logging.getLogger(__name__)

# One JSON event per generation request.
audit_log = structlog.get_logger("docpdf.audit")

router = APIRouter(prefix="/api/document", tags=["document"])


def _template_not_found(exc: TemplateNotFoundError) -> PlainTextResponse:
    logger.warning(str(exc))
    return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)


def _server_error(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


def _content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.post(
    "/generate-pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "The rendered PDF"},
        400: {"content": {"text/plain": {}}, "description": "Template not found"},
        500: {"model": ErrorResponse, "description": "Generation failed"},
    },
)
async def generate_pdf(
    request: GeneratePdfRequest,
    generator: PdfGenerator = Depends(get_pdf_generator),
) -> Response:
    """Fill a template with variables and return it as a PDF.

    Args:
        request: Template name, variables and optional bookmark text.
        generator: The PDF generator.

    Returns:
        The PDF bytes as an attachment named after the template.
    """
    try:
        logger.info(
            f"PDF requested for template {request.template_name} "
            f"({len(request.variables)} variables, {len(request.bookmarks)} bookmarks)"
        )

        result = await generator.generate_pdf(
            request.template_name,
            request.variables,
            request.bookmarks,
        )

    except TemplateNotFoundError as e:
        return _template_not_found(e)
    except Exception as e:
        logger.error(f"PDF generation failed for {request.template_name}: {e}", exc_info=True)
        return _server_error(e)

    audit_log.info(
        "pdf_generated",
        template=request.template_name,
        variables=len(request.variables),
        bookmarks=len(request.bookmarks),
        size=len(result.content),
    )
    return Response(
        content=result.content,
        media_type="application/pdf",
        headers={"Content-Disposition": _content_disposition(result.filename)},
    )


@router.get(
    "/templates/{template_name:path}/bookmarks",
    response_model=BookmarkListResponse,
    response_model_by_alias=True,
    responses={
        400: {"content": {"text/plain": {}}, "description": "Template not found"},
        500: {"model": ErrorResponse, "description": "Template could not be read"},
    },
)
async def list_template_bookmarks(
    template_name: str,
    generator: PdfGenerator = Depends(get_pdf_generator),
):
    """List the bookmark names of a template in document order.

    Args:
        template_name: Template file name.
        generator: The PDF generator.
    """
    try:
        names = await generator.list_template_bookmarks(template_name)
    except TemplateNotFoundError as e:
        return _template_not_found(e)
    except Exception as e:
        logger.error(f"Error getting bookmarks for {template_name}: {e}", exc_info=True)
        return _server_error(e)

    return BookmarkListResponse(template_name=template_name, bookmarks=names)
