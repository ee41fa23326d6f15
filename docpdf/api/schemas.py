"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Document Schemas
# =============================================================================


class GeneratePdfRequest(BaseModel):
    """Request to fill a template and render it to PDF."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "templateName": "invoice.docx",
                "variables": {"{{Date}}": "2024-01-01", "{{Total}}": "1,250.00"},
                "bookmarks": {},
            }
        },
    )

    template_name: str = Field(
        alias="templateName",
        description="Template file name (should be in the templates folder)",
    )
    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Dictionary of variables to replace in the template",
    )
    bookmarks: dict[str, str] = Field(
        default_factory=dict,
        description="Optional bookmark name to replacement text",
    )

    @field_validator("variables", "bookmarks", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Treat an explicit null like an empty mapping."""
        return {} if v is None else v


class BookmarkListResponse(BaseModel):
    """Bookmark names of a template in document order."""

    model_config = ConfigDict(populate_by_name=True)

    template_name: str = Field(alias="templateName")
    bookmarks: list[str]


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(description="Error message")


# =============================================================================
# Health Schemas
# =============================================================================


class HealthResponse(BaseModel):
    """Service health report."""

    status: str
    service: str
    version: str
    renderer_available: bool
