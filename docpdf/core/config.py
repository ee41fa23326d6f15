"""Application configuration using Pydantic v2 Settings.

Values come from environment variables (case-insensitive) or a ``.env``
file in the working directory, e.g. ``TEMPLATES_DIR=/srv/templates``.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    templates_dir: Path = Field(
        default=Path("./templates"),
        description="Directory holding the .docx templates.",
    )
    output_dir: Path = Field(
        default=Path("./output"),
        description="Directory for working copies and generated PDFs.",
    )
    keep_output_files: bool = Field(
        default=False,
        description="Keep working copies and PDFs after the response is built.",
    )

    # LibreOffice
    renderer_path: str | None = Field(
        default=None,
        description="Explicit soffice executable. Disables well-known path discovery.",
    )
    conversion_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Seconds to wait for LibreOffice before killing it.",
    )
    conversion_settle_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Delay before moving the PDF written by LibreOffice.",
    )
    max_concurrent_conversions: int | None = Field(
        default=None,
        ge=1,
        description="Upper bound on simultaneous LibreOffice processes (unbounded if unset).",
    )
    isolate_renderer_profile: bool = Field(
        default=True,
        description="Run every conversion with its own temporary LibreOffice user profile.",
    )

    # Editing
    strict_bookmarks: bool = Field(
        default=False,
        description="Fail on bookmarks that cannot be located instead of skipping them.",
    )

    # Logging
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR.")
    log_dir: Path = Field(default=Path("./logs"), description="Directory for info.log and error.log.")

    @field_validator("templates_dir", "output_dir")
    @classmethod
    def ensure_dir(cls, v: Path) -> Path:
        """Create storage directories and make them absolute."""
        v.mkdir(parents=True, exist_ok=True)
        return v.resolve()

    @field_validator("renderer_path")
    @classmethod
    def blank_renderer_path(cls, v: str | None) -> str | None:
        """Treat an empty RENDERER_PATH as unset."""
        if v is None:
            return None
        return v.strip() or None

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
