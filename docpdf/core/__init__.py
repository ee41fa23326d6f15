"""Core configuration and factory components."""

from docpdf.core.config import Settings, get_settings
from docpdf.core.factory import ComponentFactory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
]
