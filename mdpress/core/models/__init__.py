"""
Domain models — Pydantic types for mdpress.

All models are re-exported here for convenient access:

    from mdpress.core.models import PressConfig, EnhanceRules, DocumentTitle
"""

from mdpress.core.models.document import DocumentTitle
from mdpress.core.models.rules import EnhanceRules
from mdpress.core.models.settings import (
    MarkdownSettings,
    PdfSettings,
    PressConfig,
    PreviewSettings,
)

__all__ = [
    # document.py
    "DocumentTitle",
    # rules.py
    "EnhanceRules",
    # settings.py
    "MarkdownSettings",
    "PdfSettings",
    "PressConfig",
    "PreviewSettings",
]
