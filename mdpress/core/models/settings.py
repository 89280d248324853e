"""
Settings models — the shape of mdpress.yml.

Every field has a default, so an absent config file (or an empty one)
yields a fully usable ``PressConfig``.  CLI options override these
values per invocation.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from mdpress.core.models.rules import EnhanceRules

# Units accepted by the headless browser for page margins.
MARGIN_RE = re.compile(r"^\d+(?:\.\d+)?(?:px|in|cm|mm)$")

# Paper formats the headless browser knows by name.
PAGE_FORMATS = ("Letter", "Legal", "Tabloid", "Ledger", "A0", "A1", "A2", "A3", "A4", "A5", "A6")

# Format names are written into the print stylesheet as-is.
PAGE_FORMAT_RE = re.compile(r"^[A-Za-z0-9]+$")


class MarkdownSettings(BaseModel):
    """Python-Markdown options."""

    # tables + fenced code + line-break-on-newline
    extensions: list[str] = Field(
        default_factory=lambda: ["tables", "fenced_code", "nl2br"],
    )


class PdfSettings(BaseModel):
    """Page setup and browser options for PDF export."""

    page_format: str = "A4"
    margin: str = "12.7mm"  # 0.5in on every side
    timeout_ms: int = Field(default=30_000, gt=0)
    print_background: bool = True
    doc_date: str = ""
    date_label: str = "Published"

    @field_validator("page_format")
    @classmethod
    def _check_page_format(cls, value: str) -> str:
        value = value.strip()
        if not PAGE_FORMAT_RE.match(value):
            raise ValueError(f"page_format must be a paper name such as A4 or Letter, got '{value}'")
        return value

    @field_validator("margin")
    @classmethod
    def _check_margin(cls, value: str) -> str:
        value = value.strip()
        if not MARGIN_RE.match(value):
            raise ValueError(
                f"margin must be a number with a px, in, cm or mm unit, got '{value}'"
            )
        return value


class PreviewSettings(BaseModel):
    """Live-preview server and watcher options."""

    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    poll_interval: float = Field(default=0.5, gt=0)
    open_browser: bool = True
    enhance: bool = False


class PressConfig(BaseModel):
    """Root configuration — loaded from mdpress.yml."""

    version: int = 1
    lang: str = "en"

    markdown: MarkdownSettings = Field(default_factory=MarkdownSettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)
    preview: PreviewSettings = Field(default_factory=PreviewSettings)
    enhance: EnhanceRules = Field(default_factory=EnhanceRules)

    def with_overrides(self, section: str, **values: object) -> PressConfig:
        """Copy with the non-None ``values`` applied to one section.

        The result is re-validated, so a bad override raises
        ``pydantic.ValidationError`` just like a bad config file.
        """
        updates = {k: v for k, v in values.items() if v is not None}
        if not updates:
            return self
        data = self.model_dump()
        data[section].update(updates)
        return PressConfig.model_validate(data)
