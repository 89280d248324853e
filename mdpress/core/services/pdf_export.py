"""
PDF export — prints a complete HTML document with headless Chromium.

Drives Playwright's sync API: launch → new page → set content → print.
The browser is released on every exit path; launch, render and write
failures all surface as a single ``PdfExportError``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from mdpress.core.models.settings import PdfSettings

logger = logging.getLogger(__name__)

# Chromium flags for containers and CI runners without a user namespace.
_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class PdfExportError(Exception):
    """Raised when the headless browser cannot produce the PDF."""


def export_pdf(html: str, output: Path, settings: PdfSettings | None = None) -> Path:
    """Render ``html`` to a PDF file at ``output``.

    Args:
        html: Complete HTML document (stylesheet included).
        output: Destination .pdf path; parent directories are created.
        settings: Page format, margins, timeout (default: ``PdfSettings()``).

    Returns:
        The written PDF path.

    Raises:
        PdfExportError: On empty input, browser launch failure, render
            timeout or write failure.
    """
    settings = settings or PdfSettings()

    if not html or not html.strip():
        raise PdfExportError("HTML document is empty")

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PdfExportError(f"Cannot create output directory {output.parent}: {e}") from e

    margin = settings.margin
    try:
        with sync_playwright() as pw:
            logger.info("Launching headless Chromium")
            browser = pw.chromium.launch(headless=True, args=_LAUNCH_ARGS)
            try:
                page = browser.new_page()
                page.set_default_timeout(settings.timeout_ms)

                logger.info("Rendering %d chars of HTML", len(html))
                page.set_content(html, wait_until="networkidle")

                logger.info("Printing %s (%s, margin %s)", output.name, settings.page_format, margin)
                page.pdf(
                    path=str(output),
                    format=settings.page_format,
                    print_background=settings.print_background,
                    margin={"top": margin, "right": margin, "bottom": margin, "left": margin},
                )
            finally:
                _close_browser(browser)
    except PlaywrightError as e:
        raise PdfExportError(f"PDF export failed: {e}") from e
    except OSError as e:
        raise PdfExportError(f"Cannot write {output}: {e}") from e

    return output


def _close_browser(browser) -> None:  # type: ignore[no-untyped-def]
    """Close the browser; a failure here must not mask the export result."""
    try:
        browser.close()
    except PlaywrightError as e:
        logger.warning("Error while closing the browser: %s", e)
