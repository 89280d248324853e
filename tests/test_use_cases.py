"""
Tests for the build use cases (HTML, PDF, rebuild-and-notify).
"""

from pathlib import Path

import pytest

from mdpress.core.models import PressConfig
from mdpress.core.services.event_bus import EventBus
from mdpress.core.services.pdf_export import PdfExportError
from mdpress.core.use_cases import build_html as build_html_module
from mdpress.core.use_cases import build_pdf as build_pdf_module
from mdpress.core.use_cases.build_html import build_html, rebuild_and_notify
from mdpress.core.use_cases.build_pdf import build_pdf


@pytest.fixture
def fake_export(monkeypatch):
    """Replace the browser step; records calls and writes a stub PDF."""
    calls: list[dict] = []

    def _export(html, output, settings=None):
        calls.append({"html": html, "output": output, "settings": settings})
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(b"%PDF-1.7\n")
        return output

    monkeypatch.setattr(build_pdf_module, "export_pdf", _export)
    return calls


@pytest.fixture
def fresh_bus(monkeypatch):
    bus = EventBus()
    monkeypatch.setattr(build_html_module, "bus", bus)
    return bus


# ── build_html ───────────────────────────────────────────────────────


class TestBuildHtml:
    def test_plain_build(self, source_file: Path, tmp_path: Path):
        out = tmp_path / "site" / "guide.html"
        result = build_html(source_file, out)

        assert result.ok, result.error
        assert result.title == "Release Guide"
        assert result.enhanced is False
        html = out.read_text(encoding="utf-8")
        assert result.chars == len(html)
        assert "<title>Release Guide</title>" in html
        assert "<h2>Overview</h2>" in html
        assert "note-box" not in html.split("</style>", 1)[1]

    def test_enhanced_build(self, source_file: Path, tmp_path: Path):
        out = tmp_path / "guide.html"
        result = build_html(source_file, out, enhance=True)

        assert result.ok
        assert result.enhanced
        html = out.read_text(encoding="utf-8")
        assert '<div class="note-box danger">' in html
        assert '<section class="h2-section">' in html

    def test_config_enables_enhancer(self, source_file: Path, tmp_path: Path):
        config = PressConfig().with_overrides("preview", enhance=True)
        result = build_html(source_file, tmp_path / "guide.html", config)
        assert result.enhanced

    def test_missing_source(self, tmp_path: Path):
        out = tmp_path / "guide.html"
        result = build_html(tmp_path / "missing.md", out)
        assert not result.ok
        assert "File not found" in result.error
        assert not out.exists()

    def test_to_dict(self, source_file: Path, tmp_path: Path):
        data = build_html(source_file, tmp_path / "guide.html").to_dict()
        assert data["ok"] is True
        assert data["title"] == "Release Guide"
        assert data["error"] is None


class TestRebuildAndNotify:
    def test_success_publishes_reload(self, source_file: Path, tmp_path: Path, fresh_bus):
        gen = fresh_bus.subscribe()
        next(gen)

        result = rebuild_and_notify(source_file, tmp_path / "guide.html")

        event = next(gen)
        assert result.ok
        assert event["type"] == "doc:reload"
        assert event["key"] == "guide.html"
        assert event["data"]["title"] == "Release Guide"
        gen.close()

    def test_failure_publishes_error(self, tmp_path: Path, fresh_bus):
        gen = fresh_bus.subscribe()
        next(gen)

        result = rebuild_and_notify(tmp_path / "missing.md", tmp_path / "guide.html")

        event = next(gen)
        assert not result.ok
        assert event["type"] == "doc:error"
        assert "File not found" in event["error"]
        gen.close()


# ── build_pdf ────────────────────────────────────────────────────────


class TestBuildPdf:
    def test_pipeline(self, source_file: Path, tmp_path: Path, fake_export):
        out = tmp_path / "guide.pdf"
        result = build_pdf(source_file, out)

        assert result.ok, result.error
        assert out.read_bytes().startswith(b"%PDF")
        assert result.title == "Release Guide"
        assert result.subtitle == "Rolling out v2"

        (call,) = fake_export
        html = call["html"]
        assert result.html_chars == len(html)
        assert "<h1>Release Guide</h1>" in html
        assert "<p>Rolling out v2</p>" in html
        assert '<div class="summary-cards">' in html
        assert '<div class="page-break"></div>' in html
        assert call["settings"].page_format == "A4"

    def test_date_and_page_setup(self, source_file: Path, tmp_path: Path, fake_export):
        config = PressConfig().with_overrides(
            "pdf", doc_date="2026-01-12", page_format="Letter", margin="0.5in",
        )
        build_pdf(source_file, tmp_path / "guide.pdf", config)

        html = fake_export[0]["html"]
        assert "Published: 2026-01-12" in html
        assert "size: Letter;" in html
        assert "margin: 0.5in;" in html

    def test_keep_html(self, source_file: Path, tmp_path: Path, fake_export):
        copy = tmp_path / "print" / "guide.html"
        result = build_pdf(source_file, tmp_path / "guide.pdf", keep_html=copy)

        assert result.html_copy == copy
        assert copy.read_text(encoding="utf-8") == fake_export[0]["html"]

    def test_export_failure_captured(self, source_file: Path, tmp_path: Path, monkeypatch):
        def _fail(html, output, settings=None):
            raise PdfExportError("PDF export failed: browser crashed")

        monkeypatch.setattr(build_pdf_module, "export_pdf", _fail)
        result = build_pdf(source_file, tmp_path / "guide.pdf")

        assert not result.ok
        assert "browser crashed" in result.error
        assert result.to_dict()["ok"] is False

    def test_empty_source(self, tmp_path: Path, fake_export):
        src = tmp_path / "empty.md"
        src.write_text("\n\n", encoding="utf-8")
        result = build_pdf(src, tmp_path / "empty.pdf")

        assert not result.ok
        assert "empty" in result.error
        assert fake_export == []
