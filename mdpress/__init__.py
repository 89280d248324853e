"""mdpress — Markdown to styled HTML and PDF, with live preview."""

__version__ = "0.1.0"
