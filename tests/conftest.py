"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """CLI invocations reconfigure the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def sample_markdown() -> str:
    """A document exercising every enhancement."""
    return textwrap.dedent("""\
        # 【Draft】Release Guide — Rolling out v2

        Intro paragraph.

        ## Overview

        **Note**: Back up first.

        **Points**

        - Faster builds
        - Smaller images

        **Cautions**

        - Config format changed

        ## Setup

        ### Step 1: Install

        Install the package [Required].

        ### Options

        Pick a theme [Optional].

        ※ Themes can change later.

        <!-- pagebreak -->

        ## Appendix

        **Done**: All set.
    """)


@pytest.fixture
def source_file(tmp_path: Path, sample_markdown: str) -> Path:
    """The sample document written to disk."""
    path = tmp_path / "guide.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path
