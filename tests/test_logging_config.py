"""
Tests for logging setup.
"""

import logging
from pathlib import Path

from mdpress.core.observability.logging_config import setup_logging


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_falls_back_to_warning(self):
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_noisy_libraries_held_at_warning(self):
        setup_logging("INFO")
        assert logging.getLogger("werkzeug").level == logging.WARNING
        assert logging.getLogger("MARKDOWN").level == logging.WARNING

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(logging.getLogger().handlers) == 1

    def test_log_file(self, tmp_path: Path):
        log_file = tmp_path / "mdpress.log"
        setup_logging("ERROR", log_file=str(log_file), log_file_level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("mdpress.test").debug("written to file only")

        for handler in root.handlers:
            handler.flush()
        assert "written to file only" in log_file.read_text(encoding="utf-8")

        file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
        for handler in file_handlers:
            handler.close()
