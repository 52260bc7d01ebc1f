"""Unit tests for logging setup."""

import json
import logging
import sys
from pathlib import Path

from code_style.style_logging import ROOT_LOGGER, JSONFormatter, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_file_logging(self, tmp_path: Path) -> None:
        """Messages from child loggers reach the log file."""
        log_file = tmp_path / "logs" / "style.log"
        setup_logging(log_file=log_file)

        logging.getLogger("code_style.driver").info("Applied fixes")
        for handler in get_logger().handlers:
            handler.flush()

        assert "Applied fixes" in log_file.read_text()

    def test_json_file_format(self, tmp_path: Path) -> None:
        log_file = tmp_path / "style.jsonl"
        setup_logging(log_file=log_file, log_format="json")

        logging.getLogger("code_style.driver").warning(
            "Fixpoint not reached", extra={"file_path": "src/a.js", "iteration": 10}
        )
        for handler in get_logger().handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "Fixpoint not reached"
        assert entry["level"] == "WARNING"
        assert entry["file_path"] == "src/a.js"
        assert entry["iteration"] == 10

    def test_console_levels(self) -> None:
        """Quiet keeps errors only; verbose shows debug output."""
        setup_logging(quiet=True)
        assert get_logger().handlers[0].level == logging.ERROR

        setup_logging(verbose=True)
        assert get_logger().handlers[0].level == logging.DEBUG

        setup_logging()
        assert get_logger().handlers[0].level == logging.WARNING

    def test_package_logger_does_not_propagate(self) -> None:
        logger = setup_logging()
        assert logger.name == ROOT_LOGGER
        assert logger.propagate is False


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_includes_exception(self) -> None:
        try:
            raise ValueError("broken rule")
        except ValueError:
            record = logging.getLogger("code_style.rules").makeRecord(
                "code_style.rules", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "failed"
        assert "ValueError: broken rule" in entry["exception"]
