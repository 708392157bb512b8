"""
Tests for logging utilities.
"""

import logging
from pathlib import Path

from rich.console import Console

from stream_supervisor.utils import SessionLogger, get_logger, setup_logger


class TestSessionLogger:
    """Test SessionLogger class."""

    def test_prefixes_label(self, caplog):
        caplog.set_level(logging.DEBUG, logger="tests.session")
        log = SessionLogger("Porch", logger=logging.getLogger("tests.session"))

        log.info("Starting video stream")
        log.warning("Slow start")
        log.error("Stream failed")

        assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
            (logging.INFO, "[Porch] Starting video stream"),
            (logging.WARNING, "[Porch] Slow start"),
            (logging.ERROR, "[Porch] Stream failed"),
        ]

    def test_warn_alias(self):
        assert SessionLogger.warn is SessionLogger.warning

    def test_debug_gate(self, caplog):
        """Test that debug messages need debug mode or force."""
        caplog.set_level(logging.DEBUG, logger="tests.session")
        log = SessionLogger("Porch", logger=logging.getLogger("tests.session"))

        log.debug("hidden")
        log.debug("forced", force=True)
        log.debug_mode = True
        log.debug("shown")

        assert [r.getMessage() for r in caplog.records] == ["[Porch] forced", "[Porch] shown"]

    def test_markup_disabled(self, caplog):
        """Test that records opt out of Rich markup."""
        caplog.set_level(logging.DEBUG, logger="tests.session")
        log = SessionLogger("Porch", logger=logging.getLogger("tests.session"))

        log.error("[error] bad input")

        assert caplog.records[0].markup is False

    def test_default_logger(self):
        log = SessionLogger("Porch")
        assert log.logger.name == "stream_supervisor.session"


class TestSetupLogger:
    """Test setup_logger function."""

    def test_levels_and_handlers(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "supervisor.log"
        logger = setup_logger(
            name="tests.setup",
            level="warning",
            log_file=log_file,
            console=Console(file=None, quiet=True),
        )

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 2
        assert logger.propagate is False
        assert log_file.parent.exists()

        logger.warning("written to file")
        for handler in logger.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()

        for handler in logger.handlers:
            handler.close()

    def test_verbose_forces_debug(self):
        logger = setup_logger(name="tests.verbose", level="ERROR", verbose=True)
        assert logger.level == logging.DEBUG

    def test_get_logger_is_child(self):
        assert get_logger("stream_supervisor.executor").parent.name == "stream_supervisor"
