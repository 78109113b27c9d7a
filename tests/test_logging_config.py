"""Tests for logging configuration."""

import logging

import pytest

from sow_presenter.logging_config import LOGGER_NAME, _rotate_log_if_needed, get_logger, setup_logging


@pytest.fixture
def reset_logger():
    """Remove handlers added by setup_logging after each test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_writes_session_log(self, tmp_path, reset_logger):
        """Verify messages land in the session log file."""
        logger = setup_logging(tmp_path / "logs", level=logging.INFO)

        get_logger("sow_presenter.presenter.state").info("present entry_1")
        for handler in logger.handlers:
            handler.flush()

        text = (tmp_path / "logs" / "sow_presenter.log").read_text()
        assert "SESSION STARTED" in text
        assert "present entry_1" in text
        assert "| INFO     |" in text

    def test_console_handler(self, tmp_path, reset_logger):
        """Verify console=True adds a stream handler."""
        logger = setup_logging(tmp_path, console=True)

        kinds = {type(h) for h in logger.handlers}
        assert logging.FileHandler in kinds
        assert logging.StreamHandler in kinds

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path, reset_logger):
        """Verify calling setup twice keeps one file handler."""
        setup_logging(tmp_path)
        logger = setup_logging(tmp_path)

        assert len(logger.handlers) == 1


class TestRotation:
    """Tests for startup log rotation."""

    def test_small_log_not_rotated(self, tmp_path):
        """Verify logs under the limit stay in place."""
        log_file = tmp_path / "app.log"
        log_file.write_text("x")

        _rotate_log_if_needed(log_file, max_bytes=10)

        assert log_file.exists()
        assert not (tmp_path / "app.log.1").exists()

    def test_large_log_rotated(self, tmp_path):
        """Verify an oversized log moves to .1 and backups shift."""
        log_file = tmp_path / "app.log"
        log_file.write_text("new" * 10)
        (tmp_path / "app.log.1").write_text("old")

        _rotate_log_if_needed(log_file, max_bytes=10, backup_count=3)

        assert not log_file.exists()
        assert (tmp_path / "app.log.1").read_text() == "new" * 10
        assert (tmp_path / "app.log.2").read_text() == "old"

    def test_oldest_backup_dropped(self, tmp_path):
        """Verify no more than backup_count backups are kept."""
        log_file = tmp_path / "app.log"
        log_file.write_text("current" * 10)
        for i in (1, 2):
            (tmp_path / f"app.log.{i}").write_text(f"backup{i}")

        _rotate_log_if_needed(log_file, max_bytes=10, backup_count=2)

        assert (tmp_path / "app.log.2").read_text() == "backup1"
        assert not (tmp_path / "app.log.3").exists()


class TestGetLogger:
    """Tests for get_logger."""

    def test_namespaces_plain_names(self):
        """Verify loggers live under the package logger."""
        assert get_logger("tests").name == "sow_presenter.tests"

    def test_keeps_package_names(self):
        """Verify module names already in the package are unchanged."""
        assert get_logger("sow_presenter.server.app").name == "sow_presenter.server.app"
        assert get_logger().name == LOGGER_NAME
