"""
Unit tests for logging setup.
"""

import logging
import logging.handlers

import pytest

from clipcast.utils.logging_setup import (
    DEFAULT_MAX_BYTES,
    get_logger,
    log_exception,
    parse_size,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    """Put back the root logger handlers replaced by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestParseSize:
    """Tests for size strings."""

    @pytest.mark.parametrize("raw,expected", [
        ("10MB", 10 * 1024 * 1024),
        ("512kb", 512 * 1024),
        ("1GB", 1024 * 1024 * 1024),
        ("1.5MB", int(1.5 * 1024 * 1024)),
        ("2048", 2048),
    ])
    def test_parse(self, raw, expected):
        assert parse_size(raw) == expected

    def test_unparseable_falls_back(self):
        assert parse_size("lots") == DEFAULT_MAX_BYTES


@pytest.mark.unit
class TestSetupLogging:
    """Tests for handler configuration."""

    def test_console_only(self, restore_root_logger, temp_dir):
        root = setup_logging(log_level="DEBUG", log_to_file=False, log_directory=temp_dir / "logs")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)
        assert not (temp_dir / "logs").exists()

    def test_rotating_file(self, restore_root_logger, temp_dir):
        root = setup_logging(
            log_file_name="clipcast.log",
            log_to_console=False,
            max_bytes=4096,
            backup_count=2,
            log_directory=temp_dir,
        )
        get_logger("clipcast.test").info("hello")

        [handler] = root.handlers
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert handler.maxBytes == 4096
        assert handler.backupCount == 2
        handler.flush()
        assert "hello" in (temp_dir / "clipcast.log").read_text()

    def test_file_path_with_directory(self, restore_root_logger, temp_dir):
        setup_logging(log_file_name=str(temp_dir / "nested" / "app.log"), log_to_console=False)

        assert (temp_dir / "nested" / "app.log").exists()

    def test_unknown_level_defaults_to_info(self, restore_root_logger):
        root = setup_logging(log_level="chatty", log_to_file=False)

        assert root.level == logging.INFO


@pytest.mark.unit
class TestLogException:
    """Tests for traceback logging."""

    def test_includes_traceback(self, caplog):
        logger = get_logger("clipcast.test")
        try:
            raise RuntimeError("store went away")
        except RuntimeError as e:
            with caplog.at_level(logging.ERROR, logger="clipcast.test"):
                log_exception(logger, e, "Export failed")

        [record] = caplog.records
        assert record.getMessage() == "Export failed: store went away"
        assert record.exc_info is not None
