"""Tests for logging setup."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from overlayqueue.core.logging import setup_logging


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_console_only_by_default(restore_root_logger):
    setup_logging(level="WARNING")

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0], RotatingFileHandler)


def test_file_handler_when_directory_given(restore_root_logger, tmp_path):
    log_dir = tmp_path / "logs"

    setup_logging(level="debug", directory=log_dir, max_size_mb=1, backup_count=2)
    logging.getLogger("overlayqueue.test").debug("hello from the lane")
    for handler in restore_root_logger.handlers:
        handler.flush()

    file_handlers = [h for h in restore_root_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].backupCount == 2
    assert "hello from the lane" in (log_dir / "overlayqueue.log").read_text()


def test_invalid_level_raises(restore_root_logger):
    with pytest.raises(AttributeError):
        setup_logging(level="CHATTY")
