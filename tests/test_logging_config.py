# tests/test_logging_config.py
import logging

import pytest

from cmdconf import (
    CommandDetailsBuilder,
    CommandType,
    disable_logging,
    get_log_file_path,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger("cmdconf")
    level, propagate = logger.level, logger.propagate
    yield
    disable_logging()
    logger.setLevel(level)
    logger.propagate = propagate


def test_setup_logging_to_file(tmp_path):
    log_file = tmp_path / "logs" / "cmdconf.log"
    setup_logging("DEBUG", file=log_file, console=False, format_string="%(levelname)s %(message)s")

    CommandDetailsBuilder("echo hi", CommandType.SHELL).build()

    assert get_log_file_path() == log_file.resolve()
    for handler in logging.getLogger("cmdconf").handlers:
        handler.flush()
    assert "DEBUG Built command details 'echo hi'" in log_file.read_text()


def test_setup_logging_replaces_handlers():
    logger = logging.getLogger("cmdconf")
    baseline = len(logger.handlers)
    setup_logging(logging.INFO)
    setup_logging(logging.INFO)
    assert len(logger.handlers) == baseline + 1
    assert logger.level == logging.INFO


def test_setup_logging_accepts_level_names():
    setup_logging("warning", console=False)
    assert logging.getLogger("cmdconf").level == logging.WARNING


def test_setup_logging_rejects_unknown_level_name():
    logger = logging.getLogger("cmdconf")
    setup_logging(logging.INFO)
    handlers = list(logger.handlers)

    with pytest.raises(ValueError, match="Unknown log level 'LOUD'"):
        setup_logging("LOUD")

    assert logger.level == logging.INFO
    assert logger.handlers == handlers


def test_disable_logging():
    setup_logging(logging.DEBUG, propagate=False)
    disable_logging()
    logger = logging.getLogger("cmdconf")
    assert not logger.isEnabledFor(logging.CRITICAL)
    assert get_log_file_path() is None
