"""
Tests for the application bootstrap: command line and logging setup.
"""
import logging

import pytest

from orgchart.logging_config import setup_logging
from orgchart.main import _build_parser


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("orgchart")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestCommandLine:
    def test_defaults(self):
        args, rest = _build_parser().parse_known_args([])
        assert args.data is None
        assert not args.debug
        assert rest == []

    def test_qt_arguments_are_passed_through(self):
        args, rest = _build_parser().parse_known_args(["--data", "units.json", "--debug", "-platform", "offscreen"])
        assert args.data == "units.json"
        assert args.debug
        assert rest == ["-platform", "offscreen"]


class TestLogging:
    def test_file_and_console_handlers(self, restore_logger, tmp_path):
        log_file = tmp_path / "orgchart.log"
        setup_logging(level=logging.DEBUG, log_file=str(log_file), capture_qt=False)

        assert restore_logger.level == logging.DEBUG
        assert len(restore_logger.handlers) == 2

        logging.getLogger("orgchart.model.layout").debug("layout message")
        for handler in restore_logger.handlers:
            handler.flush()
        assert "layout message" in log_file.read_text(encoding="utf-8")

    def test_repeated_setup_does_not_duplicate(self, restore_logger):
        setup_logging(capture_qt=False)
        setup_logging(capture_qt=False)
        assert len(restore_logger.handlers) == 1
