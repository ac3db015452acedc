import logging
import sys

import pytest
from pythonjsonlogger.json import JsonFormatter
from rich.logging import RichHandler

from flagtree.utils import get_program_invocation, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_cli_mode_uses_rich_handler(restore_root_logger):
    setup_logging(mode="cli", log_filename=None)
    (handler,) = restore_root_logger.handlers
    assert isinstance(handler, RichHandler)
    assert handler.level == logging.WARNING


def test_json_mode_from_environment(monkeypatch, restore_root_logger):
    monkeypatch.setenv("FLAGTREE_LOG_MODE", "json")
    setup_logging(log_filename=None, console_log_level=logging.INFO)
    (handler,) = restore_root_logger.handlers
    assert isinstance(handler.formatter, JsonFormatter)
    assert handler.level == logging.INFO


def test_file_logging(tmp_path, restore_root_logger):
    log_file = tmp_path / "flagtree.log"
    setup_logging(mode="cli", log_filename=str(log_file), json_log_to_file=True)
    file_handler = restore_root_logger.handlers[-1]
    assert isinstance(file_handler, logging.FileHandler)
    assert isinstance(file_handler.formatter, JsonFormatter)
    file_handler.close()


def test_invalid_mode(restore_root_logger):
    with pytest.raises(ValueError, match="Invalid log mode"):
        setup_logging(mode="xml", log_filename=None)


def test_no_log_file_unless_requested(monkeypatch, restore_root_logger):
    monkeypatch.setenv("FLAGTREE_LOG_MODE", "cli")
    setup_logging()
    (handler,) = restore_root_logger.handlers
    assert isinstance(handler, RichHandler)


@pytest.mark.parametrize(
    "argv0, expected",
    [
        ("/usr/local/bin/deploy", "deploy"),
        ("scripts/release.py", "release.py"),
        ("/src/tool/__main__.py", "python -m tool"),
    ],
)
def test_program_invocation(monkeypatch, argv0, expected):
    monkeypatch.setattr(sys, "argv", [argv0, "--help"])
    assert get_program_invocation() == expected
