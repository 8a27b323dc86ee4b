"""Tests for scratch_fetch.logger."""

import logging
from logging.handlers import RotatingFileHandler

from scratch_fetch.logger import configure, init_logging


def test_quiet_by_default():
    lg = configure()
    assert lg.level == logging.WARNING
    assert lg.propagate is False
    assert len(lg.handlers) == 1


def test_handlers_are_replaced_not_stacked():
    init_logging(level="DEBUG")
    lg = init_logging(level="INFO")
    assert lg.level == logging.INFO
    assert len(lg.handlers) == 1


def test_log_file(tmp_path):
    log_file = tmp_path / "build.log"
    lg = init_logging(level="INFO", log_file=log_file)
    assert any(isinstance(h, RotatingFileHandler) for h in lg.handlers)
    lg.info("staticx: done")
    for handler in lg.handlers:
        handler.flush()
    assert "staticx: done" in log_file.read_text(encoding="utf-8")


def test_console_output_goes_to_stderr(capsys):
    lg = init_logging(level="INFO")
    lg.info("compiling")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "compiling" in captured.err
