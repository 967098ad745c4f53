# File: tests/test_logger.py
import io
import logging
import sys

import pytest

from uni_scout.logger import LOGGER_NAME, configure, init_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    init_logging()


def test_console_stream_and_format():
    stream = io.StringIO()
    lg = configure(level="debug", log_format="%(levelname)s:%(message)s", stream=stream)
    lg.debug("[D:%d|S:%d] Scraping: %s", 1, 69, "https://example.edu/admissions")
    assert stream.getvalue() == "DEBUG:[D:1|S:69] Scraping: https://example.edu/admissions\n"
    assert lg.propagate is False


def test_log_file_is_written(tmp_path):
    log_file = tmp_path / "logs" / "uni_scout.log"
    lg = configure(level="INFO", log_file=log_file, stream=io.StringIO())
    lg.info("Finished %s", "example.edu")
    for handler in lg.handlers:
        handler.flush()
    assert "Finished example.edu" in log_file.read_text(encoding="utf-8")


def test_replacing_handlers_closes_old_ones(tmp_path):
    lg = configure(log_file=tmp_path / "a.log", stream=io.StringIO())
    old_file_handler = lg.handlers[-1]
    configure(stream=io.StringIO())
    assert len(lg.handlers) == 1
    assert old_file_handler not in lg.handlers
    assert old_file_handler.stream is None


def test_default_console_is_stderr():
    lg = init_logging(level=logging.WARNING)
    assert logging.getLogger(LOGGER_NAME) is lg
    assert len(lg.handlers) == 1
    assert lg.handlers[0].stream is sys.stderr
    assert lg.level == logging.WARNING
