import logging

import pytest

from txcapture.configs import AppConfig
from txcapture.extensions.ext_logging import (
    TraceIdFilter,
    TraceIdFormatter,
    init_logging,
    trace_id_generator,
    trace_id_var,
)


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("httpcore").propagate = True


def make_record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("tests", logging.INFO, __file__, 1, message, None, None)


class TestTraceId:
    def test_generator_unique(self):
        assert trace_id_generator() != trace_id_generator()
        assert len(trace_id_generator()) == 32

    def test_filter_stamps_current_id(self):
        token = trace_id_var.set("abc123")
        try:
            record = make_record()
            assert TraceIdFilter().filter(record) is True
            assert record.trace_id == "abc123"
        finally:
            trace_id_var.reset(token)

    def test_filter_outside_call(self):
        record = make_record()
        TraceIdFilter().filter(record)
        assert record.trace_id == ""

    def test_formatter_without_filter(self):
        formatter = TraceIdFormatter("%(trace_id)s|%(message)s")
        assert formatter.format(make_record()) == "|hello"


class TestInitLogging:
    def test_log_file(self, tmp_path, restore_root_logging):
        log_file = tmp_path / "logs" / "txcapture.log"
        config = AppConfig(_env_file=None, LOG_FILE=str(log_file), LOG_FORMAT="%(trace_id)s %(message)s")

        init_logging(config)
        token = trace_id_var.set("feedface")
        try:
            logging.getLogger("tests.file").info("written to file")
        finally:
            trace_id_var.reset(token)
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.read_text().strip() == "feedface written to file"
        assert logging.getLogger("httpcore").propagate is False

    def test_handlers(self, restore_root_logging):
        init_logging(AppConfig(_env_file=None, LOG_LEVEL="WARNING"))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TraceIdFormatter)

    def test_timezone(self, restore_root_logging):
        init_logging(AppConfig(_env_file=None, LOG_TZ="UTC"))
        formatter = logging.getLogger().handlers[0].formatter
        assert formatter.converter(0).tm_hour == 0
        assert formatter.converter(0).tm_year == 1970
