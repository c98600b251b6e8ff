import logging

import pytest

from tender_system.core.config import Settings
from tender_system.core.logging import RequestContextFilter, configure_logging, request_id_var


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    sa_level = logging.getLogger("sqlalchemy.engine").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(sa_level)


def make_record():
    return logging.LogRecord("tender_system.test", logging.INFO, __file__, 1, "hello", None, None)


def test_filter_stamps_service_and_request_id():
    record = make_record()
    token = request_id_var.set("req-42")
    try:
        assert RequestContextFilter("tenders").filter(record)
    finally:
        request_id_var.reset(token)

    assert record.service == "tenders"
    assert record.request_id == "req-42"


def test_filter_outside_a_request_uses_placeholder():
    record = make_record()
    RequestContextFilter("tenders").filter(record)

    assert record.request_id == "-"


def test_sqlalchemy_level_comes_from_settings(restore_logging):
    settings = Settings(database_url="sqlite://", log_level="DEBUG", sqlalchemy_log_level="INFO")

    configure_logging(settings)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
    (handler,) = logging.getLogger().handlers
    assert any(isinstance(f, RequestContextFilter) for f in handler.filters)
