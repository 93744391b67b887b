import logging

import pytest

from sqlvariant.utils.logging import (
    CorrelationIdFilter,
    configure_logging,
    correlation_scope,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    time_call,
)


@pytest.fixture
def package_level():
    logger = logging.getLogger("sqlvariant")
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_correlation_id_round_trip():
    token = set_correlation_id("test-token")
    assert token == "test-token"
    assert get_correlation_id() == "test-token"


def test_correlation_scope_restores_previous_id():
    set_correlation_id("outer")
    with correlation_scope("inner") as cid:
        assert cid == "inner"
        assert get_correlation_id() == "inner"
    assert get_correlation_id() == "outer"


def test_correlation_scope_reuses_bound_id():
    set_correlation_id("request-7")
    with correlation_scope() as cid:
        assert cid == "request-7"


def test_loggers_share_namespace():
    assert get_logger("tests.logging").name == "sqlvariant.tests.logging"
    assert logging.getLogger("sqlvariant").handlers


def test_configure_logging_sets_package_level(package_level):
    configure_logging(logging.WARNING)
    assert package_level.level == logging.WARNING
    get_logger("tests.logging")
    assert package_level.level == logging.WARNING


def test_records_carry_correlation_id(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with correlation_scope("cid-42"):
        logger.debug("inside scope")
    record = [record for record in caplog.records if record.message == "inside scope"][-1]
    with correlation_scope("cid-42"):
        assert CorrelationIdFilter().filter(record)
    assert record.correlation_id == "cid-42"


def test_time_call_logs_duration(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with time_call("unit-test", logger, threshold_ms=0):
        pass
    messages = [record.message for record in caplog.records if record.name == logger.name]
    assert any("unit-test took" in message for message in messages)


def test_time_call_logs_failures(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    try:
        with time_call("failing", logger, sql="SELECT 1", threshold_ms=10_000):
            raise KeyError("boom")
    except KeyError:
        pass
    records = [record for record in caplog.records if record.name == logger.name]
    assert any("failing failed after" in record.message for record in records)
    assert records[-1].levelno == logging.DEBUG
    assert records[-1].sql == "SELECT 1"
