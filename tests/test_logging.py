import json
import logging

import pytest
import structlog

from pricelist.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_json_events_carry_service_and_logger_name(caplog):
    configure_logging("INFO", json_logs=True)
    caplog.set_level(logging.INFO, logger="pricelist.test")

    logger = get_logger("pricelist.test")
    logger.debug("hidden")
    logger.info("document_written", size=3)

    (record,) = caplog.records
    payload = json.loads(record.getMessage())
    assert payload["event"] == "document_written"
    assert payload["service"] == "pricelist"
    assert payload["logger"] == "pricelist.test"
    assert payload["level"] == "info"
    assert payload["size"] == 3


def test_console_renderer_for_terminals(caplog):
    configure_logging("INFO", json_logs=False)
    caplog.set_level(logging.INFO, logger="pricelist.console")

    get_logger("pricelist.console").warning("item_overflows_page", item_id=7)

    message = caplog.records[-1].getMessage()
    assert "item_overflows_page" in message
    with pytest.raises(json.JSONDecodeError):
        json.loads(message)
