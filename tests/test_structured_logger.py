"""
Tests for teamhub/structured_logger.py
"""

import json
import logging

from teamhub.config import TeamHubSettings
from teamhub.structured_logger import (
    StructuredLogFormatter,
    configure_logging,
    log_with_context,
    request_id_ctx,
)

from conftest import TEST_SECRET


class ListHandler(logging.Handler):

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_formatter_emits_json_with_request_id_and_extras():
    logger = logging.getLogger("teamhub.tests.formatter")
    record = logger.makeRecord(
        logger.name, logging.WARNING, __file__, 10, "Invitation %s", ("sent",), None,
        extra={"team_id": "t1"}
    )

    token = request_id_ctx.set("req-42")
    try:
        payload = json.loads(StructuredLogFormatter().format(record))
    finally:
        request_id_ctx.reset(token)

    assert payload["message"] == "Invitation sent"
    assert payload["level"] == "WARNING"
    assert payload["request_id"] == "req-42"
    assert payload["team_id"] == "t1"


def test_formatter_omits_empty_request_id():
    record = logging.getLogger("teamhub.tests").makeRecord(
        "teamhub.tests", logging.INFO, __file__, 1, "plain", (), None
    )
    assert "request_id" not in json.loads(StructuredLogFormatter().format(record))


def test_log_with_context_adds_request_id():
    logger = logging.getLogger("teamhub.tests.context")
    handler = ListHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    token = request_id_ctx.set("req-7")
    try:
        log_with_context(logger, "info", "Invitation accepted", {"invitation_id": "i1"})
    finally:
        request_id_ctx.reset(token)
        logger.removeHandler(handler)

    [record] = handler.records
    assert record.request_id == "req-7"
    assert record.invitation_id == "i1"


def test_configure_logging_is_idempotent(tmp_path, teamhub_logger):
    settings = TeamHubSettings(
        data_dir=tmp_path,
        invitation_jwt_secret_key=TEST_SECRET,
        log_level="debug",
        structured_logs=True,
    )

    configure_logging(settings)
    logger = configure_logging(settings)

    assert logger is teamhub_logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, StructuredLogFormatter)


def test_get_logger_structured_adds_json_handler():
    from teamhub.structured_logger import get_logger

    logger = get_logger("teamhub.tests.structured", structured=True)
    try:
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredLogFormatter)
        assert get_logger("teamhub.tests.structured", structured=True).handlers == logger.handlers
    finally:
        logger.handlers.clear()
        logger.propagate = True
