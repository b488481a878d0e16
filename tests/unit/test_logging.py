"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging
import sys
from decimal import Decimal

import pytest

from assistive_pricing.pricing.logging import JsonFormatter, configure_logging, log_fields
from assistive_pricing.pricing.reconcile import ReconcileAction


def _record(msg: str = "Price label set", **fields: object) -> logging.LogRecord:
    return logging.getLogger("assistive_pricing.pricing.reconcile").makeRecord(
        "assistive_pricing.pricing.reconcile",
        logging.INFO,
        __file__,
        1,
        msg,
        (),
        None,
        extra=fields,
    )


def test_pricing_context_is_lifted_to_top_level() -> None:
    record = _record(
        repo="octo-org/octo-repo",
        issue_number=12,
        target="Price: 2.5 USD",
        price=Decimal("2.5"),
        action=ReconcileAction.ADD,
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["message"] == "Price label set"
    assert payload["repo"] == "octo-org/octo-repo"
    assert payload["issue_number"] == 12
    assert payload["extra"] == {"target": "Price: 2.5 USD", "price": "2.5", "action": "add"}
    assert "exception" not in payload


def test_log_fields_renames_record_attributes() -> None:
    fields = log_fields(created=["Price: 1 USD"], name="Price: 1 USD", label="bug")

    assert fields == {
        "created_field": ["Price: 1 USD"],
        "name_field": "Price: 1 USD",
        "label": "bug",
    }
    payload = json.loads(JsonFormatter().format(_record("Labels synchronized", **fields)))
    assert payload["extra"]["created_field"] == ["Price: 1 USD"]
    assert payload["logger"] == "assistive_pricing.pricing.reconcile"


def test_raw_record_attribute_in_extra_is_rejected_by_logging() -> None:
    with pytest.raises(KeyError):
        _record(created=["Price: 1 USD"])


def test_exceptions_are_rendered() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger = logging.getLogger("assistive_pricing.test")
        record = logger.makeRecord(
            logger.name, logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exception"]
    assert "extra" not in payload


def test_configure_logging_installs_a_single_json_handler() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    saved_quiet = {name: logging.getLogger(name).level for name in ("github", "urllib3")}
    try:
        configure_logging("debug")
        configure_logging("warning")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.WARNING
        assert logging.getLogger("urllib3").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        for name, level in saved_quiet.items():
            logging.getLogger(name).setLevel(level)
