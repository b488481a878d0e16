"""Unit tests for label ordering by magnitude."""

from __future__ import annotations

from decimal import Decimal

import pytest

from assistive_pricing.pricing.errors import UnrecognizedLabelError
from assistive_pricing.pricing.models import Label
from assistive_pricing.pricing.values import (
    LabelScale,
    ScaleEntry,
    parse_magnitude,
    price_value,
    sort_labels_by_value,
    sort_price_labels,
    value_of,
)


def _scale(*entries: tuple[str, str]) -> LabelScale:
    return LabelScale(ScaleEntry(name=name, value=Decimal(value)) for name, value in entries)


def test_sort_labels_by_value_smallest_first() -> None:
    scale = _scale(("Time: <1 Week", "5"), ("Time: <1 Hour", "0.125"), ("Time: <1 Day", "1"))
    labels = [Label("Time: <1 Week"), Label("Time: <1 Day"), Label("Time: <1 Hour")]

    ordered = sort_labels_by_value(labels, scale)

    assert [label.name for label in ordered] == ["Time: <1 Hour", "Time: <1 Day", "Time: <1 Week"]


def test_equal_magnitudes_fall_back_to_configuration_order() -> None:
    scale = _scale(("Time: first", "1"), ("Time: second", "1"))

    # Issue order is the reverse of configuration order.
    ordered = sort_labels_by_value([Label("Time: second"), Label("Time: first")], scale)

    assert ordered[0].name == "Time: first"


def test_value_of_rejects_unrecognized_labels() -> None:
    scale = _scale(("Time: <1 Day", "1"))

    assert value_of("Time: <1 Day", scale) == (Decimal("1"), 0)
    with pytest.raises(UnrecognizedLabelError):
        value_of("bug", scale)
    assert "bug" not in scale
    assert scale.magnitude("bug") is None


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Time: <1 Hour", Decimal("0.125")),
        ("Time: <2 Hours", Decimal("0.25")),
        ("Time: 1 Day", Decimal("1")),
        ("Time: <1 Week", Decimal("5")),
        ("Time: <1 Month", Decimal("20")),
    ],
)
def test_parse_magnitude_converts_time_units_to_days(name: str, expected: Decimal) -> None:
    assert parse_magnitude(name, time_units=True) == expected


def test_parse_magnitude_requires_a_number_and_unit() -> None:
    assert parse_magnitude("Priority: 3 (High)") == Decimal("3")
    with pytest.raises(ValueError):
        parse_magnitude("Priority: High")
    with pytest.raises(ValueError):
        parse_magnitude("Time: 3", time_units=True)


def test_price_value_parses_price_labels_only() -> None:
    assert price_value("Price: 12.5 USD") == Decimal("12.5")
    assert price_value("Price: 300 USD") == Decimal("300")
    assert price_value("Time: 1 Day") is None
    assert price_value("Price: TBD") is None


def test_sort_price_labels_is_stable_and_puts_unparseable_last() -> None:
    labels = [
        Label("Price: TBD"),
        Label("Price: 5 USD"),
        Label("Price: 1 USD"),
        Label("Price: 5.0 USD"),
    ]

    ordered = [label.name for label in sort_price_labels(labels)]

    assert ordered == ["Price: 1 USD", "Price: 5 USD", "Price: 5.0 USD", "Price: TBD"]
