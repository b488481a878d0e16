"""Unit tests for label recognition and minimum selection."""

from __future__ import annotations

from assistive_pricing.pricing.models import Label
from assistive_pricing.pricing.plugin_config import PricingConfig
from assistive_pricing.pricing.recognition import recognize, select_minimum


def test_recognize_buckets_configured_labels_only(pricing_config: PricingConfig) -> None:
    labels = [
        Label("bug"),
        Label("Time: <1 Week"),
        Label("Priority: 2 (Medium)"),
        Label("Time: 1 Day"),
        Label("Price: 5 USD"),
        Label("time: 1 day"),
    ]

    recognized = recognize(labels, pricing_config)

    assert [label.name for label in recognized.time] == ["Time: <1 Week", "Time: 1 Day"]
    assert [label.name for label in recognized.priority] == ["Priority: 2 (Medium)"]


def test_select_minimum_picks_smallest_of_each_bucket(pricing_config: PricingConfig) -> None:
    labels = [
        Label("Time: <1 Week"),
        Label("Priority: 3 (High)"),
        Label("Time: <1 Hour"),
        Label("Priority: 2 (Medium)"),
    ]

    selected = select_minimum(recognize(labels, pricing_config), pricing_config)

    assert selected.time == Label("Time: <1 Hour")
    assert selected.priority == Label("Priority: 2 (Medium)")
    assert selected.is_priceable


def test_select_minimum_leaves_empty_slots(pricing_config: PricingConfig) -> None:
    selected = select_minimum(recognize([Label("Time: 1 Day")], pricing_config), pricing_config)

    assert selected.time == Label("Time: 1 Day")
    assert selected.priority is None
    assert not selected.is_priceable


def test_tie_break_prefers_first_configured_label() -> None:
    config = PricingConfig.model_validate(
        {
            "labels": {
                "time": [
                    {"name": "Time: <1 Hour", "value": 1},
                    {"name": "Time: 1 Hour", "value": 1},
                ],
                "priority": ["Priority: 1 (Normal)"],
            }
        }
    )

    for labels in (
        [Label("Time: 1 Hour"), Label("Time: <1 Hour")],
        [Label("Time: <1 Hour"), Label("Time: 1 Hour")],
    ):
        selected = select_minimum(recognize(labels, config), config)
        assert selected.time == Label("Time: <1 Hour")
