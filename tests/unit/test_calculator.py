"""Unit tests for the price formula and label rendering."""

from __future__ import annotations

from decimal import Decimal

from assistive_pricing.github_labels import format_price, price_label_name
from assistive_pricing.pricing.calculator import compute_price, price_label_for
from assistive_pricing.pricing.models import Label
from assistive_pricing.pricing.plugin_config import PricingConfig


def test_one_day_normal_priority_costs_one(pricing_config: PricingConfig) -> None:
    time_label = Label("Time: 1 Day")
    priority_label = Label("Priority: 1 (Normal)")

    assert compute_price(time_label, priority_label, pricing_config) == Decimal("1")
    assert price_label_for(time_label, priority_label, pricing_config) == "Price: 1 USD"


def test_price_multiplies_time_priority_and_base_multiplier(pricing_config: PricingConfig) -> None:
    config = pricing_config.model_copy(update={"base_price_multiplier": Decimal("2")})

    price = compute_price(Label("Time: <1 Week"), Label("Priority: 3 (High)"), config)

    assert price == Decimal("30")


def test_unresolvable_labels_cannot_be_priced(pricing_config: PricingConfig) -> None:
    normal = Label("Priority: 1 (Normal)")
    assert compute_price(Label("Time: forever"), normal, pricing_config) is None
    assert price_label_for(Label("Time: 1 Day"), Label("bug"), pricing_config) is None


def test_price_rendering_strips_trailing_zeros() -> None:
    assert format_price(Decimal("1.00")) == "1"
    assert format_price(Decimal("2.50")) == "2.5"
    assert format_price(Decimal("0.125")) == "0.13"
    assert format_price(Decimal("300")) == "300"
    assert price_label_name(Decimal("0.375"), "EUR") == "Price: 0.38 EUR"
