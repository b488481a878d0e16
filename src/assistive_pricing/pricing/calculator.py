"""Price formula: base multiplier x time magnitude x priority magnitude."""

from __future__ import annotations

import logging
from decimal import Decimal

from assistive_pricing.github_labels import price_label_name
from assistive_pricing.pricing.models import Label
from assistive_pricing.pricing.plugin_config import PricingConfig

logger = logging.getLogger(__name__)


def compute_price(
    time_label: Label, priority_label: Label, config: PricingConfig
) -> Decimal | None:
    """Return the price for a (time, priority) pair, or None if it cannot be priced."""

    time_value = config.time_scale.magnitude(time_label.name)
    priority_value = config.priority_scale.magnitude(priority_label.name)
    if time_value is None or priority_value is None:
        logger.debug(
            "Cannot resolve label magnitude",
            extra={"time_label": time_label.name, "priority_label": priority_label.name},
        )
        return None

    price = config.base_price_multiplier * time_value * priority_value
    if price <= 0:
        return None
    return price


def price_label_for(time_label: Label, priority_label: Label, config: PricingConfig) -> str | None:
    price = compute_price(time_label, priority_label, config)
    if price is None:
        return None
    return price_label_name(price, config.currency)
