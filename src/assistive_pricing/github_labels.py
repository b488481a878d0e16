"""Shared GitHub label conventions.

Pricing works on three label categories that live side by side on an issue:
time estimates, priorities and the derived price. Time and priority labels are
owned by humans; the price label is owned by the automation (unless a human
sets it directly).

We keep these as stable, human-readable names (not machine IDs) so that:
- repos can be bootstrapped idempotently (create if missing)
- users can filter and report easily
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

LabelCategory = Literal["time", "priority", "price"]

PRICE_LABEL_PREFIX = "Price: "


@dataclass(frozen=True, slots=True)
class LabelSpec:
    name: str
    color: str
    description: str


CATEGORY_COLORS: dict[LabelCategory, str] = {
    "time": "ededed",
    "priority": "ededed",
    "price": "1f883d",
}

CATEGORY_DESCRIPTIONS: dict[LabelCategory, str] = {
    "time": "Time estimate",
    "priority": "Priority",
    "price": "Price derived from time estimate and priority",
}


def label_spec_for(name: str, category: LabelCategory) -> LabelSpec:
    return LabelSpec(
        name=name.strip(),
        color=CATEGORY_COLORS[category],
        description=CATEGORY_DESCRIPTIONS[category],
    )


def is_price_label(name: str) -> bool:
    return name.startswith(PRICE_LABEL_PREFIX)


def format_price(value: Decimal) -> str:
    """Render a price the way it appears in a label: `1`, `2.5`, `0.13`."""

    rounded = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def price_label_name(value: Decimal, currency: str = "USD") -> str:
    return f"{PRICE_LABEL_PREFIX}{format_price(value)} {currency}"
