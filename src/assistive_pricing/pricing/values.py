"""Ordering of time, priority and price labels by magnitude.

Recognized labels are ranked by the magnitude configured for them. Equal
magnitudes are ranked by their position in the configuration, so the label
listed first always wins a tie.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from assistive_pricing.github_labels import PRICE_LABEL_PREFIX
from assistive_pricing.pricing.errors import UnrecognizedLabelError
from assistive_pricing.pricing.models import Label

# Time magnitudes are expressed in days.
TIME_UNITS_IN_DAYS: dict[str, Decimal] = {
    "minute": Decimal(1) / Decimal(480),
    "hour": Decimal("0.125"),
    "day": Decimal(1),
    "week": Decimal(5),
    "month": Decimal(20),
}

_NUMBER_RE = re.compile(r"(\d+(?:\.\d+)?)")
_TIME_UNIT_RE = re.compile(r"\b(minute|hour|day|week|month)s?\b", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ScaleEntry:
    name: str
    value: Decimal


class LabelScale:
    """Ordered set of recognized label names for one category.

    The lookup table is built once from configuration; membership is exact
    string equality on the label name.
    """

    def __init__(self, entries: Iterable[ScaleEntry]) -> None:
        self._entries = tuple(entries)
        self._index: dict[str, tuple[Decimal, int]] = {}
        for position, entry in enumerate(self._entries):
            self._index.setdefault(entry.name, (entry.value, position))

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[ScaleEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def key(self, name: str) -> tuple[Decimal, int]:
        try:
            return self._index[name]
        except KeyError:
            raise UnrecognizedLabelError(name) from None

    def magnitude(self, name: str) -> Decimal | None:
        found = self._index.get(name)
        return found[0] if found is not None else None


def parse_magnitude(name: str, *, time_units: bool = False) -> Decimal:
    """Derive a magnitude from label text such as `Time: <2 Hours`.

    Only used for scale entries configured as bare strings.
    """

    match = _NUMBER_RE.search(name)
    if match is None:
        raise ValueError(f"No magnitude found in label name: {name!r}")
    number = Decimal(match.group(1))
    if not time_units:
        return number

    unit = _TIME_UNIT_RE.search(name, match.end())
    if unit is None:
        raise ValueError(f"No time unit found in label name: {name!r}")
    return number * TIME_UNITS_IN_DAYS[unit.group(1).lower()]


def value_of(name: str, scale: LabelScale) -> tuple[Decimal, int]:
    """Sort key for a recognized label: (magnitude, configuration position)."""

    return scale.key(name)


def sort_labels_by_value(labels: Iterable[Label], scale: LabelScale) -> list[Label]:
    return sorted(labels, key=lambda label: value_of(label.name, scale))


def price_value(name: str) -> Decimal | None:
    """Return the amount embedded in a price label (`Price: 2.5 USD` -> 2.5)."""

    if not name.startswith(PRICE_LABEL_PREFIX):
        return None
    match = _NUMBER_RE.search(name, len(PRICE_LABEL_PREFIX))
    if match is None:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def sort_price_labels(labels: Iterable[Label]) -> list[Label]:
    """Smallest price first; unparseable price labels last; ties keep input order."""

    def _key(label: Label) -> tuple[int, Decimal]:
        value = price_value(label.name)
        if value is None:
            return (1, Decimal(0))
        return (0, value)

    return sorted(labels, key=_key)
