"""Small value types shared by the pricing components."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from assistive_pricing.github_labels import is_price_label

HUMAN_ACTOR_TYPE = "User"
BOT_ACTOR_TYPE = "Bot"


@dataclass(frozen=True, slots=True)
class Label:
    """A label as attached to an issue. Identity is the name."""

    name: str

    @property
    def is_price(self) -> bool:
        return is_price_label(self.name)


@dataclass(frozen=True, slots=True)
class LabeledEvent:
    """One `labeled` entry from an issue's event log."""

    label_name: str
    actor_type: str
    created_at: datetime | None = None

    @property
    def by_human(self) -> bool:
        return self.actor_type == HUMAN_ACTOR_TYPE
