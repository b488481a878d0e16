"""Filter an issue's labels into recognized time/priority buckets and pick the minimum."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from assistive_pricing.pricing.models import Label
from assistive_pricing.pricing.plugin_config import PricingConfig
from assistive_pricing.pricing.values import sort_labels_by_value


@dataclass(frozen=True, slots=True)
class RecognizedLabels:
    time: list[Label]
    priority: list[Label]


@dataclass(frozen=True, slots=True)
class SelectedLabels:
    time: Label | None
    priority: Label | None

    @property
    def is_priceable(self) -> bool:
        return self.time is not None and self.priority is not None


def recognize(labels: Iterable[Label], config: PricingConfig) -> RecognizedLabels:
    issue_labels = list(labels)
    return RecognizedLabels(
        time=[label for label in issue_labels if label.name in config.time_scale],
        priority=[label for label in issue_labels if label.name in config.priority_scale],
    )


def select_minimum(recognized: RecognizedLabels, config: PricingConfig) -> SelectedLabels:
    times = sort_labels_by_value(recognized.time, config.time_scale)
    priorities = sort_labels_by_value(recognized.priority, config.priority_scale)
    return SelectedLabels(
        time=times[0] if times else None,
        priority=priorities[0] if priorities else None,
    )
