"""Plugin configuration: label scales and pricing rules.

The file is JSON with the camelCase keys used by the upstream plugin manifest:

    {
      "labels": {
        "time": ["Time: <1 Hour", {"name": "Time: 1 Day", "value": 1}],
        "priority": ["Priority: 1 (Normal)", "Priority: 2 (Medium)"]
      },
      "publicAccessControl": {"setLabel": false},
      "basePriceMultiplier": 1
    }

Scale entries given as bare strings get their magnitude from the label text;
explicit objects are taken as-is.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from functools import cached_property
from pathlib import Path
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from assistive_pricing.pricing.errors import PluginConfigError
from assistive_pricing.pricing.values import LabelScale, ScaleEntry, parse_magnitude

logger = logging.getLogger(__name__)

DEFAULT_TIME_LABELS: tuple[str, ...] = (
    "Time: <1 Hour",
    "Time: <2 Hours",
    "Time: <4 Hours",
    "Time: <1 Day",
    "Time: <1 Week",
)

DEFAULT_PRIORITY_LABELS: tuple[str, ...] = (
    "Priority: 1 (Normal)",
    "Priority: 2 (Medium)",
    "Priority: 3 (High)",
    "Priority: 4 (Urgent)",
    "Priority: 5 (Emergency)",
)


def _coerce_entries(raw: object, *, time_units: bool) -> object:
    if not isinstance(raw, list | tuple):
        return raw
    entries: list[object] = []
    for item in raw:
        if isinstance(item, str):
            entries.append({"name": item, "value": parse_magnitude(item, time_units=time_units)})
        else:
            entries.append(item)
    return entries


class LabelScales(BaseModel):
    time: tuple[ScaleEntry, ...] = Field(default_factory=lambda: list(DEFAULT_TIME_LABELS))
    priority: tuple[ScaleEntry, ...] = Field(default_factory=lambda: list(DEFAULT_PRIORITY_LABELS))

    model_config = ConfigDict(validate_default=True)

    @field_validator("time", mode="before")
    @classmethod
    def _parse_time_entries(cls, value: object) -> object:
        return _coerce_entries(value, time_units=True)

    @field_validator("priority", mode="before")
    @classmethod
    def _parse_priority_entries(cls, value: object) -> object:
        return _coerce_entries(value, time_units=False)

    @model_validator(mode="after")
    def _names_are_unique(self) -> LabelScales:
        for category, entries in (("time", self.time), ("priority", self.priority)):
            names = [entry.name for entry in entries]
            duplicates = sorted({name for name in names if names.count(name) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {category} labels: {duplicates}")

        shared = {e.name for e in self.time} & {e.name for e in self.priority}
        if shared:
            raise ValueError(f"Labels configured as both time and priority: {sorted(shared)}")
        return self


class PublicAccessControl(BaseModel):
    set_label: bool = Field(default=False, alias="setLabel")

    model_config = ConfigDict(populate_by_name=True)


class PricingConfig(BaseModel):
    """Recognized option set for the pricing handler."""

    labels: LabelScales = Field(default_factory=LabelScales)
    public_access_control: PublicAccessControl = Field(
        default_factory=PublicAccessControl, alias="publicAccessControl"
    )
    base_price_multiplier: Decimal = Field(default=Decimal(1), gt=0, alias="basePriceMultiplier")
    currency: str = Field(default="USD", min_length=1)
    parent_aggregation: Literal["sum", "max"] = Field(default="sum", alias="parentAggregation")
    propagate_to_parents: bool = Field(default=True, alias="propagateToParents")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @cached_property
    def time_scale(self) -> LabelScale:
        return LabelScale(self.labels.time)

    @cached_property
    def priority_scale(self) -> LabelScale:
        return LabelScale(self.labels.priority)


def load_plugin_config(path: Path) -> PricingConfig:
    """Load the plugin configuration, falling back to defaults when the file is absent."""

    if not path.exists():
        logger.info("Pricing configuration not found; using defaults", extra={"path": str(path)})
        return PricingConfig()

    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise PluginConfigError(path=path, reason=f"not valid JSON ({e})") from e

    if raw is None:
        return PricingConfig()
    if not isinstance(raw, dict):
        raise PluginConfigError(path=path, reason="expected a JSON object")

    try:
        return PricingConfig.model_validate(raw)
    except ValidationError as e:
        raise PluginConfigError(path=path, reason=str(e)) from e
