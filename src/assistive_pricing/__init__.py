"""Assistive pricing for GitHub issues.

Keeps a single "Price: <value> <currency>" label on each issue, derived from
its time estimate and priority labels:
- configuration loaded from `.env` and a JSON plugin file
- structured logging
- a webhook server and a small CLI over the same handler
"""

__version__ = "0.1.0"

from assistive_pricing.pricing.config import PricingSettings

__all__ = ["__version__", "PricingSettings"]
