"""FastAPI server adapter for assistive-pricing.

This module exposes the GitHub webhook endpoint over the pricing handler.

Design intent:
- Keep pricing logic in `assistive_pricing.pricing.*`
- Keep server-specific concerns (routing, HTTP status mapping) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from assistive_pricing.server.app import create_app
