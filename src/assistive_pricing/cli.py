"""Console script target for the `pricing` command.

The CLI is implemented in `assistive_pricing.pricing.main`.
"""

from __future__ import annotations

from assistive_pricing.pricing.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
