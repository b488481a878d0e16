"""Request-scoped context threaded through one pricing invocation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from assistive_pricing.pricing.github.client import GitHubClient
from assistive_pricing.pricing.github.label_store import IssueLabelStore
from assistive_pricing.pricing.payload import IssueLabelEvent
from assistive_pricing.pricing.plugin_config import PricingConfig

StoreFactory = Callable[[int], IssueLabelStore]


@dataclass(frozen=True, slots=True)
class PricingContext:
    """Everything one event needs: payload, configuration and GitHub access.

    Nothing here outlives the invocation; all issue state is read fresh.
    """

    event: IssueLabelEvent
    config: PricingConfig
    github: GitHubClient
    store_factory: StoreFactory
    check_permissions: bool = True

    @classmethod
    def create(
        cls,
        *,
        event: IssueLabelEvent,
        config: PricingConfig,
        github: GitHubClient,
        check_permissions: bool = True,
    ) -> PricingContext:
        return cls(
            event=event,
            config=config,
            github=github,
            store_factory=lambda number: IssueLabelStore(github, number),
            check_permissions=check_permissions,
        )

    @property
    def issue_number(self) -> int:
        return self.event.issue.number

    def store_for(self, issue_number: int) -> IssueLabelStore:
        return self.store_factory(issue_number)
