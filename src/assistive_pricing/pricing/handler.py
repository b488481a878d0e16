"""Entry point for label-change events: keep exactly one price label on the issue."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import requests
from github import GithubException

from assistive_pricing.pricing.calculator import price_label_for
from assistive_pricing.pricing.context import PricingContext
from assistive_pricing.pricing.errors import (
    MissingLabelsError,
    PermissionDeniedError,
    PricingError,
)
from assistive_pricing.pricing.github.label_store import IssueLabelStore
from assistive_pricing.pricing.models import BOT_ACTOR_TYPE, Label
from assistive_pricing.pricing.parent import (
    compute_parent_target,
    find_parent_issues,
    is_parent_issue,
)
from assistive_pricing.pricing.permissions import has_label_access
from assistive_pricing.pricing.plugin_config import PricingConfig
from assistive_pricing.pricing.recognition import recognize, select_minimum
from assistive_pricing.pricing.reconcile import (
    ReconcileOutcome,
    apply_plan,
    plan_deduplication,
    reconcile,
)

logger = logging.getLogger(__name__)

_GITHUB_ERRORS = (requests.RequestException, GithubException, ValueError)


@dataclass(frozen=True, slots=True)
class PricingResult:
    issue_number: int
    outcome: ReconcileOutcome | None = None
    parents: dict[int, ReconcileOutcome] = field(default_factory=dict)
    ignored: str | None = None


def compute_target_price_label(labels: Iterable[Label], config: PricingConfig) -> str | None:
    """Price label implied by the smallest recognized time and priority labels."""

    recognized = recognize(labels, config)
    if not recognized.time or not recognized.priority:
        logger.info(
            "No recognized labels to calculate price",
            extra={
                "time_labels": [label.name for label in recognized.time],
                "priority_labels": [label.name for label in recognized.priority],
            },
        )
        return None

    selected = select_minimum(recognized, config)
    if selected.time is None or selected.priority is None:
        return None
    return price_label_for(selected.time, selected.priority, config)


def price_issue(
    context: PricingContext,
    *,
    issue_number: int,
    body: str | None,
    labels: list[Label],
    store: IssueLabelStore,
) -> ReconcileOutcome:
    if is_parent_issue(body):
        target = compute_parent_target(
            issue_number=issue_number,
            body=body,
            fetch_labels=lambda child: context.github.get_issue_labels(issue_number=child),
            config=context.config,
        )
        logger.info(
            "Parent issue priced from children",
            extra={"issue_number": issue_number, "target": target},
        )
    else:
        target = compute_target_price_label(labels, context.config)

    return reconcile(
        target=target,
        labels=labels,
        store=store,
        history=store.list_labeled_events,
        issue_number=issue_number,
    )


def propagate_to_parents(context: PricingContext) -> dict[int, ReconcileOutcome]:
    """Re-price every open parent issue that lists the current issue as a child."""

    issue_number = context.issue_number
    try:
        parents = find_parent_issues(issue_number, context.github)
    except _GITHUB_ERRORS:
        logger.exception("Failed to look up parent issues", extra={"issue_number": issue_number})
        return {}

    outcomes: dict[int, ReconcileOutcome] = {}
    for parent in parents:
        try:
            outcomes[parent.number] = price_issue(
                context,
                issue_number=parent.number,
                body=parent.body,
                labels=parent.labels,
                store=context.store_for(parent.number),
            )
        except (*_GITHUB_ERRORS, PricingError):
            logger.exception(
                "Failed to re-price parent issue",
                extra={"issue_number": issue_number, "parent": parent.number},
            )
    return outcomes


def _price_and_propagate(context: PricingContext, store: IssueLabelStore) -> PricingResult:
    issue = context.event.issue
    labels = issue.current_labels()
    outcome = price_issue(
        context,
        issue_number=issue.number,
        body=issue.body,
        labels=labels,
        store=store,
    )

    parents: dict[int, ReconcileOutcome] = {}
    if outcome.changed and context.config.propagate_to_parents and not is_parent_issue(issue.body):
        parents = propagate_to_parents(context)
    return PricingResult(issue_number=issue.number, outcome=outcome, parents=parents)


def on_label_change_set_pricing(context: PricingContext) -> PricingResult:
    """Handle one `issues.labeled` / `issues.unlabeled` event to completion.

    Raises:
        MissingLabelsError: the payload carries no label list.
        PermissionDeniedError: the sender may not change pricing labels.
    """

    event = context.event
    issue_number = context.issue_number
    if not event.is_label_change:
        logger.debug("Not an issue label event", extra={"action": event.action})
        return PricingResult(issue_number=issue_number, ignored="not a label event")

    if event.issue.labels is None:
        raise MissingLabelsError(issue_number)

    if context.check_permissions and not has_label_access(
        event.sender, context.config, context.github.get_collaborator_permission
    ):
        raise PermissionDeniedError(event.sender.login)

    store = context.store_for(issue_number)
    trigger = event.triggering_label
    if trigger is not None and trigger.is_price:
        if event.sender.type == BOT_ACTOR_TYPE:
            logger.debug(
                "Ignoring price label change made by a bot",
                extra={"issue_number": issue_number, "label": trigger.name},
            )
            return PricingResult(issue_number=issue_number, ignored="price label changed by a bot")

        logger.info(
            "Price label set directly; only removing superfluous price labels",
            extra={"issue_number": issue_number, "label": trigger.name},
        )
        plan = plan_deduplication(event.issue.current_labels())
        outcome = apply_plan(plan, store, issue_number=issue_number)
        return PricingResult(issue_number=issue_number, outcome=outcome)

    return _price_and_propagate(context, store)


def reprice_issue(context: PricingContext) -> PricingResult:
    """Operator-triggered re-price: no permission check, no triggering label."""

    if context.event.issue.labels is None:
        raise MissingLabelsError(context.issue_number)
    return _price_and_propagate(context, context.store_for(context.issue_number))
