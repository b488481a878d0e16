"""Reconcile an issue's price labels with the computed target price.

Planning is pure: given the target label, the issue's current labels and
(lazily) its labeling history, it decides what to do. Applying a plan issues
the label mutations in a fixed order: removals first, then the add.

An issue ends in one of three states:

- NO_PRICE: no price label (not price-eligible, or clearing succeeded)
- HAS_PRICE: a price label is present (exactly the target once applied cleanly)
- AWAITING_HUMAN_DECISION: a human owns the current price label
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from assistive_pricing.pricing.errors import LabelMutationError
from assistive_pricing.pricing.github.label_store import LabelStore
from assistive_pricing.pricing.logging import log_fields
from assistive_pricing.pricing.models import HUMAN_ACTOR_TYPE, Label, LabeledEvent
from assistive_pricing.pricing.values import sort_price_labels

logger = logging.getLogger(__name__)

HistoryLoader = Callable[[], Sequence[LabeledEvent] | None]


class PriceState(str, Enum):
    NO_PRICE = "no_price"
    HAS_PRICE = "has_price"
    AWAITING_HUMAN_DECISION = "awaiting_human_decision"


class ReconcileAction(str, Enum):
    SKIP = "skip"
    ADD = "add"
    REPLACE = "replace"
    CLEAR = "clear"
    DEDUPLICATE = "deduplicate"


@dataclass(frozen=True, slots=True)
class ReconcilePlan:
    action: ReconcileAction
    state: PriceState
    reason: str
    target: str | None = None
    remove: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReconcileOutcome:
    plan: ReconcilePlan
    state: PriceState
    errors: tuple[LabelMutationError, ...] = ()

    @property
    def changed(self) -> bool:
        return self.plan.action is not ReconcileAction.SKIP


def price_labels(labels: Iterable[Label]) -> list[Label]:
    return [label for label in labels if label.is_price]


def last_price_actor(events: Sequence[LabeledEvent]) -> str | None:
    """Actor type of the most recent labeling whose label name mentions a price."""

    for event in reversed(events):
        if "Price" in event.label_name:
            return event.actor_type
    return None


def plan_deduplication(labels: Iterable[Label]) -> ReconcilePlan:
    """A human set a price directly: keep only the smallest price label."""

    ordered = sort_price_labels(price_labels(labels))
    if not ordered:
        return ReconcilePlan(
            action=ReconcileAction.SKIP,
            state=PriceState.NO_PRICE,
            reason="no price label left after direct change",
        )

    kept, superfluous = ordered[0], ordered[1:]
    if not superfluous:
        return ReconcilePlan(
            action=ReconcileAction.SKIP,
            state=PriceState.AWAITING_HUMAN_DECISION,
            reason="single price label set directly",
            target=kept.name,
        )
    return ReconcilePlan(
        action=ReconcileAction.DEDUPLICATE,
        state=PriceState.AWAITING_HUMAN_DECISION,
        reason="multiple price labels; keeping the smallest",
        target=kept.name,
        remove=tuple(label.name for label in superfluous),
    )


def plan_reconciliation(
    *,
    target: str | None,
    labels: Iterable[Label],
    history: HistoryLoader,
) -> ReconcilePlan:
    current = price_labels(labels)
    current_names = [label.name for label in current]

    if target is None:
        if not current:
            return ReconcilePlan(
                action=ReconcileAction.SKIP,
                state=PriceState.NO_PRICE,
                reason="not priceable and no price label present",
            )
        return ReconcilePlan(
            action=ReconcileAction.CLEAR,
            state=PriceState.NO_PRICE,
            reason="not priceable",
            remove=tuple(current_names),
        )

    if target not in current_names:
        return ReconcilePlan(
            action=ReconcileAction.ADD,
            state=PriceState.HAS_PRICE,
            reason="target price label missing",
            target=target,
            remove=tuple(current_names),
        )

    events = history()
    if events is None:
        # Unknown history: do not risk overriding a human decision.
        return ReconcilePlan(
            action=ReconcileAction.SKIP,
            state=PriceState.HAS_PRICE,
            reason="label events unavailable",
            target=target,
        )

    if last_price_actor(events) == HUMAN_ACTOR_TYPE:
        return ReconcilePlan(
            action=ReconcileAction.SKIP,
            state=PriceState.AWAITING_HUMAN_DECISION,
            reason="price label last set by a human",
            target=target,
        )

    if current_names == [target]:
        return ReconcilePlan(
            action=ReconcileAction.SKIP,
            state=PriceState.HAS_PRICE,
            reason="target price label already present",
            target=target,
        )

    return ReconcilePlan(
        action=ReconcileAction.REPLACE,
        state=PriceState.HAS_PRICE,
        reason="normalizing multiple price labels",
        target=target,
        remove=tuple(current_names),
    )


def _ensure_label_exists(store: LabelStore, name: str) -> None:
    if not store.label_exists(name):
        store.create_label(name, "price")


def _state_after_failure(labels_left: bool) -> PriceState:
    return PriceState.HAS_PRICE if labels_left else PriceState.NO_PRICE


def apply_plan(plan: ReconcilePlan, store: LabelStore, *, issue_number: int) -> ReconcileOutcome:
    """Issue the label mutations for a plan.

    Mutation failures are logged and collected on the outcome. A failure to
    ensure the target label exists aborts before anything is removed. An ADD
    or REPLACE plan without a target raises ValueError.
    """

    log_extra = log_fields(
        issue_number=issue_number,
        action=plan.action,
        target=plan.target,
        reason=plan.reason,
    )
    errors: list[LabelMutationError] = []

    if plan.action is ReconcileAction.SKIP:
        logger.info("Skipping price update", extra=log_extra)
        return ReconcileOutcome(plan=plan, state=plan.state)

    if plan.action is ReconcileAction.DEDUPLICATE:
        for name in plan.remove:
            try:
                store.remove_label(name)
            except LabelMutationError as e:
                logger.error(str(e), extra=log_extra)
                errors.append(e)
        logger.info("Superfluous price labels removed", extra=log_extra)
        return ReconcileOutcome(plan=plan, state=plan.state, errors=tuple(errors))

    if plan.action is ReconcileAction.CLEAR:
        errors.extend(store.clear_all_price_labels_on_issue())
        logger.info("Price labels cleared", extra=log_extra)
        state = _state_after_failure(bool(errors))
        return ReconcileOutcome(plan=plan, state=state, errors=tuple(errors))

    target = plan.target
    if target is None:
        raise ValueError(f"{plan.action.value} plan has no target price label")

    if plan.action is ReconcileAction.ADD:
        try:
            _ensure_label_exists(store, target)
        except LabelMutationError as e:
            logger.error(str(e), extra=log_extra)
            # Nothing was removed.
            state = _state_after_failure(bool(plan.remove))
            return ReconcileOutcome(plan=plan, state=state, errors=(e,))

    errors.extend(store.clear_all_price_labels_on_issue())
    try:
        store.add_label_to_issue(target)
    except LabelMutationError as e:
        logger.error(str(e), extra=log_extra)
        # Only labels whose removal also failed are left.
        state = _state_after_failure(bool(errors))
        errors.append(e)
        return ReconcileOutcome(plan=plan, state=state, errors=tuple(errors))

    logger.info("Price label set", extra=log_extra)
    return ReconcileOutcome(plan=plan, state=PriceState.HAS_PRICE, errors=tuple(errors))


def reconcile(
    *,
    target: str | None,
    labels: Iterable[Label],
    store: LabelStore,
    history: HistoryLoader,
    issue_number: int,
) -> ReconcileOutcome:
    plan = plan_reconciliation(target=target, labels=labels, history=history)
    return apply_plan(plan, store, issue_number=issue_number)
