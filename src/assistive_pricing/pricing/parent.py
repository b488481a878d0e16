"""Parent issues: price a parent from the prices of the children it lists.

A parent issue declares its children as task-list items in its body:

    - [ ] #12
    - [x] https://github.com/owner/repo/issues/13

The parent's target price is the aggregate (sum, or max) of its children's
prices. A child's price is its smallest price label when one is present,
otherwise the price computed from its own time/priority labels.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from decimal import Decimal
from typing import Literal

import requests
from github import GithubException

from assistive_pricing.github_labels import price_label_name
from assistive_pricing.pricing.calculator import compute_price
from assistive_pricing.pricing.github.client import GitHubClient, IssueSnapshot
from assistive_pricing.pricing.models import Label
from assistive_pricing.pricing.plugin_config import PricingConfig
from assistive_pricing.pricing.recognition import recognize, select_minimum
from assistive_pricing.pricing.values import price_value, sort_price_labels

logger = logging.getLogger(__name__)

_CHILD_REFERENCE_RE = re.compile(
    r"^\s*[-*]\s+\[[ xX]\]\s+"
    r"(?:#(?P<number>\d+)|https?://\S+?/issues/(?P<url_number>\d+))\b",
    re.MULTILINE,
)

ChildLabelsFetcher = Callable[[int], list[Label]]


def parse_child_references(body: str | None) -> list[int]:
    """Issue numbers referenced as task-list items, unique and in body order."""

    if not body:
        return []
    numbers: list[int] = []
    for match in _CHILD_REFERENCE_RE.finditer(body):
        number = int(match.group("number") or match.group("url_number"))
        if number not in numbers:
            numbers.append(number)
    return numbers


def is_parent_issue(body: str | None) -> bool:
    return bool(parse_child_references(body))


def resolve_child_price(labels: Iterable[Label], config: PricingConfig) -> Decimal | None:
    child_labels = list(labels)

    for label in sort_price_labels(label for label in child_labels if label.is_price):
        value = price_value(label.name)
        if value is not None:
            return value

    selected = select_minimum(recognize(child_labels, config), config)
    if selected.time is None or selected.priority is None:
        return None
    return compute_price(selected.time, selected.priority, config)


def aggregate_prices(
    prices: Iterable[Decimal | None], rule: Literal["sum", "max"] = "sum"
) -> Decimal | None:
    priced = [price for price in prices if price is not None]
    if not priced:
        return None
    if rule == "max":
        return max(priced)
    return sum(priced, Decimal(0))


def compute_parent_target(
    *,
    issue_number: int,
    body: str | None,
    fetch_labels: ChildLabelsFetcher,
    config: PricingConfig,
) -> str | None:
    """Target price label for a parent issue, or None when no child is priced."""

    prices: list[Decimal | None] = []
    for child in parse_child_references(body):
        if child == issue_number:
            continue
        try:
            child_labels = fetch_labels(child)
        except (requests.RequestException, GithubException, ValueError):
            logger.exception(
                "Failed to fetch child issue labels; skipping child",
                extra={"issue_number": issue_number, "child": child},
            )
            continue
        price = resolve_child_price(child_labels, config)
        logger.debug(
            "Resolved child price",
            extra={"issue_number": issue_number, "child": child, "price": price},
        )
        prices.append(price)

    total = aggregate_prices(prices, config.parent_aggregation)
    if total is None or total <= 0:
        return None
    return price_label_name(total, config.currency)


def references_child(body: str | None, child_number: int) -> bool:
    return child_number in parse_child_references(body)


def find_parent_issues(issue_number: int, github: GitHubClient) -> list[IssueSnapshot]:
    """Open issues whose body lists the given issue as a child."""

    parents: list[IssueSnapshot] = []
    for number in github.list_cross_referencing_issue_numbers(issue_number=issue_number):
        if number == issue_number:
            continue
        try:
            candidate = github.get_issue(issue_number=number)
        except (requests.RequestException, GithubException, ValueError):
            logger.exception(
                "Failed to fetch candidate parent issue; skipping",
                extra={"issue_number": issue_number, "candidate": number},
            )
            continue
        if candidate.state == "open" and references_child(candidate.body, issue_number):
            parents.append(candidate)
    return parents
