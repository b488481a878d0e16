"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterable
from unittest.mock import Mock

import pytest

from assistive_pricing.github_labels import LabelCategory, is_price_label
from assistive_pricing.pricing.context import PricingContext
from assistive_pricing.pricing.errors import LabelMutationError
from assistive_pricing.pricing.github.client import GitHubClient
from assistive_pricing.pricing.models import Label, LabeledEvent
from assistive_pricing.pricing.payload import IssueLabelEvent
from assistive_pricing.pricing.plugin_config import PricingConfig

MUTATIONS = {"create", "add", "remove"}


class FakeLabelStore:
    """In-memory Label Store and Event History for one issue."""

    def __init__(
        self,
        issue_labels: Iterable[str] = (),
        repo_labels: Iterable[str] = (),
        events: Iterable[LabeledEvent] = (),
        *,
        fail_on: Iterable[tuple[str, str]] = (),
        history_unavailable: bool = False,
    ) -> None:
        self.issue_labels = list(issue_labels)
        self.repo_labels = list(repo_labels)
        self.events = list(events)
        self.fail_on = set(fail_on)
        self.history_unavailable = history_unavailable
        self.calls: list[tuple[str, str]] = []

    def _maybe_fail(self, operation: str, name: str) -> None:
        if (operation, name) in self.fail_on:
            raise LabelMutationError(operation, name)

    @property
    def mutations(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] in MUTATIONS]

    def list_labels_for_repo(self) -> list[Label]:
        self.calls.append(("list", "*"))
        self._maybe_fail("list", "*")
        return [Label(name) for name in self.repo_labels]

    def create_label(self, name: str, category: LabelCategory) -> None:
        self.calls.append(("create", name))
        self._maybe_fail("create", name)
        self.repo_labels.append(name)

    def add_label_to_issue(self, name: str) -> None:
        self.calls.append(("add", name))
        self._maybe_fail("add", name)
        if name not in self.issue_labels:
            self.issue_labels.append(name)
        self.events.append(LabeledEvent(label_name=name, actor_type="Bot"))

    def remove_label(self, name: str) -> None:
        self.calls.append(("remove", name))
        self._maybe_fail("remove", name)
        if name in self.issue_labels:
            self.issue_labels.remove(name)

    def clear_all_price_labels_on_issue(self) -> list[LabelMutationError]:
        errors: list[LabelMutationError] = []
        for name in [n for n in self.issue_labels if is_price_label(n)]:
            try:
                self.remove_label(name)
            except LabelMutationError as e:
                errors.append(e)
        return errors

    def label_exists(self, name: str) -> bool:
        self.calls.append(("look up", name))
        self._maybe_fail("look up", name)
        return name in self.repo_labels

    def list_labeled_events(self) -> list[LabeledEvent] | None:
        self.calls.append(("history", ""))
        if self.history_unavailable:
            return None
        return list(self.events)

    def current_labels(self) -> list[Label]:
        return [Label(name) for name in self.issue_labels]


@pytest.fixture
def pricing_config() -> PricingConfig:
    """Explicit scales: one day is 1, normal priority is 1."""
    return PricingConfig.model_validate(
        {
            "labels": {
                "time": [
                    {"name": "Time: <1 Hour", "value": "0.125"},
                    {"name": "Time: 1 Day", "value": 1},
                    {"name": "Time: <1 Week", "value": 5},
                ],
                "priority": [
                    {"name": "Priority: 1 (Normal)", "value": 1},
                    {"name": "Priority: 2 (Medium)", "value": 2},
                    {"name": "Priority: 3 (High)", "value": 3},
                ],
            },
            "publicAccessControl": {"setLabel": False},
        }
    )


@pytest.fixture
def mock_github() -> Mock:
    """A GitHub client that knows no parents and grants write access."""
    github = Mock(spec=GitHubClient)
    github.repository = "octo-org/octo-repo"
    github.get_collaborator_permission.return_value = "write"
    github.list_cross_referencing_issue_numbers.return_value = []
    return github


def make_event(
    *,
    labels: list[str] | None,
    action: str = "labeled",
    label: str | None = None,
    sender_type: str = "User",
    sender_login: str = "octocat",
    body: str | None = "",
    number: int = 1,
) -> IssueLabelEvent:
    payload: dict[str, object] = {
        "action": action,
        "issue": {
            "number": number,
            "body": body,
            "labels": None if labels is None else [{"name": n, "color": "ededed"} for n in labels],
        },
        "repository": {"name": "octo-repo", "owner": {"login": "octo-org"}},
        "sender": {"login": sender_login, "type": sender_type},
    }
    if label is not None:
        payload["label"] = {"name": label}
    return IssueLabelEvent.model_validate(payload)


def make_context(
    event: IssueLabelEvent,
    config: PricingConfig,
    github: Mock,
    stores: dict[int, FakeLabelStore],
) -> PricingContext:
    return PricingContext(
        event=event,
        config=config,
        github=github,
        store_factory=lambda number: stores.setdefault(number, FakeLabelStore()),
    )
