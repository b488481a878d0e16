"""Label Store and Event History bound to a single issue.

The reconciliation engine only talks to these protocols. Mutation failures
surface as :class:`LabelMutationError` so callers decide whether a failure
blocks the next step; history failures are logged and reported as `None`.
"""

from __future__ import annotations

import logging
from typing import Protocol

import requests
from github import GithubException

from assistive_pricing.github_labels import LabelCategory, label_spec_for
from assistive_pricing.pricing.errors import LabelMutationError
from assistive_pricing.pricing.github.client import GitHubClient
from assistive_pricing.pricing.models import Label, LabeledEvent

logger = logging.getLogger(__name__)

_GITHUB_ERRORS = (requests.RequestException, GithubException)


class LabelStore(Protocol):
    def list_labels_for_repo(self) -> list[Label]: ...

    def create_label(self, name: str, category: LabelCategory) -> None: ...

    def add_label_to_issue(self, name: str) -> None: ...

    def remove_label(self, name: str) -> None: ...

    def clear_all_price_labels_on_issue(self) -> list[LabelMutationError]: ...

    def label_exists(self, name: str) -> bool: ...


class EventHistory(Protocol):
    def list_labeled_events(self) -> list[LabeledEvent] | None: ...


class IssueLabelStore:
    """GitHub-backed Label Store and Event History for one issue."""

    def __init__(self, github: GitHubClient, issue_number: int) -> None:
        self._github = github
        self._issue_number = issue_number

    @property
    def issue_number(self) -> int:
        return self._issue_number

    def list_labels_for_repo(self) -> list[Label]:
        try:
            return self._github.list_repository_labels()
        except _GITHUB_ERRORS as e:
            raise LabelMutationError("list", "*", e) from e

    def create_label(self, name: str, category: LabelCategory) -> None:
        try:
            self._github.create_label(label_spec_for(name, category))
        except _GITHUB_ERRORS as e:
            raise LabelMutationError("create", name, e) from e

    def add_label_to_issue(self, name: str) -> None:
        try:
            self._github.add_labels(issue_number=self._issue_number, names=[name])
        except _GITHUB_ERRORS as e:
            raise LabelMutationError("add", name, e) from e

    def remove_label(self, name: str) -> None:
        try:
            self._github.remove_label(issue_number=self._issue_number, name=name)
        except _GITHUB_ERRORS as e:
            raise LabelMutationError("remove", name, e) from e

    def clear_all_price_labels_on_issue(self) -> list[LabelMutationError]:
        """Remove every price label currently on the issue, best-effort.

        The issue's labels are re-read so drift since the event was emitted is
        also cleaned up. Returns the failures; it never raises.
        """

        try:
            current = self._github.get_issue_labels(issue_number=self._issue_number)
        except _GITHUB_ERRORS as e:
            error = LabelMutationError("list", "*", e)
            logger.error(str(error), extra={"issue_number": self._issue_number})
            return [error]

        errors: list[LabelMutationError] = []
        for label in current:
            if not label.is_price:
                continue
            try:
                self.remove_label(label.name)
            except LabelMutationError as e:
                logger.error(str(e), extra={"issue_number": self._issue_number})
                errors.append(e)
        return errors

    def label_exists(self, name: str) -> bool:
        try:
            return self._github.label_exists(name)
        except _GITHUB_ERRORS as e:
            raise LabelMutationError("look up", name, e) from e

    def list_labeled_events(self) -> list[LabeledEvent] | None:
        try:
            return self._github.list_labeled_events(issue_number=self._issue_number)
        except _GITHUB_ERRORS:
            logger.exception(
                "Failed to fetch issue events",
                extra={"issue_number": self._issue_number},
            )
            return None
