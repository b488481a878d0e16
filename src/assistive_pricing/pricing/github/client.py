"""GitHub API client wrapper for label pricing.

This intentionally wraps PyGithub (repository-level label calls) and a plain
`requests` session (issue-level REST endpoints) to keep GitHub calls out of the
pricing logic and make tests easy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from urllib.parse import quote

import requests
from github import Auth, Github, UnknownObjectException
from github.Repository import Repository

from assistive_pricing.github_labels import LabelSpec
from assistive_pricing.pricing.models import Label, LabeledEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IssueSnapshot:
    """Minimal issue state needed for pricing, read fresh from GitHub."""

    number: int
    body: str
    labels: list[Label]
    state: str


class GitHubClient:
    """Small wrapper around PyGithub and the REST API for the label operations we need."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        repo: Repository | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository:
            raise ValueError("GitHub repository is required")

        self._repository_name = repository.strip().strip("/")
        self._rest_base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "assistive-pricing",
            }
        )

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(auth=auth, base_url=self._rest_base_url)

        self._repo = self._github.get_repo(self._repository_name)
        logger.info(
            "Authenticated with GitHub and connected to repository",
            extra={"repo": self._repository_name},
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _issues_url(self, *, issue_number: int, suffix: str = "") -> str:
        if issue_number <= 0:
            raise ValueError("issue_number must be a positive integer")
        if suffix and not suffix.startswith("/"):
            suffix = "/" + suffix
        return f"{self._rest_base_url}/repos/{self._repository_name}/issues/{issue_number}{suffix}"

    @staticmethod
    def _parse_datetime(value: object) -> datetime | None:
        if not isinstance(value, str) or not value.strip():
            return None
        # GitHub commonly returns timestamps like "2025-01-01T00:00:00Z".
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    @staticmethod
    def _parse_labels(raw: object) -> list[Label]:
        if not isinstance(raw, list):
            return []
        labels: list[Label] = []
        for item in raw:
            if isinstance(item, dict) and isinstance(item.get("name"), str):
                labels.append(Label(name=item["name"]))
            elif isinstance(item, str):
                labels.append(Label(name=item))
        return labels

    def _get_paginated_json_list(
        self, url: str, *, headers: dict[str, str] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch every page of a REST endpoint that returns a JSON list.

        Pages are followed through the `Link: rel="next"` header until GitHub
        stops sending one. Issue events come oldest first, so the last page
        holds the most recent ones.
        """

        items: list[dict[str, Any]] = []
        next_url: str | None = url
        params: dict[str, Any] | None = {"per_page": 100}
        while next_url:
            resp = self._session.get(next_url, params=params, headers=headers, timeout=30)
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, list):
                break

            items.extend(p for p in payload if isinstance(p, dict))

            # The next link already carries per_page and page.
            params = None
            next_url = resp.links.get("next", {}).get("url")
        return items

    def get_issue(self, *, issue_number: int) -> IssueSnapshot:
        """Fetch an issue's body and labels via REST."""

        url = self._issues_url(issue_number=issue_number)
        resp = self._session.get(url, timeout=30)
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()

        number = data.get("number")
        if not isinstance(number, int) or number <= 0:
            raise ValueError("Invalid issue response: missing number")

        body = data.get("body")
        state = data.get("state")
        return IssueSnapshot(
            number=number,
            body=body if isinstance(body, str) else "",
            labels=self._parse_labels(data.get("labels")),
            state=state if isinstance(state, str) else "",
        )

    def get_issue_labels(self, *, issue_number: int) -> list[Label]:
        url = self._issues_url(issue_number=issue_number, suffix="labels")
        return self._parse_labels(self._get_paginated_json_list(url))

    def add_labels(self, *, issue_number: int, names: list[str]) -> list[Label]:
        """Add labels to an issue. Returns the issue's labels after the call."""

        normalized = [n.strip() for n in names if n.strip()]
        if not normalized:
            raise ValueError("At least one label is required")

        url = self._issues_url(issue_number=issue_number, suffix="labels")
        resp = self._session.post(url, json={"labels": normalized}, timeout=30)
        resp.raise_for_status()
        labels = self._parse_labels(resp.json())
        logger.info(
            "Labels added to issue",
            extra={
                "repo": self._repository_name,
                "issue_number": issue_number,
                "labels": normalized,
            },
        )
        return labels

    def remove_label(self, *, issue_number: int, name: str) -> bool:
        """Remove a label from an issue.

        Returns:
            False if the label was not on the issue (nothing to do), True otherwise.
        """

        url = self._issues_url(issue_number=issue_number, suffix=f"labels/{quote(name, safe='')}")
        resp = self._session.delete(url, timeout=30)
        if resp.status_code == 404:
            logger.debug(
                "Label not present on issue",
                extra={"repo": self._repository_name, "issue_number": issue_number, "label": name},
            )
            return False
        resp.raise_for_status()
        logger.info(
            "Label removed from issue",
            extra={"repo": self._repository_name, "issue_number": issue_number, "label": name},
        )
        return True

    def list_labeled_events(self, *, issue_number: int) -> list[LabeledEvent]:
        """Return the issue's `labeled` events in chronological order."""

        url = self._issues_url(issue_number=issue_number, suffix="events")
        events: list[LabeledEvent] = []
        for item in self._get_paginated_json_list(url):
            if item.get("event") != "labeled":
                continue
            label = item.get("label")
            if not isinstance(label, dict) or not isinstance(label.get("name"), str):
                continue
            actor = item.get("actor")
            actor_type = actor.get("type") if isinstance(actor, dict) else None
            events.append(
                LabeledEvent(
                    label_name=label["name"],
                    actor_type=actor_type if isinstance(actor_type, str) else "",
                    created_at=self._parse_datetime(item.get("created_at")),
                )
            )
        return events

    def list_cross_referencing_issue_numbers(self, *, issue_number: int) -> list[int]:
        """Issues in this repository whose body or comments mention the given issue."""

        url = self._issues_url(issue_number=issue_number, suffix="timeline")
        numbers: list[int] = []
        for item in self._get_paginated_json_list(url):
            if item.get("event") != "cross-referenced":
                continue
            source = item.get("source")
            issue = source.get("issue") if isinstance(source, dict) else None
            if not isinstance(issue, dict) or "pull_request" in issue:
                continue
            repo = issue.get("repository")
            full_name = repo.get("full_name") if isinstance(repo, dict) else None
            if isinstance(full_name, str) and full_name.lower() != self._repository_name.lower():
                continue
            number = issue.get("number")
            if isinstance(number, int) and number > 0 and number not in numbers:
                numbers.append(number)
        return numbers

    def list_repository_labels(self) -> list[Label]:
        return [Label(name=label.name) for label in self._repo.get_labels()]

    def label_exists(self, name: str) -> bool:
        try:
            self._repo.get_label(name)
        except UnknownObjectException:
            return False
        return True

    def create_label(self, spec: LabelSpec) -> None:
        self._repo.create_label(name=spec.name, color=spec.color, description=spec.description)
        logger.info(
            "Label created",
            extra={"repo": self._repository_name, "label": spec.name, "color": spec.color},
        )

    def get_collaborator_permission(self, login: str) -> str:
        """Return the collaborator permission level ("admin", "write", "read", "none", ...)."""

        return self._repo.get_collaborator_permission(login)

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
