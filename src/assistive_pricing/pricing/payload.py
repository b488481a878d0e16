"""Pydantic models for the parts of a GitHub `issues` webhook we read."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from assistive_pricing.pricing.models import Label

LABEL_ACTIONS: frozenset[str] = frozenset({"labeled", "unlabeled"})


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PayloadLabel(_Payload):
    name: str

    def to_label(self) -> Label:
        return Label(name=self.name)


class Sender(_Payload):
    login: str = ""
    type: str = "User"


class RepositoryOwner(_Payload):
    login: str


class RepositoryPayload(_Payload):
    name: str
    owner: RepositoryOwner

    @property
    def full_name(self) -> str:
        return f"{self.owner.login}/{self.name}"


class IssuePayload(_Payload):
    number: int = Field(gt=0)
    body: str | None = None
    state: str = "open"
    # None means the payload carried no label list at all.
    labels: list[PayloadLabel] | None = None

    def current_labels(self) -> list[Label]:
        return [label.to_label() for label in self.labels or []]


class IssueLabelEvent(_Payload):
    action: str
    issue: IssuePayload
    repository: RepositoryPayload
    label: PayloadLabel | None = None
    sender: Sender = Field(default_factory=Sender)

    @property
    def is_label_change(self) -> bool:
        return self.action in LABEL_ACTIONS

    @property
    def triggering_label(self) -> Label | None:
        return self.label.to_label() if self.label is not None else None
