"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from assistive_pricing.pricing.handler import PricingResult
from assistive_pricing.pricing.reconcile import ReconcileOutcome

WebhookStatus = Literal["ignored", "processed"]


class ApiOutcome(BaseModel):
    issue_number: int
    action: str
    state: str
    target: str | None = None
    reason: str
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, issue_number: int, outcome: ReconcileOutcome) -> ApiOutcome:
        return cls(
            issue_number=issue_number,
            action=outcome.plan.action.value,
            state=outcome.state.value,
            target=outcome.plan.target,
            reason=outcome.plan.reason,
            errors=[str(e) for e in outcome.errors],
        )


class WebhookResponse(BaseModel):
    status: WebhookStatus
    reason: str | None = None
    outcome: ApiOutcome | None = None
    parents: list[ApiOutcome] = Field(default_factory=list)

    @classmethod
    def ignored(cls, reason: str) -> WebhookResponse:
        return cls(status="ignored", reason=reason)

    @classmethod
    def from_result(cls, result: PricingResult) -> WebhookResponse:
        if result.outcome is None:
            return cls.ignored(result.ignored or "nothing to do")
        return cls(
            status="processed",
            outcome=ApiOutcome.from_outcome(result.issue_number, result.outcome),
            parents=[
                ApiOutcome.from_outcome(number, outcome)
                for number, outcome in result.parents.items()
            ],
        )
