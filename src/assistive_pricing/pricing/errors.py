"""Exceptions raised by the pricing components."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class PricingError(Exception):
    """Base class for pricing failures."""


class PreconditionError(PricingError):
    """The invocation cannot proceed (configuration or authorization problem)."""


class MissingLabelsError(PreconditionError):
    def __init__(self, issue_number: int) -> None:
        super().__init__(f"No labels to calculate price on issue #{issue_number}")
        self.issue_number = issue_number


class PermissionDeniedError(PreconditionError):
    """Public label access is disabled and the sender lacks write permission."""

    def __init__(self, sender: str) -> None:
        super().__init__(f"No permission to set labels (sender: {sender or 'unknown'})")
        self.sender = sender


class LabelMutationError(PricingError):
    """A create/add/remove call against GitHub failed."""

    def __init__(self, operation: str, name: str, cause: Exception | None = None) -> None:
        super().__init__(f"Failed to {operation} label {name!r}: {cause}")
        self.operation = operation
        self.name = name
        self.cause = cause


class UnrecognizedLabelError(PricingError, KeyError):
    """Raised when ordering a label that is not part of the configured scale."""

    def __str__(self) -> str:
        return f"Label is not part of the configured scale: {self.args[0]!r}"


@dataclass(frozen=True, slots=True)
class PluginConfigError(PricingError):
    """Raised when the plugin configuration file cannot be loaded."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Invalid pricing configuration {str(self.path)!r}: {self.reason}"
