"""
================================================================================
Workflow Exceptions
================================================================================

Failure kinds raised by the interaction layer and the page workflows.

Every error carries the step that failed, the condition that was expected,
the state that was actually observed and the timeout that bounded the wait,
so a failing scenario reads e.g.:

    FilterNotApplied in step 'filter_by_condition': expected URL matching
    /state=1/ within 15s (observed: https://olx.ba/pretraga?q=iphone)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional


class WorkflowError(Exception):
    """Base class for every failure surfaced to a scenario."""

    kind: str = "WorkflowError"

    def __init__(
        self,
        step: str,
        expected: str,
        observed: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ):
        self.step = step
        self.expected = expected
        self.observed = observed
        self.timeout_ms = timeout_ms
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"{self.kind} in step '{self.step}': expected {self.expected}"
        if self.timeout_ms is not None:
            message += f" within {self.timeout_ms / 1000:g}s"
        if self.observed is not None:
            message += f" (observed: {self.observed})"
        return message

    @classmethod
    def from_error(cls, step: str, error: "WorkflowError") -> "WorkflowError":
        """Re-label a lower-level failure with a workflow-specific kind."""
        return cls(
            step=step,
            expected=error.expected,
            observed=error.observed,
            timeout_ms=error.timeout_ms,
        )


class ElementNotFoundError(WorkflowError):
    """Raised when a locator resolves to zero elements but one was required."""

    kind = "NotFound"


class WaitTimeoutError(WorkflowError):
    """Raised when a wait condition did not become true in time."""

    kind = "Timeout"


class AuthFailedError(WorkflowError):
    """Raised when login never reaches the expected post-login state."""

    kind = "AuthFailed"


class FilterNotAppliedError(WorkflowError):
    """Raised when a filter/sort selection is not reflected in the URL."""

    kind = "FilterNotApplied"


class NoResultsError(WorkflowError):
    """Raised when a result listing shows no items."""

    kind = "NoResults"


__all__ = [
    "WorkflowError",
    "ElementNotFoundError",
    "WaitTimeoutError",
    "AuthFailedError",
    "FilterNotAppliedError",
    "NoResultsError",
]
