"""ResolutionOutcome: the result of resolving one variable's raw value.

The resolver never raises for an individual variable. It returns either a
resolved value or a classified failure, and the loader decides whether that
failure aborts the run or only drops the variable.
"""

from dataclasses import dataclass
from enum import Enum


class ResolutionStatus(str, Enum):
    """Whether a value was produced."""

    RESOLVED = "resolved"
    FAILED = "failed"


class FailureKind(str, Enum):
    """Why a value could not be produced."""

    UNKNOWN_METHOD = "unknown_method"  # foo::bar
    LOAD_ERROR = "load_error"  # secret lookup failed


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Tagged result of resolving a raw value.

    Uses a discriminated union on ResolutionStatus so a resolved outcome always
    has a value and a failed one always has a kind and an error message.
    An empty string is a valid resolved value.

    Usage:
        outcome = await resolve(raw_value, provider)
        if outcome.is_resolved:
            environment[output_name] = outcome.value
        else:
            logger.warning(outcome.error)
    """

    status: ResolutionStatus
    value: str | None = None
    failure_kind: FailureKind | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.status == ResolutionStatus.RESOLVED and self.value is None:
            raise ValueError("Resolved outcome must have a value")
        if self.status == ResolutionStatus.FAILED and (self.failure_kind is None or not self.error):
            raise ValueError("Failed outcome must have a failure kind and an error message")

    @property
    def is_resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED

    @property
    def is_failure(self) -> bool:
        return self.status == ResolutionStatus.FAILED

    @classmethod
    def resolved(cls, value: str) -> "ResolutionOutcome":
        """Create a resolved outcome carrying ``value``."""
        return cls(status=ResolutionStatus.RESOLVED, value=value)

    @classmethod
    def failed(cls, kind: FailureKind, error: str) -> "ResolutionOutcome":
        """Create a failed outcome.

        Args:
            kind: UNKNOWN_METHOD or LOAD_ERROR
            error: Diagnostic naming the offending marker or secret identifier
                and the underlying cause
        """
        return cls(status=ResolutionStatus.FAILED, failure_kind=kind, error=error)

    def unwrap(self) -> str:
        """Get value or raise if the outcome is a failure."""
        if not self.is_resolved or self.value is None:
            raise ValueError(f"Cannot unwrap failed outcome: {self.error}")
        return self.value
