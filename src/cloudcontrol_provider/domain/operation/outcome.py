"""
Operation outcomes and the per-attempt operation context.

A unit of work run by the retry engine reports how its attempt went in one of
two ways:

- by calling ``context.retry()`` or ``context.fail(error)`` on the
  ``OperationContext`` it receives, or
- by returning an ``OperationOutcome``.

Doing neither (returning ``None`` without signalling) means the attempt
succeeded.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from cloudcontrol_provider.domain.base.exceptions import ContractViolationError


class OutcomeKind(str, Enum):
    """Kind of outcome of a single attempt."""

    CONTINUE = "continue"
    RETRY = "retry"
    FAIL = "fail"


@dataclass(frozen=True)
class OperationOutcome:
    """Tagged result of one attempt."""

    kind: OutcomeKind
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if self.kind is OutcomeKind.FAIL and self.error is None:
            raise ValueError("A failed outcome requires an error")
        if self.kind is not OutcomeKind.FAIL and self.error is not None:
            raise ValueError(f"A {self.kind.value} outcome cannot carry an error")

    @classmethod
    def proceed(cls) -> "OperationOutcome":
        """Attempt succeeded."""
        return cls(OutcomeKind.CONTINUE)

    @classmethod
    def retry(cls) -> "OperationOutcome":
        """Attempt hit a transient condition and may be retried."""
        return cls(OutcomeKind.RETRY)

    @classmethod
    def fail(cls, error: BaseException) -> "OperationOutcome":
        """Attempt failed terminally with ``error``."""
        return cls(OutcomeKind.FAIL, error)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.CONTINUE

    @property
    def is_retry(self) -> bool:
        return self.kind is OutcomeKind.RETRY

    @property
    def is_failure(self) -> bool:
        return self.kind is OutcomeKind.FAIL


class OperationContext:
    """
    Handle passed into each attempt of a unit of work.

    A fresh context is created for every attempt, so signals never leak from
    one attempt into the next.
    """

    def __init__(self, description: str, attempt: int) -> None:
        self._description = description
        self._attempt = attempt
        self._outcome: Optional[OperationOutcome] = None
        self.result: Any = None

    @property
    def description(self) -> str:
        return self._description

    @property
    def attempt(self) -> int:
        """1-based attempt number."""
        return self._attempt

    @property
    def outcome(self) -> Optional[OperationOutcome]:
        """Outcome signalled so far, or None."""
        return self._outcome

    def retry(self) -> None:
        """Mark the current attempt as a transient failure."""
        self._signal(OperationOutcome.retry())

    def fail(self, error: BaseException) -> None:
        """Mark the current attempt as terminally failed with ``error``."""
        self._signal(OperationOutcome.fail(error))

    def resolve(self, returned: Optional[OperationOutcome]) -> OperationOutcome:
        """
        Combine the signalled outcome with the value returned by the work.

        Args:
            returned: Whatever the unit of work returned (an outcome or None)

        Returns:
            The attempt's outcome; CONTINUE when nothing was signalled

        Raises:
            ContractViolationError: If the returned outcome contradicts a signal
        """
        if returned is None:
            return self._outcome or OperationOutcome.proceed()

        if not isinstance(returned, OperationOutcome):
            raise ContractViolationError(
                f"Operation '{self._description}' returned {type(returned).__name__}; "
                "expected an OperationOutcome or None (use context.result for values)"
            )

        if self._outcome is not None and self._outcome.kind is not returned.kind:
            raise ContractViolationError(
                f"Operation '{self._description}' signalled {self._outcome.kind.value} "
                f"but returned {returned.kind.value} on attempt {self._attempt}"
            )
        return returned

    def _signal(self, outcome: OperationOutcome) -> None:
        if self._outcome is not None and self._outcome.kind is not outcome.kind:
            raise ContractViolationError(
                f"Operation '{self._description}' signalled both "
                f"{self._outcome.kind.value} and {outcome.kind.value} on attempt {self._attempt}"
            )
        self._outcome = outcome
