"""Infrastructure resilience package - retry engine, async operation gate and completion waiter."""

from cloudcontrol_provider.infrastructure.resilience.async_gate import AsyncOperationGate, GateToken
from cloudcontrol_provider.infrastructure.resilience.completion_waiter import CompletionWaiter
from cloudcontrol_provider.infrastructure.resilience.exceptions import (
    ChangeFailedError,
    GateAcquireTimeoutError,
    OperationCancelledError,
    OperationError,
    OperationFailedError,
    OperationTimeoutError,
)
from cloudcontrol_provider.infrastructure.resilience.retry_engine import RetryEngine

__all__: list[str] = [
    # Core
    "AsyncOperationGate",
    "CompletionWaiter",
    "GateToken",
    "RetryEngine",
    # Exceptions
    "ChangeFailedError",
    "GateAcquireTimeoutError",
    "OperationCancelledError",
    "OperationError",
    "OperationFailedError",
    "OperationTimeoutError",
]
