"""Operation vocabulary shared by the resilience core and the resource handlers."""

from cloudcontrol_provider.domain.operation.outcome import (
    OperationContext,
    OperationOutcome,
    OutcomeKind,
)
from cloudcontrol_provider.domain.operation.value_objects import (
    AsyncJobHandle,
    ChangeStatus,
    RetryPolicy,
)

__all__: list[str] = [
    "AsyncJobHandle",
    "ChangeStatus",
    "OperationContext",
    "OperationOutcome",
    "OutcomeKind",
    "RetryPolicy",
]
