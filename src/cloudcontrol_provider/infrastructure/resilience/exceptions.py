"""Exceptions raised by the resilience core."""

from typing import Optional

from cloudcontrol_provider.domain.base.exceptions import InfrastructureError


class OperationError(InfrastructureError):
    """Base class for failures of a described operation."""

    def __init__(self, description: str, message: str, **details) -> None:
        super().__init__(message, details={"operation": description, **details})
        self.description = description


class OperationFailedError(OperationError):
    """An attempt signalled a terminal failure."""

    def __init__(self, description: str, cause: BaseException) -> None:
        super().__init__(description, f"{description}: {cause}", cause=str(cause))
        self.cause = cause


class OperationTimeoutError(OperationError):
    """An operation did not complete within its timeout."""

    def __init__(
        self,
        description: str,
        timeout: float,
        elapsed: float,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(
            description,
            message
            or f"{description}: timed out after {elapsed:.2f}s (timeout {timeout:.2f}s)",
            timeout=timeout,
            elapsed=elapsed,
        )
        self.timeout = timeout
        self.elapsed = elapsed


class GateAcquireTimeoutError(OperationTimeoutError):
    """Waiting for the async operation gate exceeded an explicit timeout."""

    def __init__(self, description: str, timeout: float, elapsed: float, held_by: Optional[str]) -> None:
        super().__init__(
            description,
            timeout,
            elapsed,
            message=(
                f"{description}: timed out after {elapsed:.2f}s waiting for the async "
                f"operation lock (held by '{held_by}')"
            ),
        )
        self.held_by = held_by


class OperationCancelledError(OperationError):
    """The caller cancelled an operation while it was waiting."""

    def __init__(self, description: str, elapsed: float) -> None:
        super().__init__(description, f"{description}: cancelled after {elapsed:.2f}s", elapsed=elapsed)
        self.elapsed = elapsed


class ChangeFailedError(OperationError):
    """The control plane reported that an asynchronous change failed."""

    def __init__(
        self,
        description: str,
        resource_type: str,
        resource_id: str,
        state: str,
        remote_message: Optional[str] = None,
    ) -> None:
        message = f"{description}: {resource_type} '{resource_id}' entered state '{state}'"
        if remote_message:
            message = f"{message} ({remote_message})"
        super().__init__(
            description,
            message,
            resource_type=resource_type,
            resource_id=resource_id,
            state=state,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.state = state
