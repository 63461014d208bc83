"""Polls the control plane until an asynchronous change completes."""

import threading
import time
from typing import Callable, Optional

from cloudcontrol_provider.domain.base.ports.cloud_client_port import CloudControlClientPort
from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.domain.operation.value_objects import AsyncJobHandle, ChangeStatus
from cloudcontrol_provider.infrastructure.adapters.logging_adapter import LoggingAdapter
from cloudcontrol_provider.infrastructure.resilience.exceptions import (
    ChangeFailedError,
    OperationCancelledError,
    OperationTimeoutError,
)

DEFAULT_POLL_INTERVAL = 5.0


class CompletionWaiter:
    """
    Waits for a resource's pending change to finish.

    Each call owns its own polling loop, so many jobs can be waited on
    concurrently. The gate is never held while polling.
    """

    def __init__(
        self,
        client: CloudControlClientPort,
        logger: Optional[LoggingPort] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self._client = client
        self._logger = logger or LoggingAdapter(__name__)
        self._poll_interval = poll_interval
        self._clock = clock

    def wait_for_change(
        self,
        resource_type: str,
        resource_id: str,
        operation_label: str,
        timeout: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> ChangeStatus:
        """
        Poll until the resource has no pending change.

        Args:
            resource_type: Resource type understood by the client (e.g. "server")
            resource_id: Resource id
            operation_label: Human-readable label of the change being awaited
            timeout: Maximum time to wait, in seconds
            cancel_event: Optional event that aborts the wait

        Returns:
            The final change status (state NORMAL or DELETED)

        Raises:
            ChangeFailedError: If the resource settles in any other state (FAILED_*,
                REQUIRES_SUPPORT, ...)
            OperationTimeoutError: If the change is still pending after ``timeout``
            OperationCancelledError: If ``cancel_event`` was set while waiting
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        description = f"{operation_label} ({resource_type} '{resource_id}')"
        started = self._clock()
        polls = 0
        while True:
            polls += 1
            status = self._client.get_pending_change(resource_type, resource_id)
            elapsed = self._clock() - started

            if not status.is_pending and not status.is_complete:
                self._logger.error(
                    "%s: change failed with state '%s' after %.2fs",
                    description,
                    status.state,
                    elapsed,
                )
                raise ChangeFailedError(
                    description, resource_type, resource_id, status.state, status.message
                )

            if status.is_complete:
                self._logger.info(
                    "%s: change complete (state '%s') after %d poll(s), %.2fs",
                    description,
                    status.state,
                    polls,
                    elapsed,
                )
                return status

            remaining = timeout - elapsed
            if remaining <= 0:
                self._logger.warning("%s: still pending after %.2fs", description, elapsed)
                raise OperationTimeoutError(description, timeout, elapsed)

            self._logger.debug(
                "%s: still %s (action %s), polling again", description, status.state, status.action
            )
            self._sleep(description, min(self._poll_interval, remaining), started, cancel_event)

    def wait_for_job(
        self,
        handle: AsyncJobHandle,
        timeout: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> ChangeStatus:
        """Wait for the job identified by ``handle``."""
        return self.wait_for_change(
            handle.resource_type,
            handle.resource_id,
            handle.label,
            timeout,
            cancel_event=cancel_event,
        )

    def _sleep(
        self,
        description: str,
        seconds: float,
        started: float,
        cancel_event: Optional[threading.Event],
    ) -> None:
        if cancel_event is None:
            time.sleep(seconds)
            return
        if cancel_event.wait(seconds):
            raise OperationCancelledError(description, self._clock() - started)
