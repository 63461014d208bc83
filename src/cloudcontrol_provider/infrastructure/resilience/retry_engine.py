"""
Deadline-bounded retry engine.

The engine runs a unit of work until it succeeds, signals a terminal failure
or runs out of time. Each attempt gets a fresh ``OperationContext``; the work
reports its outcome through that context or by returning an
``OperationOutcome`` (see ``domain.operation.outcome``).

Usage::

    def attempt(context):
        try:
            context.result = client.add_nic_to_server(server_id, ipv4, vlan_id)
        except CloudControlError as e:
            if is_resource_busy_error(e):
                context.retry()
            else:
                context.fail(e)

    adapter_id = engine.execute("Add network adapter", timeout=600, work=attempt, delay=5)
"""

import threading
import time
from typing import Any, Callable, Optional, Union

from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.domain.operation.outcome import OperationContext, OperationOutcome
from cloudcontrol_provider.domain.operation.value_objects import RetryPolicy
from cloudcontrol_provider.infrastructure.adapters.logging_adapter import LoggingAdapter
from cloudcontrol_provider.infrastructure.resilience.exceptions import (
    OperationCancelledError,
    OperationFailedError,
    OperationTimeoutError,
)

Work = Callable[[OperationContext], Union[OperationOutcome, None]]


class RetryEngine:
    """Executes units of work with a timeout and a fixed delay between attempts."""

    def __init__(
        self,
        logger: Optional[LoggingPort] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the retry engine.

        Args:
            logger: Logging port for per-attempt diagnostics
            clock: Monotonic clock used to measure elapsed time
        """
        self._logger = logger or LoggingAdapter(__name__)
        self._clock = clock

    def execute(
        self,
        description: str,
        timeout: float,
        work: Work,
        delay: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Any:
        """
        Run ``work`` until it succeeds, fails terminally or ``timeout`` elapses.

        Args:
            description: Human-readable operation description
            timeout: Total time allowed, in seconds
            work: Callable performing one attempt
            delay: Fixed delay between attempts, in seconds (zero when unset)
            cancel_event: Optional event that aborts the wait between attempts

        Returns:
            The ``result`` the successful attempt stored on its context

        Raises:
            OperationFailedError: If an attempt signalled a terminal failure
            OperationTimeoutError: If the timeout elapsed while retrying
            OperationCancelledError: If ``cancel_event`` was set while waiting
            ContractViolationError: If an attempt signalled conflicting outcomes
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if delay is not None and delay < 0:
            raise ValueError(f"delay cannot be negative, got {delay}")
        delay = delay or 0.0

        started = self._clock()
        attempt = 0
        while True:
            attempt += 1
            context = OperationContext(description, attempt)
            outcome = context.resolve(work(context))
            elapsed = self._clock() - started

            if outcome.is_success:
                self._logger.debug(
                    "%s: attempt %d succeeded after %.2fs", description, attempt, elapsed
                )
                return context.result

            if outcome.is_failure:
                self._logger.error(
                    "%s: attempt %d failed: %s", description, attempt, outcome.error
                )
                raise OperationFailedError(description, outcome.error) from outcome.error

            self._logger.info(
                "%s: attempt %d reported the resource is busy (%.2fs elapsed)",
                description,
                attempt,
                elapsed,
            )
            remaining = timeout - elapsed
            if remaining > 0:
                self._wait(description, min(delay, remaining), started, cancel_event)

            elapsed = self._clock() - started
            if remaining <= delay or elapsed >= timeout:
                self._logger.warning(
                    "%s: giving up after %d attempt(s) and %.2fs", description, attempt, elapsed
                )
                raise OperationTimeoutError(description, timeout, elapsed)

    def execute_policy(
        self,
        description: str,
        policy: RetryPolicy,
        work: Work,
        cancel_event: Optional[threading.Event] = None,
    ) -> Any:
        """Run ``work`` under the timeout and delay of ``policy``."""
        return self.execute(
            description,
            policy.timeout,
            work,
            delay=policy.delay,
            cancel_event=cancel_event,
        )

    def _wait(
        self,
        description: str,
        seconds: float,
        started: float,
        cancel_event: Optional[threading.Event],
    ) -> None:
        if cancel_event is None:
            if seconds > 0:
                time.sleep(seconds)
            return

        if cancel_event.wait(seconds):
            elapsed = self._clock() - started
            self._logger.info("%s: cancelled after %.2fs", description, elapsed)
            raise OperationCancelledError(description, elapsed)
