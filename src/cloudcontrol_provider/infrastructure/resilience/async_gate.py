"""
Async operation gate.

CloudControl returns UNEXPECTED_ERROR when two asynchronous operations are
initiated within a short window of each other, no matter which resources
they concern. The gate is a binary semaphore that lets only one initiating
call through at a time. The job started by that call keeps running on the
server after the token is released; only initiation is serialized.

One gate instance is shared by everything that talks to the same control
plane (the provider state owns it)::

    with gate.acquire("Add network adapter to server 'abc'"):
        adapter_id = client.add_nic_to_server(...)
"""

import threading
import time
from typing import Callable, Optional

from cloudcontrol_provider.domain.base.exceptions import ContractViolationError
from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.infrastructure.adapters.logging_adapter import LoggingAdapter
from cloudcontrol_provider.infrastructure.resilience.exceptions import GateAcquireTimeoutError


class GateToken:
    """Exclusive right to initiate one asynchronous operation."""

    def __init__(self, gate: "AsyncOperationGate", label: str, acquired_at: float) -> None:
        self._gate = gate
        self._label = label
        self._acquired_at = acquired_at
        self._released = False
        self._release_lock = threading.Lock()

    @property
    def label(self) -> str:
        return self._label

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Release the gate. Releasing an already-released token does nothing."""
        with self._release_lock:
            if self._released:
                return
            self._released = True
        self._gate._release(self)

    def __enter__(self) -> "GateToken":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.release()
        return False

    def __repr__(self) -> str:
        state = "released" if self._released else "held"
        return f"GateToken(label={self._label!r}, {state})"


class AsyncOperationGate:
    """Process-wide mutual exclusion for initiating asynchronous remote operations."""

    def __init__(
        self,
        logger: Optional[LoggingPort] = None,
        stall_warning_seconds: Optional[float] = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the gate.

        Args:
            logger: Logging port for diagnostics
            stall_warning_seconds: Log a warning each time a caller has waited this
                long for the gate (None disables the warning)
            clock: Monotonic clock used to measure waits
        """
        if stall_warning_seconds is not None and stall_warning_seconds <= 0:
            raise ValueError("stall_warning_seconds must be positive")
        self._logger = logger or LoggingAdapter(__name__)
        self._stall_warning_seconds = stall_warning_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._holder: Optional[GateToken] = None
        self._holder_thread: Optional[int] = None

    @property
    def held_by(self) -> Optional[str]:
        """Label of the current holder, or None."""
        with self._state_lock:
            return self._holder.label if self._holder is not None else None

    def locked(self) -> bool:
        return self._lock.locked()

    def acquire(self, label: str, timeout: Optional[float] = None) -> GateToken:
        """
        Block until the gate is free and take it.

        Args:
            label: Description of the operation about to be initiated (diagnostic only)
            timeout: Optional maximum wait in seconds; None waits indefinitely

        Returns:
            A token that must be released (use it as a context manager)

        Raises:
            GateAcquireTimeoutError: If ``timeout`` elapsed before the gate was free
            ContractViolationError: If the calling thread already holds the gate
        """
        thread_id = threading.get_ident()
        with self._state_lock:
            if self._holder is not None and self._holder_thread == thread_id:
                raise ContractViolationError(
                    f"'{label}' tried to acquire the async operation lock while this thread "
                    f"still holds it for '{self._holder.label}'"
                )

        self._logger.debug("Acquiring async operation lock for '%s'", label)
        started = self._clock()
        while not self._lock.acquire(timeout=self._next_wait(started, timeout)):
            elapsed = self._clock() - started
            if timeout is not None and elapsed >= timeout:
                raise GateAcquireTimeoutError(label, timeout, elapsed, self.held_by)
            if self._stall_warning_seconds is not None and elapsed >= self._stall_warning_seconds:
                self._logger.warning(
                    "'%s' has waited %.0fs for the async operation lock (held by '%s')",
                    label,
                    elapsed,
                    self.held_by,
                )

        token = GateToken(self, label, self._clock())
        with self._state_lock:
            self._holder = token
            self._holder_thread = thread_id
        self._logger.debug(
            "Acquired async operation lock for '%s' after %.2fs", label, self._clock() - started
        )
        return token

    def _next_wait(self, started: float, timeout: Optional[float]) -> float:
        """Seconds to block on the next lock attempt; -1 blocks indefinitely."""
        waits = []
        if self._stall_warning_seconds is not None:
            waits.append(self._stall_warning_seconds)
        if timeout is not None:
            waits.append(max(0.0, timeout - (self._clock() - started)))
        return min(waits) if waits else -1

    def _release(self, token: GateToken) -> None:
        with self._state_lock:
            if self._holder is not token:
                raise ContractViolationError(
                    f"Async operation lock released by '{token.label}' which does not hold it"
                )
            self._holder = None
            self._holder_thread = None
            held_for = self._clock() - token._acquired_at
        self._lock.release()
        self._logger.debug("Released async operation lock for '%s' after %.2fs", token.label, held_for)
