"""Base class for CloudControl resource handlers."""

import threading
from typing import Callable, Optional, TypeVar

from cloudcontrol_provider.domain.base.exceptions import EntityNotFoundError
from cloudcontrol_provider.domain.base.ports.cloud_client_port import (
    RESOURCE_TYPE_SERVER,
    CloudControlClientPort,
)
from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.domain.network_adapter.models import Server
from cloudcontrol_provider.domain.operation.outcome import OperationContext
from cloudcontrol_provider.domain.operation.value_objects import ChangeStatus, RetryPolicy
from cloudcontrol_provider.providers.cloudcontrol.configuration.config import (
    CloudControlProviderConfig,
)
from cloudcontrol_provider.providers.cloudcontrol.exceptions.cloudcontrol_exceptions import (
    CloudControlError,
    is_resource_busy_error,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.provider_state import (
    ProviderState,
)

T = TypeVar("T")


class CloudControlHandler:
    """
    Common plumbing for handlers that reconcile CloudControl resources.

    Every mutating call goes through ``_initiate_async_operation``: the retry
    engine loops, the async operation gate is held only around the initiating
    API call, busy errors are retried and anything else fails fast.
    Completion is then awaited with ``_wait_for_change`` outside the gate.
    """

    def __init__(self, provider_state: ProviderState, logger: Optional[LoggingPort] = None) -> None:
        self._state = provider_state
        self._logger = logger or provider_state.logger

    @property
    def settings(self) -> CloudControlProviderConfig:
        return self._state.settings

    @property
    def client(self) -> CloudControlClientPort:
        return self._state.client

    def _initiate_async_operation(
        self,
        description: str,
        initiate: Callable[[], T],
        policy: Optional[RetryPolicy] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> T:
        """
        Start an asynchronous remote operation, retrying while CloudControl is busy.

        Args:
            description: Operation description used for logging, errors and the gate label
            initiate: Callable making the initiating API call
            policy: Retry policy (defaults to the provider's)
            cancel_event: Optional event that aborts waiting between attempts

        Returns:
            Whatever ``initiate`` returned on the successful attempt

        Raises:
            OperationFailedError: If the API returned a non-busy error
            OperationTimeoutError: If CloudControl stayed busy past the timeout
        """

        def attempt(context: OperationContext) -> None:
            # CloudControl returns UNEXPECTED_ERROR if more than one asynchronous operation is initiated at a time.
            with self._state.acquire_async_operation_lock(description):
                try:
                    context.result = initiate()
                except CloudControlError as e:
                    if is_resource_busy_error(e):
                        context.retry()
                    else:
                        context.fail(e)

        return self._state.retry().execute_policy(
            description,
            policy or self.settings.retry_policy(),
            attempt,
            cancel_event=cancel_event,
        )

    def _wait_for_change(
        self,
        resource_type: str,
        resource_id: str,
        label: str,
        timeout: Optional[float] = None,
    ) -> ChangeStatus:
        return self._state.waiter.wait_for_change(
            resource_type,
            resource_id,
            label,
            timeout or self.settings.server_update_timeout,
        )

    def _wait_for_server_change(self, server_id: str, label: str) -> ChangeStatus:
        return self._wait_for_change(RESOURCE_TYPE_SERVER, server_id, label)

    def _get_server(self, server_id: str) -> Server:
        server = self.client.get_server(server_id)
        if server is None:
            raise EntityNotFoundError("Server", server_id, f"Cannot find server '{server_id}'")
        return server
