"""Provider state shared by every CloudControl resource handler."""

from typing import Optional

from cloudcontrol_provider.domain.base.ports.cloud_client_port import CloudControlClientPort
from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.infrastructure.adapters.logging_adapter import LoggingAdapter
from cloudcontrol_provider.infrastructure.logging.logger import setup_logging
from cloudcontrol_provider.infrastructure.resilience.async_gate import (
    AsyncOperationGate,
    GateToken,
)
from cloudcontrol_provider.infrastructure.resilience.completion_waiter import CompletionWaiter
from cloudcontrol_provider.infrastructure.resilience.retry_engine import RetryEngine
from cloudcontrol_provider.providers.cloudcontrol.configuration.config import (
    CloudControlProviderConfig,
    load_provider_config,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.cloudcontrol_client import (
    CloudControlClient,
)


class ProviderState:
    """
    Owns the collaborators every handler needs: settings, API client, retry
    engine, completion waiter and the async operation gate.

    Create one instance per control plane and hand it to every handler; the
    gate it owns is what keeps asynchronous operation initiation exclusive
    across the whole process.
    """

    def __init__(
        self,
        config: CloudControlProviderConfig,
        client: Optional[CloudControlClientPort] = None,
        logger: Optional[LoggingPort] = None,
        gate: Optional[AsyncOperationGate] = None,
        retry_engine: Optional[RetryEngine] = None,
        waiter: Optional[CompletionWaiter] = None,
    ) -> None:
        self._config = config
        self._logger = logger or LoggingAdapter("cloudcontrol_provider.provider")
        self._client = client or CloudControlClient(config, self._logger)
        self._gate = gate or AsyncOperationGate(
            self._logger, stall_warning_seconds=config.gate_stall_warning
        )
        self._retry_engine = retry_engine or RetryEngine(self._logger)
        self._waiter = waiter or CompletionWaiter(
            self._client, self._logger, poll_interval=config.poll_interval
        )

    @classmethod
    def from_environment(cls, settings_file: Optional[str] = None) -> "ProviderState":
        """Load configuration, set up logging and build the default collaborators."""
        config = load_provider_config(settings_file)
        setup_logging(log_level=config.log_level, log_destination=config.log_destination)
        state = cls(config)
        state.logger.info(
            "CloudControl provider initialized for region %s (organization %s)",
            config.region,
            config.organization_id,
        )
        return state

    @property
    def settings(self) -> CloudControlProviderConfig:
        return self._config

    @property
    def client(self) -> CloudControlClientPort:
        return self._client

    @property
    def logger(self) -> LoggingPort:
        return self._logger

    @property
    def gate(self) -> AsyncOperationGate:
        return self._gate

    @property
    def waiter(self) -> CompletionWaiter:
        return self._waiter

    def retry(self) -> RetryEngine:
        """Retry engine for operations against the control plane."""
        return self._retry_engine

    def acquire_async_operation_lock(self, description: str) -> GateToken:
        """
        Take the process-wide lock for initiating an asynchronous operation.

        Release it as soon as the initiating call returns::

            with provider_state.acquire_async_operation_lock(description):
                client.remove_nic_from_server(adapter_id)
        """
        return self._gate.acquire(description)
