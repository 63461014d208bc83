"""
Network adapter handler.

Adds, inspects, re-addresses and removes additional network adapters on
CloudControl servers. Adding or removing an adapter requires the server to be
stopped, so a running server is shut down first and started again once the
change has completed.

There is no rollback: if a step fails part-way (for example the adapter was
added but the server failed to start), the remote changes stay in place and
the next reconciliation pass picks up from the actual state.
"""

from typing import Optional

from cloudcontrol_provider.domain.base.exceptions import EntityNotFoundError, ValidationError
from cloudcontrol_provider.domain.base.ports.cloud_client_port import (
    RESOURCE_TYPE_NETWORK_ADAPTER,
)
from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.domain.network_adapter.models import (
    NetworkAdapter,
    NetworkAdapterSpec,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.handlers.base_handler import (
    CloudControlHandler,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.handlers.server_handler import (
    ServerHandler,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.provider_state import (
    ProviderState,
)


class NetworkAdapterHandler(CloudControlHandler):
    """Handler for additional network adapters."""

    def __init__(
        self,
        provider_state: ProviderState,
        logger: Optional[LoggingPort] = None,
        server_handler: Optional[ServerHandler] = None,
    ) -> None:
        super().__init__(provider_state, logger)
        self._servers = server_handler or ServerHandler(provider_state, logger)

    def create(self, spec: NetworkAdapterSpec) -> NetworkAdapter:
        """
        Add a network adapter to a server.

        Args:
            spec: Desired adapter (server, VLAN or IPv4 address, adapter type)

        Returns:
            The adapter as reported by CloudControl once the change has completed

        Raises:
            ValidationError: If the spec names neither a VLAN nor a private IPv4 address
            EntityNotFoundError: If the server, or the new adapter afterwards, cannot be found
            OperationFailedError: If CloudControl rejected the request
            OperationTimeoutError: If CloudControl stayed busy or the change did not finish in time
        """
        server_id = spec.server_id
        if not spec.vlan_id and not spec.private_ipv4_address:
            raise ValidationError(
                f"Network adapter for server '{server_id}' needs a VLAN id or a private IPv4 address"
            )

        self._logger.info("Configure additional network adapter for server '%s'...", server_id)

        server = self._get_server(server_id)
        was_started = server.started
        if was_started:
            self._servers.shutdown(server_id)

        adapter_type = spec.adapter_type.value if spec.adapter_type else None
        adapter_id = self._initiate_async_operation(
            f"Add network adapter to server '{server_id}'",
            lambda: self.client.add_nic_to_server(
                server_id, spec.private_ipv4_address, spec.vlan_id, adapter_type
            ),
        )
        self._logger.info("Adding network adapter '%s' to server '%s'...", adapter_id, server_id)
        self._wait_for_server_change(server_id, "Add network adapter")

        if was_started:
            self._servers.start(server_id)

        self._logger.info(
            "Refresh properties for network adapter '%s' in server '%s'", adapter_id, server_id
        )
        adapter = self._get_server(server_id).network.get_adapter(adapter_id)
        if adapter is None:
            raise EntityNotFoundError(
                "NetworkAdapter",
                adapter_id,
                f"Newly-created network adapter (Id = '{adapter_id}') not found",
            )

        self._logger.info("Created network adapter '%s' on server '%s'", adapter_id, server_id)
        return adapter

    def exists(self, server_id: str, adapter_id: str) -> bool:
        """Check whether a server still has the given adapter."""
        return self.read(server_id, adapter_id) is not None

    def read(self, server_id: str, adapter_id: str) -> Optional[NetworkAdapter]:
        """Get the current state of an adapter, or None if it (or its server) is gone."""
        server = self.client.get_server(server_id)
        if server is None:
            self._logger.info("Server '%s' cannot be found", server_id)
            return None

        adapter = server.network.get_adapter(adapter_id)
        if adapter is None:
            self._logger.info("Network adapter '%s' no longer exists", adapter_id)
        return adapter

    def update_ip_address(
        self, server_id: str, adapter_id: str, private_ipv4_address: Optional[str]
    ) -> None:
        """Notify CloudControl that an adapter's IPv4 address has changed and wait for it."""
        self._logger.info(
            "Update IP address for network adapter '%s' to %s...", adapter_id, private_ipv4_address
        )

        self._initiate_async_operation(
            f"Update IP address for network adapter '{adapter_id}'",
            lambda: self.client.notify_server_ip_address_change(
                adapter_id, private_ipv4_address, None
            ),
        )
        self._wait_for_change(
            RESOURCE_TYPE_NETWORK_ADAPTER,
            f"{server_id}/{adapter_id}",
            "Update adapter IP address",
        )

        self._logger.info(
            "IP address of network adapter '%s' changed to %s", adapter_id, private_ipv4_address
        )

    def delete(self, server_id: str, adapter_id: str) -> None:
        """Remove a network adapter from its server."""
        self._logger.info("Removing network adapter '%s' from server '%s'...", adapter_id, server_id)

        server = self._get_server(server_id)
        was_started = server.started
        if was_started:
            self._servers.shutdown(server_id)

        self._initiate_async_operation(
            f"Remove network adapter '{adapter_id}' from server '{server_id}'",
            lambda: self.client.remove_nic_from_server(adapter_id),
        )
        self._wait_for_server_change(server_id, "Remove network adapter")

        self._logger.info("Removed network adapter '%s' from server '%s'.", adapter_id, server_id)

        if was_started:
            self._servers.start(server_id)
