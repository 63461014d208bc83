"""Domain port for the CloudControl compute API."""

from abc import ABC, abstractmethod
from typing import Optional

from cloudcontrol_provider.domain.network_adapter.models import Server
from cloudcontrol_provider.domain.operation.value_objects import ChangeStatus

RESOURCE_TYPE_SERVER = "server"
RESOURCE_TYPE_NETWORK_ADAPTER = "network_adapter"


class CloudControlClientPort(ABC):
    """
    Operations the provider needs from the remote control plane.

    Calls that start an asynchronous job (add/remove adapter, IP change
    notification, power operations) return as soon as the job is accepted.
    When the control plane is busy they raise an error that
    ``is_resource_busy_error`` recognises; completion is observed through
    ``get_pending_change``.
    """

    @abstractmethod
    def get_server(self, server_id: str) -> Optional[Server]:
        """Get a server by id, or None if it does not exist."""

    @abstractmethod
    def add_nic_to_server(
        self,
        server_id: str,
        ipv4_address: Optional[str],
        vlan_id: Optional[str],
        adapter_type: Optional[str] = None,
    ) -> str:
        """Start adding a network adapter to a server; returns the new adapter id."""

    @abstractmethod
    def remove_nic_from_server(self, network_adapter_id: str) -> None:
        """Start removing a network adapter."""

    @abstractmethod
    def notify_server_ip_address_change(
        self,
        network_adapter_id: str,
        ipv4_address: Optional[str],
        ipv6_address: Optional[str],
    ) -> None:
        """Tell the control plane that an adapter's IP address has changed."""

    @abstractmethod
    def shutdown_server(self, server_id: str) -> None:
        """Start a graceful shutdown of a server."""

    @abstractmethod
    def start_server(self, server_id: str) -> None:
        """Start powering on a server."""

    @abstractmethod
    def get_pending_change(self, resource_type: str, resource_id: str) -> ChangeStatus:
        """Get the pending-change status of a resource."""
