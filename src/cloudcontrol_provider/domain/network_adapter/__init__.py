"""Server and network adapter domain models."""

from cloudcontrol_provider.domain.network_adapter.models import (
    NetworkAdapter,
    NetworkAdapterSpec,
    NetworkAdapterType,
    Server,
    VirtualMachineNetwork,
)

__all__: list[str] = [
    "NetworkAdapter",
    "NetworkAdapterSpec",
    "NetworkAdapterType",
    "Server",
    "VirtualMachineNetwork",
]
