"""CloudControl resource handlers."""

from cloudcontrol_provider.providers.cloudcontrol.infrastructure.handlers.base_handler import (
    CloudControlHandler,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.handlers.network_adapter_handler import (
    NetworkAdapterHandler,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.handlers.server_handler import (
    ServerHandler,
)

__all__: list[str] = ["CloudControlHandler", "NetworkAdapterHandler", "ServerHandler"]
