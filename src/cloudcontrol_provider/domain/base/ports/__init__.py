"""Domain ports."""

from cloudcontrol_provider.domain.base.ports.cloud_client_port import (
    RESOURCE_TYPE_NETWORK_ADAPTER,
    RESOURCE_TYPE_SERVER,
    CloudControlClientPort,
)
from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort

__all__: list[str] = [
    "RESOURCE_TYPE_NETWORK_ADAPTER",
    "RESOURCE_TYPE_SERVER",
    "CloudControlClientPort",
    "LoggingPort",
]
