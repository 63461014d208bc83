"""CloudControl infrastructure - API client and provider state."""

from cloudcontrol_provider.providers.cloudcontrol.infrastructure.cloudcontrol_client import (
    CloudControlClient,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.provider_state import (
    ProviderState,
)

__all__: list[str] = ["CloudControlClient", "ProviderState"]
