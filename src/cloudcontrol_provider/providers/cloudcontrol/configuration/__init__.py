"""CloudControl provider configuration."""

from cloudcontrol_provider.providers.cloudcontrol.configuration.config import (
    CloudControlProviderConfig,
    load_provider_config,
)

__all__: list[str] = ["CloudControlProviderConfig", "load_provider_config"]
