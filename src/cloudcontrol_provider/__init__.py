"""
CloudControl provider - provisioning glue over the CloudControl compute API.

The package is laid out in layers:

- domain: exceptions, ports and value objects
- infrastructure: logging and the resilience core (retry engine, async
  operation gate, completion waiter)
- providers.cloudcontrol: configuration, API client and resource handlers
"""

from cloudcontrol_provider._package import PACKAGE_NAME, __version__

__all__: list[str] = ["PACKAGE_NAME", "__version__"]
