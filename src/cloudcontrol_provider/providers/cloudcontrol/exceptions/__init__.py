"""CloudControl exceptions."""

from cloudcontrol_provider.providers.cloudcontrol.exceptions.cloudcontrol_exceptions import (
    RESPONSE_CODE_RESOURCE_BUSY,
    RESPONSE_CODE_RESOURCE_NOT_FOUND,
    RESPONSE_CODE_UNEXPECTED_ERROR,
    CloudControlAPIError,
    CloudControlConnectionError,
    CloudControlError,
    is_resource_busy_error,
    is_resource_not_found_error,
)

__all__: list[str] = [
    "RESPONSE_CODE_RESOURCE_BUSY",
    "RESPONSE_CODE_RESOURCE_NOT_FOUND",
    "RESPONSE_CODE_UNEXPECTED_ERROR",
    "CloudControlAPIError",
    "CloudControlConnectionError",
    "CloudControlError",
    "is_resource_busy_error",
    "is_resource_not_found_error",
]
