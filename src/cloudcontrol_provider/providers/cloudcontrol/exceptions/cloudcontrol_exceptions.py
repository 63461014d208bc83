"""CloudControl API exceptions and error classification."""

from typing import Any, Optional

from cloudcontrol_provider.domain.base.exceptions import InfrastructureError

RESPONSE_CODE_RESOURCE_BUSY = "RESOURCE_BUSY"
RESPONSE_CODE_RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
RESPONSE_CODE_UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class CloudControlError(InfrastructureError):
    """Base exception for CloudControl client failures."""


class CloudControlAPIError(CloudControlError):
    """The CloudControl API answered a request with an error response."""

    def __init__(
        self,
        response_code: str,
        message: str,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"CloudControl API error {response_code}: {message}",
            error_code=response_code,
            details={
                "status_code": status_code,
                "operation": operation,
                "request_id": request_id,
            },
        )
        self.response_code = response_code
        self.status_code = status_code
        self.operation = operation
        self.request_id = request_id

    @classmethod
    def from_response_body(cls, body: dict[str, Any], status_code: Optional[int] = None) -> "CloudControlAPIError":
        """Build an error from a CloudControl ``responseCode`` envelope."""
        return cls(
            response_code=body.get("responseCode") or "UNKNOWN",
            message=body.get("message") or "no message",
            status_code=status_code,
            operation=body.get("operation"),
            request_id=body.get("requestId"),
        )


class CloudControlConnectionError(CloudControlError):
    """The CloudControl API could not be reached."""


def is_resource_busy_error(error: Optional[BaseException]) -> bool:
    """
    Determine whether an error is CloudControl's "resource busy, try again later" signal.

    Only RESOURCE_BUSY API errors qualify; every other error is terminal.

    Args:
        error: The error to classify (None is not busy)

    Returns:
        True if the operation should be retried
    """
    return (
        isinstance(error, CloudControlAPIError)
        and error.response_code == RESPONSE_CODE_RESOURCE_BUSY
    )


def is_resource_not_found_error(error: Optional[BaseException]) -> bool:
    """Determine whether an error means the requested resource does not exist."""
    if not isinstance(error, CloudControlAPIError):
        return False
    return error.response_code == RESPONSE_CODE_RESOURCE_NOT_FOUND or error.status_code == 404
