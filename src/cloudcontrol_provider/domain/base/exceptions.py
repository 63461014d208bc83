"""Base domain exceptions shared by every layer."""

from typing import Any, Optional


class DomainException(Exception):
    """Base exception for all provider errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainException):
    """Raised when input data fails validation."""


class ConfigurationError(DomainException):
    """Raised when provider configuration is missing or invalid."""


class EntityNotFoundError(DomainException):
    """Raised when a remote entity cannot be found."""

    def __init__(self, entity_type: str, entity_id: str, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"{entity_type} '{entity_id}' not found",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class InfrastructureError(DomainException):
    """Raised for failures talking to remote infrastructure."""


class ContractViolationError(RuntimeError):
    """
    Raised when a caller breaks the contract of the resilience core.

    Signalling both retry and failure for one attempt, or acquiring the
    async operation gate twice from the same thread, is a defect in the
    calling code. It is never retried or translated.
    """
