"""Domain base package - exceptions and ports."""

from cloudcontrol_provider.domain.base.exceptions import (
    ConfigurationError,
    ContractViolationError,
    DomainException,
    EntityNotFoundError,
    InfrastructureError,
    ValidationError,
)

__all__: list[str] = [
    "ConfigurationError",
    "ContractViolationError",
    "DomainException",
    "EntityNotFoundError",
    "InfrastructureError",
    "ValidationError",
]
