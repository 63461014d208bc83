"""Value objects for retry policies and asynchronous jobs."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

PENDING_STATE_PREFIX = "PENDING_"
FAILED_STATE_PREFIX = "FAILED_"
DELETED_STATE = "DELETED"
NORMAL_STATE = "NORMAL"


class RetryPolicy(BaseModel):
    """Timeout and fixed delay for one retried operation."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(..., gt=0, description="Total time allowed for all attempts (seconds)")
    delay: Optional[float] = Field(
        None, ge=0, description="Fixed delay between attempts (seconds); zero when unset"
    )


class AsyncJobHandle(BaseModel):
    """Identifies a server-side asynchronous change to wait for."""

    model_config = ConfigDict(frozen=True)

    resource_type: str
    resource_id: str
    label: str

    def __str__(self) -> str:
        return f"{self.label} ({self.resource_type} '{self.resource_id}')"


class ChangeStatus(BaseModel):
    """Pending-change status of a remote resource, as reported by the control plane."""

    model_config = ConfigDict(frozen=True)

    resource_type: str
    resource_id: str
    state: str
    action: Optional[str] = None
    message: Optional[str] = None
    resource: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_pending(self) -> bool:
        return self.state.upper().startswith(PENDING_STATE_PREFIX)

    @property
    def is_failed(self) -> bool:
        return self.state.upper().startswith(FAILED_STATE_PREFIX)

    @property
    def is_deleted(self) -> bool:
        return self.state.upper() == DELETED_STATE

    @property
    def is_complete(self) -> bool:
        """True once the resource is back to NORMAL or has been deleted."""
        return self.state.upper() == NORMAL_STATE or self.is_deleted

    @classmethod
    def deleted(cls, resource_type: str, resource_id: str) -> "ChangeStatus":
        """Status for a resource that no longer exists."""
        return cls(resource_type=resource_type, resource_id=resource_id, state=DELETED_STATE)
