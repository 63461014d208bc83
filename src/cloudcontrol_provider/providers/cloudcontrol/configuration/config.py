"""CloudControl provider configuration."""

from typing import Any, Optional

from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from cloudcontrol_provider.domain.base.exceptions import ConfigurationError
from cloudcontrol_provider.domain.operation.value_objects import RetryPolicy

ENVVAR_PREFIX = "CLOUDCONTROL"
ENV_SWITCHER = "CLOUDCONTROL_ENV"


class CloudControlProviderConfig(BaseModel):
    """Provider-level settings: credentials, endpoint and operation timings (seconds)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str = Field(..., min_length=1, description="CloudControl user name")
    password: SecretStr = Field(..., description="CloudControl password")
    region: str = Field(..., min_length=1, description="CloudControl region code (e.g. 'au')")
    organization_id: str = Field(..., min_length=1, description="Organization id used in API paths")
    base_url: Optional[str] = Field(None, description="Override for the regional API endpoint")

    retry_timeout: float = Field(600.0, gt=0, description="Timeout for retried operations")
    retry_delay: float = Field(5.0, ge=0, description="Delay between retries of busy operations")
    server_update_timeout: float = Field(600.0, gt=0, description="Timeout waiting for server changes")
    poll_interval: float = Field(5.0, gt=0, description="Interval between pending-change polls")
    gate_stall_warning: Optional[float] = Field(
        60.0, gt=0, description="Warn when a caller waits this long for the async operation lock"
    )
    request_timeout: float = Field(60.0, gt=0, description="HTTP request timeout")

    log_level: str = Field("INFO", description="Logging level")
    log_destination: str = Field("stdout", description="Log destination: stdout, file or both")

    @field_validator("username", "organization_id", "region", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        return str(value).strip() if value is not None else value

    @field_validator("password", mode="before")
    @classmethod
    def _coerce_password(cls, value: Any) -> Any:
        if value is None or isinstance(value, SecretStr):
            return value
        return str(value)

    @field_validator("region")
    @classmethod
    def _lower_region(cls, value: str) -> str:
        return value.lower()

    @field_validator("log_destination")
    @classmethod
    def _check_log_destination(cls, value: str) -> str:
        if value not in ("stdout", "file", "both"):
            raise ValueError(f"Unsupported log destination: {value}")
        return value

    @property
    def endpoint_url(self) -> str:
        """Base URL of the CloudControl API for this region."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"https://api-{self.region}.dimensiondata.com"

    def retry_policy(self) -> RetryPolicy:
        """Default retry policy for operations initiated through this provider."""
        return RetryPolicy(timeout=self.retry_timeout, delay=self.retry_delay)


def load_provider_config(
    settings_file: Optional[str] = None, **overrides: Any
) -> CloudControlProviderConfig:
    """
    Load provider configuration from a settings file and the environment.

    Values come from ``settings_file`` (any format Dynaconf reads), then from
    ``CLOUDCONTROL_*`` environment variables (and ``.env``), then from
    ``overrides``.

    Args:
        settings_file: Optional settings file path
        **overrides: Explicit values that win over every other source

    Returns:
        Validated provider configuration

    Raises:
        ConfigurationError: If required settings are missing or invalid
    """
    settings = Dynaconf(
        envvar_prefix=ENVVAR_PREFIX,
        settings_files=[settings_file] if settings_file else [],
        environments=True,
        env_switcher=ENV_SWITCHER,
        load_dotenv=True,
    )

    data: dict[str, Any] = {}
    for name in CloudControlProviderConfig.model_fields:
        value = settings.get(name.upper())
        if value is not None:
            data[name] = value
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return CloudControlProviderConfig(**data)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ConfigurationError(
            f"Invalid CloudControl provider configuration - {problems}",
            details={"errors": [error["msg"] for error in e.errors()]},
        ) from e
