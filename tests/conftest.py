"""Global test configuration and fixtures."""

import os
import sys
from collections.abc import Generator
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src and the project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))
sys.path.insert(0, str(PROJECT_ROOT))

from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.infrastructure.resilience.async_gate import AsyncOperationGate
from cloudcontrol_provider.providers.cloudcontrol.configuration.config import (
    CloudControlProviderConfig,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.provider_state import (
    ProviderState,
)
from tests.fixtures.mock_cloud_client import MockCloudControlClient

CLOUDCONTROL_ENV_VARS = (
    "CLOUDCONTROL_USERNAME",
    "CLOUDCONTROL_PASSWORD",
    "CLOUDCONTROL_REGION",
    "CLOUDCONTROL_ORGANIZATION_ID",
    "CLOUDCONTROL_BASE_URL",
    "CLOUDCONTROL_RETRY_TIMEOUT",
    "CLOUDCONTROL_RETRY_DELAY",
    "CLOUDCONTROL_SERVER_UPDATE_TIMEOUT",
    "CLOUDCONTROL_POLL_INTERVAL",
    "CLOUDCONTROL_GATE_STALL_WARNING",
    "CLOUDCONTROL_REQUEST_TIMEOUT",
    "CLOUDCONTROL_LOG_LEVEL",
    "CLOUDCONTROL_LOG_DESTINATION",
    "CLOUDCONTROL_ENV",
)


@pytest.fixture(autouse=True)
def clean_cloudcontrol_environment(monkeypatch) -> None:
    """Make sure no CLOUDCONTROL_* variables leak into tests from the shell."""
    for name in CLOUDCONTROL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_logger() -> Mock:
    """Logging port double."""
    return Mock(spec=LoggingPort)


@pytest.fixture
def provider_config() -> CloudControlProviderConfig:
    """Provider configuration with timings small enough for unit tests."""
    return CloudControlProviderConfig(
        username="test-user",
        password="test-password",
        region="au",
        organization_id="org-1234",
        retry_timeout=2.0,
        retry_delay=0.01,
        server_update_timeout=2.0,
        poll_interval=0.01,
        gate_stall_warning=1.0,
        request_timeout=5.0,
    )


@pytest.fixture
def cloud_client() -> MockCloudControlClient:
    """In-memory CloudControl client."""
    return MockCloudControlClient()


@pytest.fixture
def provider_state(
    provider_config: CloudControlProviderConfig,
    cloud_client: MockCloudControlClient,
    mock_logger: Mock,
) -> Generator[ProviderState, None, None]:
    """Provider state wired to the in-memory client."""
    gate = AsyncOperationGate(mock_logger, stall_warning_seconds=provider_config.gate_stall_warning)
    state = ProviderState(provider_config, client=cloud_client, logger=mock_logger, gate=gate)
    yield state
    assert not state.gate.locked(), "async operation lock leaked by the test"


@pytest.fixture
def env_config(monkeypatch) -> dict[str, str]:
    """Minimal CLOUDCONTROL_* environment for configuration loading."""
    values = {
        "CLOUDCONTROL_USERNAME": "env-user",
        "CLOUDCONTROL_PASSWORD": "env-password",
        "CLOUDCONTROL_REGION": "EU",
        "CLOUDCONTROL_ORGANIZATION_ID": "org-env",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    monkeypatch.chdir(os.path.dirname(__file__))
    return values
