"""Tests for ProviderState."""

from unittest.mock import Mock, patch

import pytest

from cloudcontrol_provider.domain.base.exceptions import ConfigurationError, ContractViolationError
from cloudcontrol_provider.infrastructure.resilience.async_gate import AsyncOperationGate
from cloudcontrol_provider.infrastructure.resilience.completion_waiter import CompletionWaiter
from cloudcontrol_provider.infrastructure.resilience.retry_engine import RetryEngine
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.cloudcontrol_client import (
    CloudControlClient,
)
from cloudcontrol_provider.providers.cloudcontrol.infrastructure.provider_state import (
    ProviderState,
)

PROVIDER_STATE_MODULE = "cloudcontrol_provider.providers.cloudcontrol.infrastructure.provider_state"


class TestProviderState:
    """Test ProviderState wiring."""

    def test_builds_default_collaborators(self, provider_config, mock_logger):
        state = ProviderState(provider_config, logger=mock_logger)

        assert isinstance(state.client, CloudControlClient)
        assert isinstance(state.gate, AsyncOperationGate)
        assert isinstance(state.retry(), RetryEngine)
        assert isinstance(state.waiter, CompletionWaiter)
        assert state.settings is provider_config
        assert state.logger is mock_logger

    def test_uses_injected_collaborators(self, provider_config, cloud_client, mock_logger):
        gate = AsyncOperationGate(mock_logger)
        engine = RetryEngine(mock_logger)

        state = ProviderState(
            provider_config, client=cloud_client, logger=mock_logger, gate=gate, retry_engine=engine
        )

        assert state.client is cloud_client
        assert state.gate is gate
        assert state.retry() is engine

    def test_acquire_async_operation_lock(self, provider_state):
        with provider_state.acquire_async_operation_lock("Start server 'server-1'") as token:
            assert provider_state.gate.locked()
            assert provider_state.gate.held_by == "Start server 'server-1'"
            with pytest.raises(ContractViolationError):
                provider_state.acquire_async_operation_lock("Start server 'server-2'")

        assert token.released
        assert not provider_state.gate.locked()

    def test_states_do_not_share_a_gate(self, provider_config, cloud_client, mock_logger):
        first = ProviderState(provider_config, client=cloud_client, logger=mock_logger)
        second = ProviderState(provider_config, client=cloud_client, logger=mock_logger)

        assert first.gate is not second.gate

    def test_from_environment(self, env_config):
        with patch(f"{PROVIDER_STATE_MODULE}.setup_logging") as mock_setup_logging, patch(
            f"{PROVIDER_STATE_MODULE}.LoggingAdapter"
        ) as mock_adapter:
            state = ProviderState.from_environment()

        mock_setup_logging.assert_called_once_with(log_level="INFO", log_destination="stdout")
        assert state.settings.organization_id == "org-env"
        assert isinstance(state.client, CloudControlClient)
        mock_adapter.return_value.info.assert_called_once()

    def test_from_environment_without_credentials(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with patch(f"{PROVIDER_STATE_MODULE}.setup_logging") as mock_setup_logging:
            with pytest.raises(ConfigurationError):
                ProviderState.from_environment()

        mock_setup_logging.assert_not_called()

    def test_waiter_uses_configured_poll_interval(self, provider_config, cloud_client):
        with patch(f"{PROVIDER_STATE_MODULE}.CompletionWaiter") as mock_waiter:
            ProviderState(provider_config, client=cloud_client, logger=Mock())

        mock_waiter.assert_called_once()
        assert mock_waiter.call_args.kwargs["poll_interval"] == provider_config.poll_interval
