"""Tests for the completion waiter."""

import threading
from unittest.mock import Mock

import pytest

from cloudcontrol_provider.domain.base.ports.cloud_client_port import CloudControlClientPort
from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.domain.operation.value_objects import AsyncJobHandle, ChangeStatus
from cloudcontrol_provider.infrastructure.resilience.completion_waiter import CompletionWaiter
from cloudcontrol_provider.infrastructure.resilience.exceptions import (
    ChangeFailedError,
    OperationCancelledError,
    OperationTimeoutError,
)


def status(state, message=None):
    return ChangeStatus(
        resource_type="server", resource_id="server-1", state=state, message=message
    )


class TestCompletionWaiter:
    """Test CompletionWaiter polling."""

    def setup_method(self):
        self.client = Mock(spec=CloudControlClientPort)
        self.logger = Mock(spec=LoggingPort)
        self.waiter = CompletionWaiter(self.client, self.logger, poll_interval=0.001)

    def test_returns_when_nothing_pending(self):
        self.client.get_pending_change.return_value = status("NORMAL")

        result = self.waiter.wait_for_change("server", "server-1", "Start server", timeout=1.0)

        assert result.state == "NORMAL"
        self.client.get_pending_change.assert_called_once_with("server", "server-1")

    def test_polls_while_pending(self):
        self.client.get_pending_change.side_effect = [
            status("PENDING_CHANGE"),
            status("PENDING_ADD"),
            status("NORMAL"),
        ]

        result = self.waiter.wait_for_change("server", "server-1", "Add network adapter", 1.0)

        assert result.state == "NORMAL"
        assert self.client.get_pending_change.call_count == 3

    def test_deleted_counts_as_complete(self):
        self.client.get_pending_change.side_effect = [status("PENDING_DELETE"), status("DELETED")]

        result = self.waiter.wait_for_change("server", "server-1", "Remove network adapter", 1.0)

        assert result.is_deleted

    def test_failed_state_raises(self):
        self.client.get_pending_change.side_effect = [
            status("PENDING_ADD"),
            status("FAILED_ADD", message="VLAN is full"),
        ]

        with pytest.raises(ChangeFailedError) as exc_info:
            self.waiter.wait_for_change("server", "server-1", "Add network adapter", 1.0)

        assert exc_info.value.state == "FAILED_ADD"
        assert exc_info.value.resource_id == "server-1"
        assert "VLAN is full" in str(exc_info.value)
        self.logger.error.assert_called_once()

    @pytest.mark.parametrize("state", ["REQUIRES_SUPPORT", "STOPPED", "UNKNOWN"])
    def test_unexpected_settled_state_raises(self, state):
        self.client.get_pending_change.side_effect = [status("PENDING_CHANGE"), status(state)]

        with pytest.raises(ChangeFailedError) as exc_info:
            self.waiter.wait_for_change("server", "server-1", "Start server", 1.0)

        assert exc_info.value.state == state
        assert self.client.get_pending_change.call_count == 2

    def test_times_out_while_pending(self):
        self.client.get_pending_change.return_value = status("PENDING_CHANGE")
        waiter = CompletionWaiter(self.client, self.logger, poll_interval=0.01)

        with pytest.raises(OperationTimeoutError) as exc_info:
            waiter.wait_for_change("server", "server-1", "Shut down server", timeout=0.05)

        assert exc_info.value.elapsed >= 0.05
        assert "Shut down server" in exc_info.value.description

    def test_cancel_event_aborts_polling(self):
        cancel = threading.Event()

        def pending(resource_type, resource_id):
            cancel.set()
            return status("PENDING_CHANGE")

        self.client.get_pending_change.side_effect = pending

        with pytest.raises(OperationCancelledError):
            self.waiter.wait_for_change(
                "server", "server-1", "Start server", 10.0, cancel_event=cancel
            )

        self.client.get_pending_change.assert_called_once()

    def test_client_errors_propagate(self):
        self.client.get_pending_change.side_effect = ConnectionError("down")

        with pytest.raises(ConnectionError):
            self.waiter.wait_for_change("server", "server-1", "Start server", 1.0)

    def test_wait_for_job(self):
        self.client.get_pending_change.return_value = ChangeStatus(
            resource_type="network_adapter", resource_id="server-1/nic-2", state="NORMAL"
        )
        handle = AsyncJobHandle(
            resource_type="network_adapter", resource_id="server-1/nic-2", label="Update adapter"
        )

        self.waiter.wait_for_job(handle, timeout=1.0)

        self.client.get_pending_change.assert_called_once_with("network_adapter", "server-1/nic-2")

    def test_concurrent_waits_are_independent(self):
        client = Mock(spec=CloudControlClientPort)
        client.get_pending_change.side_effect = lambda resource_type, resource_id: ChangeStatus(
            resource_type=resource_type, resource_id=resource_id, state="NORMAL"
        )
        waiter = CompletionWaiter(client, self.logger, poll_interval=0.001)
        results = {}

        def wait(server_id):
            results[server_id] = waiter.wait_for_change("server", server_id, "Start server", 1.0)

        threads = [threading.Thread(target=wait, args=(f"server-{i}",)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(2.0)

        assert {result.resource_id for result in results.values()} == set(results)
        assert len(results) == 4

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_rejects_non_positive_timeout(self, timeout):
        with pytest.raises(ValueError):
            self.waiter.wait_for_change("server", "server-1", "Start server", timeout)

    def test_rejects_non_positive_poll_interval(self):
        with pytest.raises(ValueError):
            CompletionWaiter(self.client, self.logger, poll_interval=0)
