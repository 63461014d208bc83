"""Tests for server and network adapter models."""

import pytest
from pydantic import ValidationError

from cloudcontrol_provider.domain.network_adapter.models import (
    NetworkAdapterSpec,
    NetworkAdapterType,
    Server,
)
from cloudcontrol_provider.domain.operation.value_objects import (
    AsyncJobHandle,
    ChangeStatus,
    RetryPolicy,
)

SERVER_PAYLOAD = {
    "id": "server-1",
    "name": "web01",
    "state": "PENDING_CHANGE",
    "started": True,
    "progress": {"action": "ADD_NIC", "requestTime": "2026-01-01T00:00:00Z"},
    "networkInfo": {
        "networkDomainId": "domain-1",
        "primaryNic": {
            "id": "nic-primary",
            "privateIpv4": "10.0.0.10",
            "vlanId": "vlan-1",
            "vlanName": "front",
            "networkAdapter": "VMXNET3",
            "state": "NORMAL",
        },
        "additionalNic": [
            {
                "id": "nic-2",
                "privateIpv4": "10.0.1.10",
                "ipv6": "2001:db8::10",
                "vlanId": "vlan-2",
                "networkAdapter": "E1000",
                "state": "PENDING_ADD",
            }
        ],
    },
}


class TestServer:
    """Test parsing of CloudControl server payloads."""

    def test_from_api(self):
        server = Server.from_api(SERVER_PAYLOAD)

        assert server.id == "server-1"
        assert server.started is True
        assert server.state == "PENDING_CHANGE"
        assert server.progress_action == "ADD_NIC"
        assert server.network.network_domain_id == "domain-1"

    def test_from_api_does_not_modify_payload(self):
        Server.from_api(SERVER_PAYLOAD)

        assert "progress" in SERVER_PAYLOAD

    def test_network_adapters_lists_primary_first(self):
        adapters = Server.from_api(SERVER_PAYLOAD).network.network_adapters

        assert [adapter.id for adapter in adapters] == ["nic-primary", "nic-2"]
        assert adapters[0].is_primary
        assert not adapters[1].is_primary

    def test_get_adapter(self):
        network = Server.from_api(SERVER_PAYLOAD).network

        adapter = network.get_adapter("nic-2")

        assert adapter.private_ipv4_address == "10.0.1.10"
        assert adapter.private_ipv6_address == "2001:db8::10"
        assert adapter.vlan_id == "vlan-2"
        assert adapter.adapter_type == "E1000"
        assert adapter.state == "PENDING_ADD"
        assert network.get_adapter("nic-missing") is None

    def test_minimal_payload(self):
        server = Server.from_api({"id": "server-2"})

        assert server.state == "NORMAL"
        assert server.started is False
        assert server.network.network_adapters == []


class TestNetworkAdapterSpec:
    """Test NetworkAdapterSpec validation."""

    def test_adapter_type_is_case_insensitive(self):
        spec = NetworkAdapterSpec(server_id="server-1", vlan_id="vlan-1", adapter_type="vmxnet3")

        assert spec.adapter_type is NetworkAdapterType.VMXNET3

    def test_invalid_adapter_type(self):
        with pytest.raises(ValidationError, match="Invalid network adapter type"):
            NetworkAdapterSpec(server_id="server-1", vlan_id="vlan-1", adapter_type="rtl8139")

    def test_blank_values_become_none(self):
        spec = NetworkAdapterSpec(
            server_id="server-1", vlan_id="", private_ipv4_address="10.0.1.5", adapter_type=""
        )

        assert spec.vlan_id is None
        assert spec.adapter_type is None
        assert spec.private_ipv4_address == "10.0.1.5"

    def test_requires_vlan_or_address(self):
        with pytest.raises(ValidationError, match="Either a VLAN id or a private IPv4 address"):
            NetworkAdapterSpec(server_id="server-1")

    def test_blank_vlan_and_address_are_rejected(self):
        with pytest.raises(ValidationError):
            NetworkAdapterSpec(server_id="server-1", vlan_id="", private_ipv4_address="")

    def test_server_id_required(self):
        with pytest.raises(ValidationError):
            NetworkAdapterSpec(server_id="", vlan_id="vlan-1")


class TestOperationValueObjects:
    """Test retry policies, job handles and change statuses."""

    def test_retry_policy_requires_positive_timeout(self):
        with pytest.raises(ValidationError):
            RetryPolicy(timeout=0)

    def test_retry_policy_rejects_negative_delay(self):
        with pytest.raises(ValidationError):
            RetryPolicy(timeout=10, delay=-1)

    def test_retry_policy_delay_is_optional(self):
        assert RetryPolicy(timeout=10).delay is None

    def test_job_handle_str(self):
        handle = AsyncJobHandle(resource_type="server", resource_id="server-1", label="Start server")

        assert str(handle) == "Start server (server 'server-1')"

    @pytest.mark.parametrize(
        "state,pending,failed,deleted",
        [
            ("PENDING_ADD", True, False, False),
            ("pending_change", True, False, False),
            ("FAILED_ADD", False, True, False),
            ("NORMAL", False, False, False),
            ("DELETED", False, False, True),
        ],
    )
    def test_change_status_predicates(self, state, pending, failed, deleted):
        status = ChangeStatus(resource_type="server", resource_id="server-1", state=state)

        assert status.is_pending is pending
        assert status.is_failed is failed
        assert status.is_deleted is deleted

    @pytest.mark.parametrize(
        "state,complete",
        [
            ("NORMAL", True),
            ("DELETED", True),
            ("PENDING_CHANGE", False),
            ("FAILED_ADD", False),
            ("REQUIRES_SUPPORT", False),
        ],
    )
    def test_change_status_is_complete(self, state, complete):
        status = ChangeStatus(resource_type="server", resource_id="server-1", state=state)

        assert status.is_complete is complete

    def test_deleted_status(self):
        status = ChangeStatus.deleted("network_adapter", "server-1/nic-2")

        assert status.is_deleted
        assert not status.is_pending
        assert status.resource_id == "server-1/nic-2"
