"""CloudControl REST API client."""

from typing import Any, Optional

import requests
from requests.auth import HTTPBasicAuth

from cloudcontrol_provider._package import USER_AGENT
from cloudcontrol_provider.domain.base.ports.cloud_client_port import (
    RESOURCE_TYPE_NETWORK_ADAPTER,
    RESOURCE_TYPE_SERVER,
    CloudControlClientPort,
)
from cloudcontrol_provider.domain.base.ports.logging_port import LoggingPort
from cloudcontrol_provider.domain.network_adapter.models import Server
from cloudcontrol_provider.domain.operation.value_objects import ChangeStatus
from cloudcontrol_provider.providers.cloudcontrol.configuration.config import (
    CloudControlProviderConfig,
)
from cloudcontrol_provider.providers.cloudcontrol.exceptions.cloudcontrol_exceptions import (
    CloudControlAPIError,
    CloudControlConnectionError,
    CloudControlError,
    is_resource_not_found_error,
)

API_VERSION = "2.4"
SUCCESS_RESPONSE_CODES = {"OK", "IN_PROGRESS"}


def split_network_adapter_id(composite_id: str) -> tuple[str, str]:
    """Split a ``"{server_id}/{adapter_id}"`` composite id."""
    server_id, separator, adapter_id = composite_id.partition("/")
    if not separator or not server_id or not adapter_id:
        raise ValueError(f"Invalid network adapter id '{composite_id}' (expected 'server/adapter')")
    return server_id, adapter_id


class CloudControlClient(CloudControlClientPort):
    """CloudControl compute API client over HTTPS with basic authentication."""

    def __init__(
        self,
        config: CloudControlProviderConfig,
        logger: LoggingPort,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Provider configuration (credentials, region, timeouts)
            logger: Logger for request diagnostics
            session: Optional pre-built requests session
        """
        self._config = config
        self._logger = logger
        self._session = session
        self._api_root = (
            f"{config.endpoint_url}/caas/{API_VERSION}/{config.organization_id}"
        )
        self._logger.debug(
            "CloudControl client initialized for region %s (%s)", config.region, self._api_root
        )

    @property
    def session(self) -> requests.Session:
        """Lazy initialization of the HTTP session."""
        if self._session is None:
            self._logger.debug("Initializing CloudControl HTTP session on first use")
            session = requests.Session()
            session.auth = HTTPBasicAuth(
                self._config.username, self._config.password.get_secret_value()
            )
            session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})
            self._session = session
        return self._session

    # Servers

    def get_server(self, server_id: str) -> Optional[Server]:
        body = self._get_server_body(server_id)
        if body is None:
            return None
        return Server.from_api(body)

    def shutdown_server(self, server_id: str) -> None:
        self._post("server/shutdownServer", {"id": server_id})

    def start_server(self, server_id: str) -> None:
        self._post("server/startServer", {"id": server_id})

    # Network adapters

    def add_nic_to_server(
        self,
        server_id: str,
        ipv4_address: Optional[str],
        vlan_id: Optional[str],
        adapter_type: Optional[str] = None,
    ) -> str:
        nic: dict[str, Any] = {}
        if ipv4_address:
            nic["privateIpv4"] = ipv4_address
        elif vlan_id:
            nic["vlanId"] = vlan_id
        else:
            raise ValueError("Either an IPv4 address or a VLAN id is required to add a network adapter")
        if adapter_type:
            nic["networkAdapter"] = adapter_type

        body = self._post("server/addNic", {"serverId": server_id, "nic": nic})
        adapter_id = self._get_info_value(body, "nicId")
        if not adapter_id:
            raise CloudControlError(
                f"CloudControl did not return the id of the network adapter added to server '{server_id}'"
            )
        return adapter_id

    def remove_nic_from_server(self, network_adapter_id: str) -> None:
        self._post("server/removeNic", {"id": network_adapter_id})

    def notify_server_ip_address_change(
        self,
        network_adapter_id: str,
        ipv4_address: Optional[str],
        ipv6_address: Optional[str],
    ) -> None:
        payload: dict[str, Any] = {"nicId": network_adapter_id}
        if ipv4_address:
            payload["privateIpv4"] = ipv4_address
        if ipv6_address:
            payload["ipv6"] = ipv6_address
        self._post("server/notifyNicIpChange", payload)

    # Pending changes

    def get_pending_change(self, resource_type: str, resource_id: str) -> ChangeStatus:
        if resource_type == RESOURCE_TYPE_SERVER:
            body = self._get_server_body(resource_id)
            if body is None:
                return ChangeStatus.deleted(resource_type, resource_id)
            progress = body.get("progress") or {}
            return ChangeStatus(
                resource_type=resource_type,
                resource_id=resource_id,
                state=body.get("state") or "NORMAL",
                action=progress.get("action"),
                message=progress.get("failureReason"),
                resource=body,
            )

        if resource_type == RESOURCE_TYPE_NETWORK_ADAPTER:
            server_id, adapter_id = split_network_adapter_id(resource_id)
            server = self.get_server(server_id)
            adapter = server.network.get_adapter(adapter_id) if server else None
            if server is None or adapter is None:
                return ChangeStatus.deleted(resource_type, resource_id)
            return ChangeStatus(
                resource_type=resource_type,
                resource_id=resource_id,
                state=adapter.state or server.state,
                action=server.progress_action,
                resource=adapter.model_dump(),
            )

        raise ValueError(f"Unsupported resource type '{resource_type}'")

    # Transport

    def _get_server_body(self, server_id: str) -> Optional[dict[str, Any]]:
        try:
            return self._request("GET", f"server/server/{server_id}")
        except CloudControlAPIError as e:
            if is_resource_not_found_error(e):
                self._logger.debug("Server '%s' not found", server_id)
                return None
            raise

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", path, payload)

    def _request(
        self, method: str, path: str, payload: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        url = f"{self._api_root}/{path}"
        self._logger.debug("CloudControl %s %s", method, path)
        try:
            response = self.session.request(
                method, url, json=payload, timeout=self._config.request_timeout
            )
        except requests.RequestException as e:
            raise CloudControlConnectionError(f"CloudControl request {method} {path} failed: {e}") from e

        body = self._decode(response)
        response_code = body.get("responseCode")
        if response.status_code >= 400 or (
            response_code is not None and response_code not in SUCCESS_RESPONSE_CODES
        ):
            if not body:
                raise CloudControlAPIError(
                    f"HTTP_{response.status_code}",
                    response.text[:200] or response.reason or "empty response",
                    status_code=response.status_code,
                    operation=path,
                )
            error = CloudControlAPIError.from_response_body(body, response.status_code)
            self._logger.debug(
                "CloudControl %s %s returned %s: %s", method, path, error.response_code, body.get("message")
            )
            raise error
        return body

    @staticmethod
    def _decode(response: requests.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    @staticmethod
    def _get_info_value(body: dict[str, Any], name: str) -> Optional[str]:
        for item in body.get("info") or []:
            if item.get("name") == name:
                return item.get("value")
        return None
