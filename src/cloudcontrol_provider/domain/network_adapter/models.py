"""Server and network adapter models parsed from CloudControl server payloads."""

from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class NetworkAdapterType(str, Enum):
    """Virtual network adapter hardware types."""

    E1000 = "E1000"
    VMXNET3 = "VMXNET3"


class NetworkAdapter(BaseModel):
    """A network adapter (NIC) attached to a server."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    vlan_id: Optional[str] = Field(
        default=None,
        alias="vlanId",
        validation_alias=AliasChoices("vlanId", "vlan_id"),
    )
    vlan_name: Optional[str] = Field(
        default=None,
        alias="vlanName",
        validation_alias=AliasChoices("vlanName", "vlan_name"),
    )
    private_ipv4_address: Optional[str] = Field(
        default=None,
        alias="privateIpv4",
        validation_alias=AliasChoices("privateIpv4", "private_ipv4_address"),
    )
    private_ipv6_address: Optional[str] = Field(
        default=None,
        alias="ipv6",
        validation_alias=AliasChoices("ipv6", "private_ipv6_address"),
    )
    adapter_type: Optional[str] = Field(
        default=None,
        alias="networkAdapter",
        validation_alias=AliasChoices("networkAdapter", "adapter_type"),
    )
    state: Optional[str] = None
    is_primary: bool = False


class VirtualMachineNetwork(BaseModel):
    """The ``networkInfo`` block of a server."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    network_domain_id: Optional[str] = Field(
        default=None,
        alias="networkDomainId",
        validation_alias=AliasChoices("networkDomainId", "network_domain_id"),
    )
    primary_adapter: Optional[NetworkAdapter] = Field(
        default=None,
        alias="primaryNic",
        validation_alias=AliasChoices("primaryNic", "primary_adapter"),
    )
    additional_adapters: list[NetworkAdapter] = Field(
        default_factory=list,
        alias="additionalNic",
        validation_alias=AliasChoices("additionalNic", "additional_adapters"),
    )

    @property
    def network_adapters(self) -> list[NetworkAdapter]:
        """All adapters, primary first."""
        adapters: list[NetworkAdapter] = []
        if self.primary_adapter is not None:
            adapters.append(self.primary_adapter.model_copy(update={"is_primary": True}))
        adapters.extend(self.additional_adapters)
        return adapters

    def get_adapter(self, adapter_id: str) -> Optional[NetworkAdapter]:
        for adapter in self.network_adapters:
            if adapter.id == adapter_id:
                return adapter
        return None


class Server(BaseModel):
    """A CloudControl server, reduced to what the provider reconciles."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: Optional[str] = None
    state: str = "NORMAL"
    started: bool = False
    network: VirtualMachineNetwork = Field(
        default_factory=VirtualMachineNetwork,
        alias="networkInfo",
        validation_alias=AliasChoices("networkInfo", "network"),
    )
    progress_action: Optional[str] = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Server":
        """Build a server from a raw ``server/server/{id}`` response body."""
        data = dict(payload)
        progress = data.pop("progress", None)
        if isinstance(progress, dict):
            data["progress_action"] = progress.get("action")
        return cls.model_validate(data)


class NetworkAdapterSpec(BaseModel):
    """Desired state of an additional network adapter."""

    model_config = ConfigDict(frozen=True)

    server_id: str = Field(..., min_length=1)
    vlan_id: Optional[str] = None
    private_ipv4_address: Optional[str] = None
    adapter_type: Optional[NetworkAdapterType] = None

    @field_validator("adapter_type", mode="before")
    @classmethod
    def _normalise_adapter_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, str):
            try:
                return NetworkAdapterType(value.upper())
            except ValueError:
                raise ValueError(f"Invalid network adapter type '{value}'") from None
        return value

    @field_validator("vlan_id", "private_ipv4_address", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        return value or None

    @model_validator(mode="after")
    def _require_vlan_or_address(self) -> "NetworkAdapterSpec":
        if not self.vlan_id and not self.private_ipv4_address:
            raise ValueError("Either a VLAN id or a private IPv4 address is required")
        return self
