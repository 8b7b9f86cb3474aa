"""Cluster creation request models and validation rules."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ks_common.api import (
    ClusterValidationError,
    MalformedConfigurationError,
    ValidationReason,
)
from ks_provisioner.api import NodeRole, ProviderName

CREATE_CLUSTER_KIND = "CreateCluster"
PARSE_ERROR_MESSAGE = "error while parsing cluster configuration"

_ROLE_ALIASES = {
    "haproxy": NodeRole.LOADBALANCER.value,
    "lb": NodeRole.LOADBALANCER.value,
    "control-plane": NodeRole.MASTER.value,
    "controlplane": NodeRole.MASTER.value,
}
_GROUPED_INVENTORY_KEYS = (
    (("master", "masters"), NodeRole.MASTER),
    (("worker", "workers"), NodeRole.WORKER),
    (("haproxy", "loadbalancer"), NodeRole.LOADBALANCER),
)


def _none_to_empty(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return value


class NetworkingSpec(BaseModel):
    """CNI plugin selection and cluster network ranges."""

    plugin: str = Field(default="", description="CNI plugin name; blank selects the default")
    pod_cidr: str = Field(default="", alias="podCidr", description="Pod network CIDR")
    service_cidr: str = Field(default="", alias="serviceCidr", description="Service network CIDR")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("plugin", "pod_cidr", "service_cidr", mode="before")
    @classmethod
    def _blank_when_missing(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @property
    def has_cidr_pair_mismatch(self) -> bool:
        return bool(self.pod_cidr) != bool(self.service_cidr)


class MultipassSpec(BaseModel):
    """VM counts and sizing for a Multipass cluster."""

    masters: int = Field(
        default=1,
        ge=1,
        validation_alias=AliasChoices("masters", "masterCount"),
        description="Number of control-plane VMs",
    )
    workers: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("workers", "workerCount"),
        description="Number of worker VMs",
    )
    image: str = Field(default="22.04", description="Multipass image to launch")
    cpus: int = Field(default=2, gt=0, description="vCPUs per VM")
    memory: str = Field(default="2G", description="Memory per VM")
    disk: str = Field(default="10G", description="Disk size per VM")

    model_config = ConfigDict(extra="ignore", frozen=True)


class BaremetalHost(BaseModel):
    """One reachable host of a baremetal inventory."""

    name: str = Field(default="", description="Host name; defaults to the address")
    address: str = Field(
        min_length=1,
        validation_alias=AliasChoices("address", "ip"),
        description="IP address or hostname",
    )
    user: str = Field(
        default="root",
        validation_alias=AliasChoices("user", "username"),
        description="SSH user",
    )
    port: int = Field(default=22, gt=0, description="SSH port")
    private_key: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("privateKey", "private_key", "privateKeyLocation"),
        description="SSH private key used to reach the host",
    )
    role: NodeRole = Field(description="master, worker or loadbalancer")

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            return _ROLE_ALIASES.get(lowered, lowered)
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, values: Any) -> Any:
        if isinstance(values, dict) and not values.get("name"):
            address = values.get("address", values.get("ip"))
            if isinstance(address, str):
                values = {**values, "name": address}
        return values


class BaremetalSpec(BaseModel):
    """Explicit host inventory for a baremetal cluster."""

    hosts: List[BaremetalHost] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize_grouped_inventory(cls, values: Any) -> Any:
        """Accept the ``master``/``worker``/``haproxy`` grouped layout."""
        if not isinstance(values, dict) or "hosts" in values:
            return values
        if not any(key in values for keys, _ in _GROUPED_INVENTORY_KEYS for key in keys):
            return values

        hosts: List[Dict[str, Any]] = []
        for keys, role in _GROUPED_INVENTORY_KEYS:
            for key in keys:
                entries = values.get(key) or []
                if isinstance(entries, dict):
                    entries = [entries]
                if not isinstance(entries, list):
                    raise ValueError(f"baremetal.{key} must be a list of hosts")
                for entry in entries:
                    if not isinstance(entry, dict):
                        raise ValueError(f"baremetal.{key} entries must be mappings")
                    hosts.append({**entry, "role": role.value})
        return {"hosts": hosts}


class ClusterRequest(BaseModel):
    """Parsed cluster creation document."""

    kind: str = Field(default="", description="Operation discriminant")
    provider: ProviderName = Field(description="Host provider")
    cluster_name: str = Field(default="", alias="clusterName", description="Cluster identifier")
    multipass: Optional[MultipassSpec] = Field(default=None, description="Multipass sizing")
    baremetal: Optional[BaremetalSpec] = Field(default=None, description="Baremetal inventory")
    networking: Optional[NetworkingSpec] = Field(default=None, description="Networking settings")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("kind", "cluster_name", mode="before")
    @classmethod
    def _blank_when_missing(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @property
    def provider_spec(self) -> Union[MultipassSpec, BaremetalSpec, None]:
        """The spec selected by ``provider``; the other one is never consulted."""
        if self.provider is ProviderName.MULTIPASS:
            return self.multipass
        return self.baremetal

    def check(self, expected_kind: str = CREATE_CLUSTER_KIND) -> None:
        """Validate the request, raising on the first failing rule."""
        if not self.cluster_name:
            raise ClusterValidationError(
                ValidationReason.CLUSTER_NAME_EMPTY, "cluster name is empty"
            )
        if self.kind != expected_kind:
            raise ClusterValidationError(
                ValidationReason.KIND_MISMATCH,
                f"kind must be {expected_kind}",
                context={"kind": self.kind, "expected": expected_kind},
            )
        if self.provider is ProviderName.MULTIPASS and self.multipass is None:
            raise ClusterValidationError(
                ValidationReason.MULTIPASS_SPEC_MISSING,
                "multipass provider requires a multipass section",
            )
        if self.provider is ProviderName.BAREMETAL and self.baremetal is None:
            raise ClusterValidationError(
                ValidationReason.BAREMETAL_SPEC_MISSING,
                "baremetal provider requires a baremetal section",
            )
        if self.networking is None:
            raise ClusterValidationError(
                ValidationReason.NETWORKING_MISSING, "networking section is missing"
            )
        if self.networking.has_cidr_pair_mismatch:
            raise ClusterValidationError(
                ValidationReason.CIDR_PAIRING,
                "podCidr and serviceCidr must be set together",
                context={
                    "pod_cidr": self.networking.pod_cidr,
                    "service_cidr": self.networking.service_cidr,
                },
            )


def load_document(raw: Union[bytes, str]) -> Dict[str, Any]:
    """Load a YAML/JSON document that must be a mapping."""
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise MalformedConfigurationError(PARSE_ERROR_MESSAGE, cause=exc) from exc
    if not isinstance(data, dict):
        raise MalformedConfigurationError(PARSE_ERROR_MESSAGE)
    return data


def parse_cluster_request(raw: Union[bytes, str]) -> ClusterRequest:
    """Deserialize raw configuration into a ClusterRequest."""
    data = load_document(raw)
    try:
        return ClusterRequest.model_validate(data)
    except ValidationError as exc:
        raise MalformedConfigurationError(PARSE_ERROR_MESSAGE, cause=exc) from exc
