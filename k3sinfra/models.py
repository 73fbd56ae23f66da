"""
Data model for resource reconciliation.

Specs describe what should exist, states describe what the reconciler found
or created, and the deployment record is the persisted union of the states
of one successful deploy.
"""

import ipaddress
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ResourceKind(str, Enum):
    KEY_PAIR = "KeyPair"
    VPC = "Vpc"
    SECURITY_GROUP = "SecurityGroup"
    INSTANCE = "Instance"


class ResourceStatus(str, Enum):
    FOUND = "Found"
    CREATED = "Created"


@dataclass(frozen=True)
class IngressRule:
    """A single inbound rule: protocol, port range and source CIDR."""
    protocol: str
    from_port: int
    to_port: int
    cidr: str = "0.0.0.0/0"
    description: Optional[str] = None

    def to_ip_permission(self) -> Dict[str, Any]:
        """Render the rule in the shape authorize_security_group_ingress expects."""
        ip_range = {"CidrIp": self.cidr}
        if self.description:
            ip_range["Description"] = self.description
        return {
            "IpProtocol": self.protocol,
            "FromPort": self.from_port,
            "ToPort": self.to_port,
            "IpRanges": [ip_range],
        }

    def __str__(self) -> str:
        ports = str(self.from_port) if self.from_port == self.to_port else f"{self.from_port}-{self.to_port}"
        return f"{self.protocol}/{ports} from {self.cidr}"


@dataclass(frozen=True)
class ResourceSpec:
    """
    Desired state of a single resource.

    ``name`` is the idempotency key: the key pair name, the security group
    name or the instance Name tag. The default VPC has no key of its own and
    uses the region as its name. Only the fields relevant to ``kind`` are read.
    """
    kind: ResourceKind
    name: str
    region: str
    vpc_id: Optional[str] = None
    description: Optional[str] = None
    ingress_rules: Tuple[IngressRule, ...] = ()
    ami_id: Optional[str] = None
    instance_type: Optional[str] = None
    key_name: Optional[str] = None
    security_group_ids: Tuple[str, ...] = ()
    user_data: Optional[str] = None
    key_path: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResourceState:
    """Outcome of reconciling a ResourceSpec."""
    kind: ResourceKind
    identifier: str
    status: ResourceStatus
    outputs: Dict[str, str] = field(default_factory=dict)

    @property
    def created(self) -> bool:
        return self.status is ResourceStatus.CREATED

    @property
    def public_ip(self) -> Optional[str]:
        return self.outputs.get("public_ip")


@dataclass
class CleanupReport:
    """What a cleanup run removed, found already gone, or failed to remove."""
    removed: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class DeploymentRecord:
    """Identifiers produced by a successful deploy, consumed by cleanup."""
    region: str
    key_name: str
    vpc_id: str
    security_group_id: str
    instance_id: str
    public_ip: str
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="seconds")
    )

    def validate(self) -> None:
        """
        Check the record before it is persisted.

        Raises:
            ValueError: If the instance id is empty or the public IP is not
                a valid IPv4 address
        """
        if not self.instance_id:
            raise ValueError("Deployment record has no instance id")
        try:
            ipaddress.IPv4Address(self.public_ip)
        except ValueError:
            raise ValueError(f"Deployment record has an invalid public IP: {self.public_ip!r}")

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentRecord":
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        missing = [
            name for name in ("region", "key_name", "vpc_id", "security_group_id", "instance_id", "public_ip")
            if name not in known
        ]
        if missing:
            raise ValueError(f"Deployment record is missing fields: {', '.join(missing)}")
        return cls(**known)
