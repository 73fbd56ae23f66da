"""
Deployment configuration.

All names, ports and sizes used by a deploy live on a single
``DeploymentConfig`` value passed to the orchestrator.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .models import IngressRule

DEFAULT_REGION = "us-east-2"

K3S_INGRESS_RULES: Tuple[IngressRule, ...] = (
    IngressRule("tcp", 22, 22, description="SSH"),
    IngressRule("tcp", 80, 80, description="HTTP"),
    IngressRule("tcp", 6443, 6443, description="Kubernetes API server"),
    IngressRule("tcp", 30000, 32767, description="NodePort services"),
    IngressRule("tcp", 9090, 9090, description="Prometheus"),
)

# Node ports configured by the bootstrap payload's Helm values
NGINX_NODE_PORT = 30080
PROMETHEUS_NODE_PORT = 30090
GRAFANA_NODE_PORT = 30300
KUBE_API_PORT = 6443


@dataclass(frozen=True)
class DeploymentConfig:
    instance_name: str = "vxg-k3s-demo"
    key_name: str = "vxg-demo-key"
    security_group_name: str = "vxg-k3s-sg"
    security_group_description: str = "Security group for K3s cluster"
    ami_id: str = "ami-0cfde0ea8edd312d4"
    instance_type: str = "t3.small"
    region: str = DEFAULT_REGION
    project: str = "VXG"
    environment: str = "Demo"
    output_dir: str = "."
    ssh_user: str = "ubuntu"
    grafana_admin_user: str = "admin"
    grafana_admin_password: str = "vxg-demo-2024"
    waiter_delay: int = 15
    waiter_max_attempts: int = 40
    ingress_rules: Tuple[IngressRule, ...] = K3S_INGRESS_RULES

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "DeploymentConfig":
        """
        Build a configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            **overrides: Explicit field values, applied last

        Returns:
            DeploymentConfig: The resolved configuration
        """
        environ = os.environ if environ is None else environ
        values = {}
        if environ.get("AWS_REGION"):
            values["region"] = environ["AWS_REGION"]
        if environ.get("VXG_OUTPUT_DIR"):
            values["output_dir"] = environ["VXG_OUTPUT_DIR"]
        values.update(overrides)
        return cls(**values)

    @property
    def key_path(self) -> str:
        return os.path.join(self.output_dir, f"{self.key_name}.pem")

    @property
    def state_file(self) -> str:
        return os.path.join(self.output_dir, "deployment-state.json")

    @property
    def summary_file(self) -> str:
        return os.path.join(self.output_dir, "deployment-info.txt")
