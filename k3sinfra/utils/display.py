"""
Human readable output for a finished deployment.
"""

import textwrap
from datetime import datetime
from typing import Dict

from ..config import (
    DeploymentConfig,
    GRAFANA_NODE_PORT,
    KUBE_API_PORT,
    NGINX_NODE_PORT,
    PROMETHEUS_NODE_PORT,
)
from ..models import DeploymentRecord

def service_urls(public_ip: str) -> Dict[str, str]:
    """
    URLs of the services exposed by the bootstrap payload.

    Args:
        public_ip: Public IP of the instance

    Returns:
        Dict[str, str]: Service name to URL
    """
    return {
        "Kubernetes API": f"https://{public_ip}:{KUBE_API_PORT}",
        "Nginx": f"http://{public_ip}:{NGINX_NODE_PORT}",
        "Prometheus": f"http://{public_ip}:{PROMETHEUS_NODE_PORT}",
        "Grafana": f"http://{public_ip}:{GRAFANA_NODE_PORT}",
    }

def ssh_command(config: DeploymentConfig, public_ip: str) -> str:
    return f"ssh -i {config.key_path} {config.ssh_user}@{public_ip}"

def render_connection_info(record: DeploymentRecord, config: DeploymentConfig) -> str:
    """
    Format SSH and service access instructions for the terminal.

    Args:
        record: Record of the deployment
        config: Configuration used for the deployment

    Returns:
        str: Multi-line instructions
    """
    ip = record.public_ip
    urls = service_urls(ip)
    ssh = ssh_command(config, ip)
    return textwrap.dedent(f"""
    ========================================
    Deployment Successful!
    ========================================

    Instance ID: {record.instance_id}
    Public IP: {ip}

    SSH Access:
      {ssh}

    Wait 5-10 minutes for k3s setup to complete, then access:
      Nginx: {urls['Nginx']}
      Prometheus: {urls['Prometheus']}
      Grafana: {urls['Grafana']} ({config.grafana_admin_user}/{config.grafana_admin_password})

    To check setup status:
      {ssh} 'sudo tail -f /var/log/cloud-init-output.log'

    To get kubeconfig:
      scp -i {config.key_path} {config.ssh_user}@{ip}:/etc/rancher/k3s/k3s.yaml ./kubeconfig
      sed -i 's/127.0.0.1/{ip}/g' ./kubeconfig
      export KUBECONFIG=./kubeconfig
    """)

def write_summary(record: DeploymentRecord, config: DeploymentConfig, path: str) -> None:
    """
    Save access URLs and credentials for the deployment to a text file.

    Args:
        record: Record of the deployment
        config: Configuration used for the deployment
        path: Destination file
    """
    urls = service_urls(record.public_ip)
    lines = [
        "VXG K3s Deployment Information",
        "==============================",
        f"Date: {datetime.now().strftime('%a %b %d %H:%M:%S %Y')}",
        f"Instance ID: {record.instance_id}",
        f"Public IP: {record.public_ip}",
        f"Region: {record.region}",
        f"Security Group: {record.security_group_id}",
        f"Key Pair: {record.key_name}",
        "",
        "Access URLs:",
        f"- SSH: {ssh_command(config, record.public_ip)}",
        f"- Nginx: {urls['Nginx']}",
        f"- Prometheus: {urls['Prometheus']}",
        f"- Grafana: {urls['Grafana']}",
        "",
        "Grafana Credentials:",
        f"- Username: {config.grafana_admin_user}",
        f"- Password: {config.grafana_admin_password}",
    ]
    with open(path, "w") as f:
        f.write("\n".join(lines) + "\n")
