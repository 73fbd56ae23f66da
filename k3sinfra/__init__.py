"""
Idempotent provisioning of a single-node k3s cluster on EC2.
"""

from .config import DeploymentConfig
from .models import (
    CleanupReport,
    DeploymentRecord,
    IngressRule,
    ResourceKind,
    ResourceSpec,
    ResourceState,
    ResourceStatus,
)
from .orchestrator import Orchestrator
from .reconciler import Reconciler

__version__ = "0.1.0"

__all__ = [
    'CleanupReport',
    'DeploymentConfig',
    'DeploymentRecord',
    'IngressRule',
    'Orchestrator',
    'Reconciler',
    'ResourceKind',
    'ResourceSpec',
    'ResourceState',
    'ResourceStatus',
]
