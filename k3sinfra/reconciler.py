"""
Resource Reconciler

Brings a single resource to its desired state: look it up by its natural
name, reuse it when present, create it otherwise. Resources are never deleted
and recreated here.
"""

import logging
from typing import Callable, Dict

from .ec2.instances import ensure_instance
from .ec2.keypairs import ensure_keypair
from .ec2.security_groups import ensure_security_group
from .models import ResourceKind, ResourceSpec, ResourceState
from .networking.vpc import ensure_default_vpc

logger = logging.getLogger(__name__)


class Reconciler:
    """
    Reconciles ResourceSpecs against EC2.
    """

    def __init__(self, ec2, waiter_delay: int = 15, waiter_max_attempts: int = 40):
        """
        Initialize the reconciler.

        Args:
            ec2: boto3 EC2 client for the target region
            waiter_delay: Seconds between instance state polls
            waiter_max_attempts: Polls before a wait is considered timed out
        """
        self.ec2 = ec2
        self.waiter_delay = waiter_delay
        self.waiter_max_attempts = waiter_max_attempts
        self._handlers: Dict[ResourceKind, Callable[[ResourceSpec], ResourceState]] = {
            ResourceKind.KEY_PAIR: self._reconcile_key_pair,
            ResourceKind.VPC: self._reconcile_vpc,
            ResourceKind.SECURITY_GROUP: self._reconcile_security_group,
            ResourceKind.INSTANCE: self._reconcile_instance,
        }

    def reconcile(self, spec: ResourceSpec) -> ResourceState:
        """
        Ensure the resource described by ``spec`` exists.

        Args:
            spec: Desired resource

        Returns:
            ResourceState: Found if it already existed, Created otherwise
        """
        handler = self._handlers.get(spec.kind)
        if handler is None:
            raise ValueError(f"Unsupported resource kind: {spec.kind}")
        state = handler(spec)
        logger.debug(f"{spec.kind.value} '{spec.name}': {state.status.value} ({state.identifier})")
        return state

    def _reconcile_key_pair(self, spec: ResourceSpec) -> ResourceState:
        return ensure_keypair(self.ec2, spec.name, save_path=spec.key_path, tags=spec.tags)

    def _reconcile_vpc(self, spec: ResourceSpec) -> ResourceState:
        return ensure_default_vpc(self.ec2, spec.region)

    def _reconcile_security_group(self, spec: ResourceSpec) -> ResourceState:
        if not spec.vpc_id:
            raise ValueError(f"Security group '{spec.name}' needs a VPC id")
        return ensure_security_group(
            self.ec2,
            spec.name,
            spec.vpc_id,
            spec.description or spec.name,
            spec.ingress_rules,
            tags=spec.tags,
        )

    def _reconcile_instance(self, spec: ResourceSpec) -> ResourceState:
        if not spec.key_name or not spec.security_group_ids:
            raise ValueError(f"Instance '{spec.name}' needs a key pair and a security group")
        return ensure_instance(
            self.ec2,
            spec.name,
            spec.instance_type,
            spec.ami_id,
            list(spec.security_group_ids),
            spec.key_name,
            user_data=spec.user_data,
            tags=spec.tags,
            delay=self.waiter_delay,
            max_attempts=self.waiter_max_attempts,
        )
