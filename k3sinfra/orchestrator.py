"""
Deployment Orchestrator

Runs the reconciliation steps of a k3s deployment in dependency order:
key pair, default VPC, security group, instance. On success the resulting
identifiers are persisted so ``cleanup`` can remove them later.
"""

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .bootstrap import load_user_data
from .config import DeploymentConfig
from .ec2.instances import NON_TERMINATED_STATES, find_instance_by_name, terminate_instance
from .ec2.keypairs import delete_keypair
from .ec2.security_groups import delete_security_group, find_security_group
from .errors import NotFoundDuringCleanup, PreconditionError, WaitTimeoutError
from .models import (
    CleanupReport,
    DeploymentRecord,
    ResourceKind,
    ResourceSpec,
    ResourceState,
)
from .reconciler import Reconciler
from .state import load_record, remove_record, save_record
from .utils.display import write_summary
from .utils.tags import get_default_tags

logger = logging.getLogger(__name__)

def build_specs(config: DeploymentConfig, user_data: str) -> Tuple[ResourceSpec, ...]:
    """
    Describe the four resources of a deployment.

    The VPC id, key name and security group id are not known up front and
    are bound by the orchestrator as the earlier steps complete.

    Args:
        config: Deployment configuration
        user_data: Bootstrap script for the instance

    Returns:
        Tuple[ResourceSpec, ...]: Key pair, VPC, security group and instance specs
    """
    tags = get_default_tags(config.project, config.environment)
    key_pair = ResourceSpec(
        kind=ResourceKind.KEY_PAIR,
        name=config.key_name,
        region=config.region,
        key_path=config.key_path,
        tags=tags,
    )
    vpc = ResourceSpec(kind=ResourceKind.VPC, name=config.region, region=config.region)
    security_group = ResourceSpec(
        kind=ResourceKind.SECURITY_GROUP,
        name=config.security_group_name,
        region=config.region,
        description=config.security_group_description,
        ingress_rules=tuple(config.ingress_rules),
        tags=tags,
    )
    instance = ResourceSpec(
        kind=ResourceKind.INSTANCE,
        name=config.instance_name,
        region=config.region,
        ami_id=config.ami_id,
        instance_type=config.instance_type,
        user_data=user_data,
        tags=tags,
    )
    return key_pair, vpc, security_group, instance


class Orchestrator:
    """
    Deploys and tears down the k3s demo stack.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        ec2=None,
        sts=None,
        session: Optional[boto3.session.Session] = None,
        user_data: Optional[str] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Deployment configuration
            ec2: Optional EC2 client (built from the session if omitted)
            sts: Optional STS client (built from the session if omitted)
            session: Optional boto3 session for config.region
            user_data: Optional bootstrap script (defaults to the packaged one)
        """
        self.config = config
        self.session = session
        if ec2 is None or sts is None:
            self.session = session or boto3.session.Session(region_name=config.region)
        self.ec2 = ec2 if ec2 is not None else self.session.client("ec2")
        self.sts = sts if sts is not None else self.session.client("sts")
        self.reconciler = Reconciler(self.ec2, config.waiter_delay, config.waiter_max_attempts)
        self.specs = build_specs(config, user_data if user_data is not None else load_user_data())
        self.states: List[ResourceState] = []

    def preflight(self) -> None:
        """
        Check that AWS credentials resolve and are accepted.

        Raises:
            PreconditionError: If credentials are missing or rejected
        """
        if self.session is not None and self.session.get_credentials() is None:
            raise PreconditionError("AWS credentials are not configured. Please configure them first.")
        try:
            identity = self.sts.get_caller_identity()
        except (ClientError, BotoCoreError) as e:
            raise PreconditionError(f"AWS credential validation failed: {e}") from e
        logger.info(f"AWS credentials configured (account {identity.get('Account', 'unknown')})")

    def deploy(self) -> DeploymentRecord:
        """
        Reconcile every resource and persist the deployment record.

        Any failure propagates immediately. Resources created before the
        failure are left in place; rerunning deploy reuses them.

        Returns:
            DeploymentRecord: Identifiers of the deployment
        """
        logger.info(f"Starting AWS EC2 K3s deployment in {self.config.region}")
        self.preflight()
        self.states = []

        key_spec, vpc_spec, sg_spec, instance_spec = self.specs
        key_pair = self._reconcile(key_spec)
        vpc = self._reconcile(vpc_spec)
        security_group = self._reconcile(replace(sg_spec, vpc_id=vpc.identifier))
        instance = self._reconcile(
            replace(
                instance_spec,
                key_name=key_pair.identifier,
                security_group_ids=(security_group.identifier,),
            )
        )

        record = DeploymentRecord(
            region=self.config.region,
            key_name=key_pair.identifier,
            vpc_id=vpc.identifier,
            security_group_id=security_group.identifier,
            instance_id=instance.identifier,
            public_ip=instance.public_ip or "",
        )
        save_record(record, self.config.state_file)
        write_summary(record, self.config, self.config.summary_file)
        logger.info(f"Deployment information saved to {self.config.summary_file}")
        return record

    def _reconcile(self, spec: ResourceSpec) -> ResourceState:
        state = self.reconciler.reconcile(spec)
        self.states.append(state)
        return state

    def cleanup(self) -> CleanupReport:
        """
        Remove the instance, security group and key pair of a deployment.

        Identifiers come from the deployment record, or are looked up by name
        when there is none. A record written for another region is cleaned up
        in that region. Every deletion is attempted even if an earlier one
        failed; the local private key file is left in place.

        Returns:
            CleanupReport: Removed, missing and failed resources
        """
        logger.info("Cleaning up resources...")
        report = CleanupReport()
        record = load_record(self.config.state_file)
        if record is None:
            logger.info("No deployment record found, looking resources up by name")

        ec2 = self.ec2
        if record is not None and record.region != self.config.region:
            logger.warning(
                f"Deployment record is for {record.region}, not {self.config.region}; "
                f"cleaning up in {record.region}"
            )
            try:
                ec2 = self._regional_ec2(record.region)
            except BotoCoreError as e:
                logger.warning(f"Cannot reach EC2 in {record.region}: {e}")
                report.failed.append(f"deployment in {record.region}")
                return report

        instance_id = record.instance_id if record else self._lookup(
            report, f"instance {self.config.instance_name}", self._find_instance_id
        )
        if instance_id:
            self._delete(
                report,
                f"instance {instance_id}",
                lambda: terminate_instance(
                    ec2, instance_id, self.config.waiter_delay, self.config.waiter_max_attempts
                ),
            )
        elif record is None:
            report.missing.append(f"instance {self.config.instance_name}")

        group_id = record.security_group_id if record else self._lookup(
            report, f"security group {self.config.security_group_name}", self._find_group_id
        )
        if group_id:
            self._delete(report, f"security group {group_id}", lambda: delete_security_group(ec2, group_id))
        elif record is None:
            report.missing.append(f"security group {self.config.security_group_name}")

        key_name = record.key_name if record else self.config.key_name
        self._delete(report, f"key pair {key_name}", lambda: delete_keypair(ec2, key_name))

        if report.ok:
            remove_record(self.config.state_file)
        else:
            logger.warning(f"Could not remove: {', '.join(report.failed)}")
        logger.info("Cleanup completed")
        return report

    def _regional_ec2(self, region: str):
        """Build an EC2 client for ``region`` from the default credential chain."""
        return boto3.session.Session(region_name=region).client("ec2")

    def _find_instance_id(self) -> Optional[str]:
        instance = find_instance_by_name(self.ec2, self.config.instance_name, NON_TERMINATED_STATES)
        return instance["InstanceId"] if instance else None

    def _find_group_id(self) -> Optional[str]:
        group = find_security_group(self.ec2, self.config.security_group_name)
        return group["GroupId"] if group else None

    def _lookup(self, report: CleanupReport, label: str, lookup: Callable[[], Optional[str]]) -> Optional[str]:
        try:
            return lookup()
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Failed to look up {label}: {e}")
            report.failed.append(label)
            return None

    def _delete(self, report: CleanupReport, label: str, action: Callable[[], None]) -> None:
        try:
            action()
        except NotFoundDuringCleanup as e:
            logger.info(str(e))
            report.missing.append(label)
        except WaitTimeoutError as e:
            logger.warning(str(e))
            report.failed.append(label)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Failed to delete {label}: {e}")
            report.failed.append(label)
        else:
            report.removed.append(label)
