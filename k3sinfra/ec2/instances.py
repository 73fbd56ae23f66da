import logging
from typing import Dict, List, Optional, Sequence

from botocore.exceptions import ClientError, WaiterError

from ..errors import NotFoundDuringCleanup, ResourceCreationError, WaitTimeoutError
from ..models import ResourceKind, ResourceState, ResourceStatus
from ..utils.aws import first_match, is_not_found, waiter_config
from ..utils.tags import merge_tags, to_tag_specifications

logger = logging.getLogger(__name__)

ACTIVE_STATES = ["pending", "running"]
NON_TERMINATED_STATES = ["pending", "running", "stopping", "stopped", "shutting-down"]

def find_instance_by_name(ec2, name: str, states: Sequence[str] = ACTIVE_STATES) -> Optional[Dict]:
    """
    Look up an instance by its Name tag.

    Args:
        ec2: boto3 EC2 client
        name: Value of the Name tag
        states: Instance states to consider

    Returns:
        Optional[Dict]: The instance description if one matches
    """
    response = ec2.describe_instances(
        Filters=[
            {"Name": "tag:Name", "Values": [name]},
            {"Name": "instance-state-name", "Values": list(states)},
        ]
    )
    instances = [
        instance
        for reservation in response.get("Reservations", [])
        for instance in reservation.get("Instances", [])
    ]
    return first_match(instances, f"instance '{name}'")

def create_instance(
    ec2,
    name: str,
    instance_type: str,
    ami_id: str,
    security_group_ids: List[str],
    key_name: str,
    user_data: Optional[str] = None,
    tags: Optional[Dict[str, str]] = None,
) -> str:
    """
    Launch a single EC2 instance with the specified configuration.

    Args:
        ec2: boto3 EC2 client
        name: Name of the instance, applied as the Name tag
        instance_type: EC2 instance type (e.g., t3.small)
        ami_id: AMI ID
        security_group_ids: List of security group IDs to attach
        key_name: Key pair name for SSH access
        user_data: Optional user data script
        tags: Optional dictionary of tags

    Returns:
        str: The ID of the launched instance

    Raises:
        ResourceCreationError: If the launch fails
    """
    params = {
        "ImageId": ami_id,
        "InstanceType": instance_type,
        "KeyName": key_name,
        "SecurityGroupIds": list(security_group_ids),
        "MinCount": 1,
        "MaxCount": 1,
        "TagSpecifications": to_tag_specifications("instance", merge_tags(tags, {"Name": name})),
    }
    if user_data:
        params["UserData"] = user_data

    try:
        response = ec2.run_instances(**params)
    except ClientError as e:
        raise ResourceCreationError("instance", name, str(e)) from e

    instance_id = response["Instances"][0]["InstanceId"]
    logger.info(f"Instance launched: {instance_id}")
    return instance_id

def wait_for_state(ec2, instance_id: str, state: str, delay: int = 15, max_attempts: int = 40) -> None:
    """
    Block until the instance reaches ``state`` (running or terminated).

    Raises:
        WaitTimeoutError: If the waiter gives up
    """
    waiter = ec2.get_waiter(f"instance_{state}")
    try:
        waiter.wait(InstanceIds=[instance_id], WaiterConfig=waiter_config(delay, max_attempts))
    except WaiterError as e:
        raise WaitTimeoutError(instance_id, state, str(e)) from e

def get_instance_public_ip(ec2, instance_id: str) -> Optional[str]:
    """
    Get the public IP address of an EC2 instance.

    Args:
        ec2: boto3 EC2 client
        instance_id: ID of the instance

    Returns:
        Optional[str]: The public IP address, None if none is assigned
    """
    response = ec2.describe_instances(InstanceIds=[instance_id])
    for reservation in response.get("Reservations", []):
        for instance in reservation.get("Instances", []):
            return instance.get("PublicIpAddress")
    return None

def ensure_instance(
    ec2,
    name: str,
    instance_type: str,
    ami_id: str,
    security_group_ids: List[str],
    key_name: str,
    user_data: Optional[str] = None,
    tags: Optional[Dict[str, str]] = None,
    delay: int = 15,
    max_attempts: int = 40,
) -> ResourceState:
    """
    Reuse a pending or running instance with the given Name tag, or launch
    one. Either way, wait until it is running and resolve its public IP.

    Returns:
        ResourceState: Found or Created, identified by the instance id, with
        the public IP in its outputs

    Raises:
        ResourceCreationError: If the launch fails or no public IP is assigned
        WaitTimeoutError: If the instance does not reach the running state
    """
    existing = find_instance_by_name(ec2, name)
    if existing is not None:
        instance_id = existing["InstanceId"]
        status = ResourceStatus.FOUND
        logger.info(f"Instance {name} already exists: {instance_id}")
    else:
        logger.info("Launching EC2 instance...")
        instance_id = create_instance(
            ec2, name, instance_type, ami_id, security_group_ids, key_name, user_data, tags
        )
        status = ResourceStatus.CREATED

    logger.info("Waiting for instance to be running...")
    wait_for_state(ec2, instance_id, "running", delay, max_attempts)

    public_ip = get_instance_public_ip(ec2, instance_id)
    if not public_ip:
        raise ResourceCreationError("instance", name, f"no public IP address assigned to {instance_id}")
    logger.info(f"Instance is running with public IP: {public_ip}")

    return ResourceState(
        ResourceKind.INSTANCE, instance_id, status, outputs={"public_ip": public_ip}
    )

def terminate_instance(ec2, instance_id: str, delay: int = 15, max_attempts: int = 40) -> None:
    """
    Terminate an instance and wait until AWS reports it terminated.

    Raises:
        NotFoundDuringCleanup: If the instance does not exist or is already terminated
        WaitTimeoutError: If termination does not complete in time
    """
    try:
        response = ec2.describe_instances(InstanceIds=[instance_id])
    except ClientError as e:
        if is_not_found(e):
            raise NotFoundDuringCleanup("instance", instance_id) from e
        raise
    states = [
        instance["State"]["Name"]
        for reservation in response.get("Reservations", [])
        for instance in reservation.get("Instances", [])
    ]
    if not states or states[0] == "terminated":
        raise NotFoundDuringCleanup("instance", instance_id)

    ec2.terminate_instances(InstanceIds=[instance_id])
    logger.info(f"Waiting for instance {instance_id} to terminate...")
    wait_for_state(ec2, instance_id, "terminated", delay, max_attempts)
    logger.info(f"Terminated instance {instance_id}")
