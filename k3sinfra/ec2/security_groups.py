import logging
from typing import Dict, Iterable, Optional

from botocore.exceptions import ClientError

from ..errors import NotFoundDuringCleanup, ResourceCreationError
from ..models import IngressRule, ResourceKind, ResourceState, ResourceStatus
from ..utils.aws import first_match, is_not_found
from ..utils.tags import to_tag_specifications

logger = logging.getLogger(__name__)

def find_security_group(ec2, name: str, vpc_id: Optional[str] = None) -> Optional[Dict]:
    """
    Look up a security group by name, optionally scoped to a VPC.

    Args:
        ec2: boto3 EC2 client
        name: Name of the security group
        vpc_id: Optional ID of the VPC

    Returns:
        Optional[Dict]: The security group description if it exists
    """
    filters = [{"Name": "group-name", "Values": [name]}]
    if vpc_id:
        filters.append({"Name": "vpc-id", "Values": [vpc_id]})
    response = ec2.describe_security_groups(Filters=filters)
    return first_match(response.get("SecurityGroups", []), f"security group '{name}'")

def ensure_security_group(
    ec2,
    name: str,
    vpc_id: str,
    description: str,
    ingress_rules: Iterable[IngressRule],
    tags: Optional[Dict[str, str]] = None,
) -> ResourceState:
    """
    Create a security group with the specified rules unless one with the
    same name already exists in the VPC.

    Rules are only authorized when the group is created. The rules of an
    existing group are left as they are, even if some were removed.

    Args:
        ec2: boto3 EC2 client
        name: Name of the security group
        vpc_id: ID of the VPC
        description: Description of the security group
        ingress_rules: Rules to authorize on a new group, in order
        tags: Optional dictionary of tags

    Returns:
        ResourceState: Found or Created, identified by the group id

    Raises:
        ResourceCreationError: If the group or one of its rules cannot be created
    """
    existing = find_security_group(ec2, name, vpc_id)
    if existing is not None:
        group_id = existing["GroupId"]
        logger.info(f"Security group {name} already exists: {group_id}")
        return ResourceState(
            ResourceKind.SECURITY_GROUP, group_id, ResourceStatus.FOUND, outputs={"group_id": group_id}
        )

    logger.info("Creating security group...")
    try:
        response = ec2.create_security_group(
            GroupName=name,
            Description=description,
            VpcId=vpc_id,
            TagSpecifications=to_tag_specifications("security-group", tags or {}),
        )
    except ClientError as e:
        raise ResourceCreationError("security group", name, str(e)) from e
    group_id = response["GroupId"]
    logger.info(f"Security group created: {group_id}")

    logger.info("Adding security group rules...")
    for rule in ingress_rules:
        try:
            ec2.authorize_security_group_ingress(
                GroupId=group_id,
                IpPermissions=[rule.to_ip_permission()],
            )
        except ClientError as e:
            raise ResourceCreationError("security group rule", f"{name} {rule}", str(e)) from e
    logger.info("Security group rules added")

    return ResourceState(
        ResourceKind.SECURITY_GROUP, group_id, ResourceStatus.CREATED, outputs={"group_id": group_id}
    )

def delete_security_group(ec2, group_id: str) -> None:
    """
    Delete a security group by id.

    Args:
        ec2: boto3 EC2 client
        group_id: ID of the security group

    Raises:
        NotFoundDuringCleanup: If the group does not exist
    """
    try:
        ec2.delete_security_group(GroupId=group_id)
    except ClientError as e:
        if is_not_found(e):
            raise NotFoundDuringCleanup("security group", group_id) from e
        raise
    logger.info(f"Deleted security group {group_id}")
