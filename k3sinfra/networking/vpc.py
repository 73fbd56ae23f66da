import logging
from typing import Dict, Optional

from botocore.exceptions import ClientError

from ..errors import ResourceCreationError
from ..models import ResourceKind, ResourceState, ResourceStatus
from ..utils.aws import first_match

logger = logging.getLogger(__name__)

def get_default_vpc(ec2) -> Optional[Dict]:
    """
    Get the default VPC of the client's region.

    Args:
        ec2: boto3 EC2 client

    Returns:
        Optional[Dict]: The VPC description, None if the region has no default VPC
    """
    response = ec2.describe_vpcs(Filters=[{"Name": "is-default", "Values": ["true"]}])
    return first_match(response.get("Vpcs", []), "default VPC")

def ensure_default_vpc(ec2, region: str) -> ResourceState:
    """
    Return the default VPC, creating it when the region has none.

    Args:
        ec2: boto3 EC2 client
        region: Region name, used for messages only

    Returns:
        ResourceState: Found or Created, identified by the VPC id

    Raises:
        ResourceCreationError: If the default VPC cannot be created
    """
    vpc = get_default_vpc(ec2)
    status = ResourceStatus.FOUND

    if vpc is None:
        logger.info(f"No default VPC found in {region}. Creating one...")
        try:
            ec2.create_default_vpc()
        except ClientError as e:
            raise ResourceCreationError("default VPC", region, str(e)) from e
        vpc = get_default_vpc(ec2)
        if vpc is None:
            raise ResourceCreationError("default VPC", region, "VPC not visible after creation")
        status = ResourceStatus.CREATED

    vpc_id = vpc["VpcId"]
    logger.info(f"Using VPC: {vpc_id}")
    return ResourceState(ResourceKind.VPC, vpc_id, status)
