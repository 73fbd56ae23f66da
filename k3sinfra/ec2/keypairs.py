import logging
import os
import stat
from typing import Dict, Optional

from botocore.exceptions import ClientError

from ..errors import NotFoundDuringCleanup, ResourceCreationError
from ..models import ResourceKind, ResourceState, ResourceStatus
from ..utils.aws import error_code, first_match
from ..utils.tags import to_tag_specifications

logger = logging.getLogger(__name__)

def ensure_keypair(
    ec2,
    name: str,
    save_path: Optional[str] = None,
    tags: Optional[Dict[str, str]] = None,
) -> ResourceState:
    """
    Ensures that a key pair exists with the given name.
    If the key pair doesn't exist, it creates it and saves the private key.

    Args:
        ec2: boto3 EC2 client
        name: Name of the key pair
        save_path: Path to save the generated private key.
                  If None, defaults to ./{name}.pem
        tags: Optional tags to apply to the key pair

    Returns:
        ResourceState: Found or Created, identified by the key name

    Raises:
        ResourceCreationError: If AWS refuses to create the key pair, or the
            private key cannot be written to save_path
    """
    if get_keypair(ec2, name) is not None:
        logger.info(f"Key pair '{name}' already exists. Using existing key pair.")
        return ResourceState(ResourceKind.KEY_PAIR, name, ResourceStatus.FOUND)

    save_path = save_path or f"{name}.pem"
    try:
        prepare_key_path(save_path)
    except OSError as e:
        raise ResourceCreationError("key pair", name, f"cannot write private key to {save_path}: {e}") from e

    logger.info("Creating SSH key pair...")
    try:
        response = ec2.create_key_pair(
            KeyName=name,
            TagSpecifications=to_tag_specifications("key-pair", tags or {}),
        )
    except ClientError as e:
        raise ResourceCreationError("key pair", name, str(e)) from e

    try:
        save_private_key(response["KeyMaterial"], save_path)
    except OSError as e:
        # The material cannot be fetched again, so drop the unusable key pair
        logger.warning(f"Could not save private key to {save_path}, deleting key pair '{name}'")
        try:
            ec2.delete_key_pair(KeyName=name)
        except ClientError as delete_error:
            logger.warning(f"Failed to delete key pair '{name}': {delete_error}")
        raise ResourceCreationError("key pair", name, f"cannot write private key to {save_path}: {e}") from e
    logger.info(f"Created key pair '{name}' and saved private key to '{save_path}'")

    return ResourceState(
        ResourceKind.KEY_PAIR,
        name,
        ResourceStatus.CREATED,
        outputs={"key_path": save_path},
    )

def get_keypair(ec2, name: str) -> Optional[Dict]:
    """
    Get an existing key pair by name.

    Args:
        ec2: boto3 EC2 client
        name: Name of the key pair to get

    Returns:
        Optional[Dict]: The key pair description if it exists
    """
    try:
        response = ec2.describe_key_pairs(KeyNames=[name])
    except ClientError as e:
        if error_code(e) == "InvalidKeyPair.NotFound":
            return None
        raise
    return first_match(response.get("KeyPairs", []), f"key pair '{name}'")

def prepare_key_path(save_path: str) -> None:
    """
    Make sure the private key can be written before AWS generates it.

    Creates the parent directory if needed.

    Raises:
        OSError: If the directory is missing and cannot be created, or is not writable
    """
    directory = os.path.dirname(save_path) or "."
    if not os.path.isdir(directory):
        os.makedirs(directory)
    if not os.access(directory, os.W_OK | os.X_OK):
        raise PermissionError(f"directory '{directory}' is not writable")
    if os.path.isdir(save_path):
        raise IsADirectoryError(f"'{save_path}' is a directory")

def save_private_key(material: str, save_path: str) -> None:
    """
    Write private key material readable by the owner only.

    Args:
        material: PEM encoded private key
        save_path: Destination file
    """
    # A key left over from an earlier run is read-only
    if os.path.exists(save_path):
        os.chmod(save_path, stat.S_IRUSR | stat.S_IWUSR)

    with open(save_path, "w") as f:
        f.write(material)

    os.chmod(save_path, stat.S_IRUSR)

def delete_keypair(ec2, name: str) -> None:
    """
    Delete a key pair on the AWS side. The local private key file is kept.

    Args:
        ec2: boto3 EC2 client
        name: Name of the key pair

    Raises:
        NotFoundDuringCleanup: If the key pair does not exist
    """
    if get_keypair(ec2, name) is None:
        raise NotFoundDuringCleanup("key pair", name)
    ec2.delete_key_pair(KeyName=name)
    logger.info(f"Deleted key pair '{name}'")
