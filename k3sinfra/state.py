"""
Persistence of the deployment record between ``deploy`` and ``cleanup``.
"""

import json
import logging
import os
from typing import Optional

from .models import DeploymentRecord

logger = logging.getLogger(__name__)

def save_record(record: DeploymentRecord, path: str) -> None:
    """
    Validate and write the record as a flat JSON object.

    Args:
        record: Record of a successful deploy
        path: Destination file

    Raises:
        ValueError: If the record fails validation
    """
    record.validate()
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    with open(path, "w") as f:
        json.dump(record.to_dict(), f, indent=2)
    logger.info(f"Deployment record saved to {path}")

def load_record(path: str) -> Optional[DeploymentRecord]:
    """
    Read a record written by ``save_record``.

    Args:
        path: Record file

    Returns:
        Optional[DeploymentRecord]: The record, None if the file does not exist
        or cannot be parsed
    """
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r") as f:
            return DeploymentRecord.from_dict(json.load(f))
    except (json.JSONDecodeError, ValueError, TypeError) as e:
        logger.warning(f"Ignoring unreadable deployment record {path}: {e}")
        return None

def remove_record(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)
        logger.info(f"Removed deployment record {path}")
