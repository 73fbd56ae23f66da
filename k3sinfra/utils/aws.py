"""
Helpers shared by the EC2 resource modules.
"""

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {
    "InvalidKeyPair.NotFound",
    "InvalidGroup.NotFound",
    "InvalidInstanceID.NotFound",
    "InvalidInstanceID.Malformed",
}

def error_code(error: ClientError) -> str:
    """Return the provider error code carried by a ClientError."""
    return error.response.get("Error", {}).get("Code", "")

def is_not_found(error: ClientError) -> bool:
    """Whether the ClientError reports a missing resource."""
    return error_code(error) in NOT_FOUND_CODES

def first_match(matches: List[Dict[str, Any]], what: str) -> Optional[Dict[str, Any]]:
    """
    Pick the first of several lookup results.

    Names are expected to be unique, so more than one match is logged as a
    warning and the first one wins.

    Args:
        matches: Lookup results, possibly empty
        what: Human readable description used in the warning

    Returns:
        Optional[Dict[str, Any]]: The first match or None
    """
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(f"Found {len(matches)} matches for {what}, using the first one")
    return matches[0]

def waiter_config(delay: int, max_attempts: int) -> Dict[str, int]:
    """Build the WaiterConfig argument for a boto3 waiter."""
    return {"Delay": delay, "MaxAttempts": max_attempts}
