"""
Exceptions raised while deploying or cleaning up the k3s stack.
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for all deployment errors."""


class PreconditionError(DeploymentError):
    """Credentials or tooling are missing; raised before any resource is touched."""


class ResourceCreationError(DeploymentError):
    """A create call failed or did not yield a usable identifier."""

    def __init__(self, kind: str, name: str, reason: str):
        self.kind = kind
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to create {kind} '{name}': {reason}")


class WaitTimeoutError(DeploymentError, TimeoutError):
    """An instance did not reach the expected state within the waiter bound."""

    def __init__(self, instance_id: str, state: str, reason: Optional[str] = None):
        self.instance_id = instance_id
        self.state = state
        message = f"Instance {instance_id} did not reach state '{state}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NotFoundDuringCleanup(DeploymentError):
    """A resource scheduled for deletion no longer exists."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier} not found, nothing to delete")
