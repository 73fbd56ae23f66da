"""
EC2 infrastructure components.
"""

from .instances import ensure_instance, find_instance_by_name, get_instance_public_ip, terminate_instance
from .security_groups import ensure_security_group, find_security_group, delete_security_group
from .keypairs import ensure_keypair, get_keypair, delete_keypair

__all__ = [
    'ensure_instance',
    'find_instance_by_name',
    'get_instance_public_ip',
    'terminate_instance',
    'ensure_security_group',
    'find_security_group',
    'delete_security_group',
    'ensure_keypair',
    'get_keypair',
    'delete_keypair',
]
