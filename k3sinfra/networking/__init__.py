"""
Networking infrastructure components.
"""

from .vpc import ensure_default_vpc, get_default_vpc

__all__ = [
    'ensure_default_vpc',
    'get_default_vpc',
]
