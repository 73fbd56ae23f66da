"""
Utility functions for infrastructure management.
"""

from .tags import get_default_tags, merge_tags, to_tag_specifications
from .display import render_connection_info, service_urls, write_summary

__all__ = [
    'get_default_tags',
    'merge_tags',
    'to_tag_specifications',
    'render_connection_info',
    'service_urls',
    'write_summary',
]
