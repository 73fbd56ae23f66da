"""
Cloud-init payload that installs k3s, Helm, Nginx and kube-prometheus-stack.

The script is passed to the instance as user data without modification.
"""

import os

USER_DATA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "k3s-userdata.sh")

def load_user_data(path: str = USER_DATA_FILE) -> str:
    """
    Read the bootstrap script.

    Args:
        path: Script to read (defaults to the packaged k3s script)

    Returns:
        str: Script contents
    """
    with open(path, "r") as f:
        return f.read()

__all__ = [
    'USER_DATA_FILE',
    'load_user_data',
]
