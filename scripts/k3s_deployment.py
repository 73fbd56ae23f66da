#!/usr/bin/env python3
"""
AWS EC2 K3s Deployment Script for VXG

Provisions an EC2 instance, installs k3s through cloud-init, and deploys
Nginx and Prometheus/Grafana with Helm.

Usage: k3s_deployment.py [deploy|cleanup]
"""

import os
import sys

# Add the parent directory to the path so we can import the k3sinfra package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from k3sinfra.cli import main

if __name__ == "__main__":
    sys.exit(main())
