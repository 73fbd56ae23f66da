"""
Command line entry point: ``vxg-k3s [deploy|cleanup]``.
"""

import argparse
import logging
import sys
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .config import DeploymentConfig
from .errors import DeploymentError
from .orchestrator import Orchestrator
from .utils.display import render_connection_info

def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Provision an EC2 instance running k3s with Nginx and Prometheus/Grafana"
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="deploy",
        choices=["deploy", "cleanup"],
        help="Action to perform (default: deploy)",
    )
    return parser.parse_args(argv)

def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format="%(message)s")
    # botocore is noisy at INFO
    logging.getLogger("botocore").setLevel(logging.WARNING)

def handle_deploy(orchestrator: Orchestrator) -> int:
    """Handle the deploy command."""
    try:
        record = orchestrator.deploy()
    except (DeploymentError, ValueError, OSError, ClientError, BotoCoreError) as e:
        print(f"❌ {e}")
        return 1

    print(render_connection_info(record, orchestrator.config))
    for state in orchestrator.states:
        print(f"  {state.kind.value}: {state.identifier} ({state.status.value})")
    print("\nDeployment script completed!")
    print("Note: K3s installation will continue in the background for 5-10 minutes.")
    return 0

def handle_cleanup(orchestrator: Orchestrator) -> int:
    """Handle the cleanup command. Always succeeds; failures are reported."""
    report = orchestrator.cleanup()
    for label in report.removed:
        print(f"✅ Removed {label}")
    for label in report.missing:
        print(f"   Already gone: {label}")
    for label in report.failed:
        print(f"❌ Could not remove {label}, please delete it manually")
    return 0

def main(argv: Optional[List[str]] = None, orchestrator: Optional[Orchestrator] = None) -> int:
    """Main function."""
    args = parse_args(argv)
    configure_logging()

    if orchestrator is None:
        orchestrator = Orchestrator(DeploymentConfig.from_env())

    if args.command == "cleanup":
        return handle_cleanup(orchestrator)
    return handle_deploy(orchestrator)

if __name__ == "__main__":
    sys.exit(main())
