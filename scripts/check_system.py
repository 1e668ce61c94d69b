"""
System Check Script
Verifies configuration, artifacts, RPC, signer and balance before deploying

Usage:
    python scripts/check_system.py [network]
"""

import os
import sys
from typing import List, Optional
from dotenv import load_dotenv

from deployer.deploy_engine import DEFAULT_CONFIG_PATH
from deployer.preflight import SystemCheck

load_dotenv()


def main(argv: Optional[List[str]] = None) -> int:
    """Run all checks for the selected network"""
    argv = sys.argv[1:] if argv is None else argv
    network = argv[0] if argv else None
    config_path = os.getenv('DEPLOY_CONFIG', DEFAULT_CONFIG_PATH)

    return SystemCheck(config_path=config_path, network=network).run()


if __name__ == "__main__":
    sys.exit(main())
