"""
Aurora Deploy - Main Entry Point
Deploys AuroraToken and CreatorPlatformContract

Usage:
    python main.py [network]
"""

import asyncio
import os
import sys
from typing import List, Optional
from loguru import logger

from deployer.deploy_engine import DEFAULT_CONFIG_PATH, DeploymentEngine


def setup_logging(level: str = "INFO", log_file: Optional[str] = "data/logs/deploy.log"):
    """Configure logging sinks"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level
    )
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


async def main(network: Optional[str] = None) -> List:
    """Deploy every contract in the plan"""
    config_path = os.getenv('DEPLOY_CONFIG', DEFAULT_CONFIG_PATH)

    engine = DeploymentEngine(config_path=config_path, network=network)
    return await engine.deploy_all()


def run(argv: Optional[List[str]] = None) -> int:
    """
    Run the deployment

    Args:
        argv: Command-line arguments (without program name)

    Returns:
        Process exit code: 0 on success, 1 on any error
    """
    argv = list(argv or [])

    try:
        network = argv[0] if argv else None

        asyncio.run(main(network))
        return 0
    except KeyboardInterrupt:
        logger.error("Interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Deployment failed: {e}")
        return 1


if __name__ == "__main__":
    setup_logging()
    sys.exit(run(sys.argv[1:]))
