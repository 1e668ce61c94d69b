"""
RPC Manager
Connects to the target network with primary/fallback endpoint support
"""

import os
from typing import Dict, List, Optional, Tuple
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

load_dotenv()


class RPCManager:
    """
    Endpoint selection for a single network

    Order: primary env var, built-in default URL, fallback env vars.
    The first endpoint that answers with the expected chain id wins.
    """

    def __init__(self, network_config: Dict, request_timeout: int = 30):
        """
        Initialize RPC Manager

        Args:
            network_config: One entry of the "networks" config section
            request_timeout: HTTP timeout in seconds
        """
        self.network = network_config
        self.request_timeout = request_timeout

        self.endpoints = self._init_endpoints()

        if not self.endpoints:
            raise ValueError(
                f"No RPC endpoint configured for {self.network.get('name', 'network')} "
                f"(set {self.network.get('rpc_url_env')})"
            )

        self.active_endpoint: Optional[str] = None

        logger.info(f"RPC Manager initialized with {len(self.endpoints)} endpoint(s)")

    def _init_endpoints(self) -> List[Tuple[str, str]]:
        """Build ordered (label, url) list"""
        endpoints = []

        primary_env = self.network.get('rpc_url_env')
        if primary_env and os.getenv(primary_env):
            endpoints.append((primary_env, os.getenv(primary_env)))

        default_url = self.network.get('default_rpc_url')
        if default_url:
            endpoints.append(('default', default_url))

        for env_name in self.network.get('fallback_rpc_url_envs', []):
            url = os.getenv(env_name)
            if url:
                endpoints.append((env_name, url))

        # Drop duplicates, keep order
        seen = set()
        unique = []
        for label, url in endpoints:
            if url not in seen:
                seen.add(url)
                unique.append((label, url))

        return unique

    def connect(self) -> Web3:
        """
        Connect to the first healthy endpoint

        Returns:
            Connected Web3 instance
        """
        expected_chain_id = self.network.get('chain_id')

        for label, url in self.endpoints:
            try:
                w3 = Web3(Web3.HTTPProvider(url, request_kwargs={'timeout': self.request_timeout}))

                if not w3.is_connected():
                    logger.warning(f"Failed to connect to {label}")
                    continue

            except Exception as e:
                logger.warning(f"Error connecting to {label}: {e}")
                continue

            chain_id = w3.eth.chain_id

            if expected_chain_id is not None and chain_id != expected_chain_id:
                raise ValueError(
                    f"Endpoint {label} reports chain id {chain_id}, "
                    f"expected {expected_chain_id}"
                )

            self.active_endpoint = label

            logger.success(f"Connected to {self.network.get('name', label)} via {label} (chain id {chain_id})")
            return w3

        raise ConnectionError(
            f"Failed to connect to {self.network.get('name', 'network')}: "
            f"all {len(self.endpoints)} endpoint(s) unreachable"
        )
