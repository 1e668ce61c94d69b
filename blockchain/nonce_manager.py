"""
Nonce Manager
Hands out sequential nonces for the deployer account
"""

import asyncio
from web3 import Web3
from loguru import logger


class NonceManager:
    """Next-nonce counter seeded from the node's pending transaction count"""

    def __init__(self, w3: Web3, deployer_address: str):
        self.w3 = w3
        self.deployer_address = Web3.to_checksum_address(deployer_address)
        self.lock = asyncio.Lock()

        self.next_nonce = self._fetch_nonce()
        logger.info(f"Deployer nonce starts at {self.next_nonce}")

    def _fetch_nonce(self) -> int:
        return self.w3.eth.get_transaction_count(self.deployer_address, 'pending')

    async def get_nonce(self) -> int:
        """Allocate the next nonce"""
        async with self.lock:
            nonce = self.next_nonce
            self.next_nonce += 1

        logger.debug(f"Allocated nonce: {nonce}")
        return nonce

    async def reset_nonce(self):
        """Re-read the nonce from the node after a failed send"""
        async with self.lock:
            self.next_nonce = self._fetch_nonce()

        logger.warning(f"Nonce reset to: {self.next_nonce}")
