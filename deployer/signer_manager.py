"""
Signer Manager
Resolves the deployer identity: local private key or node-managed account
"""

import os
from typing import Dict
from decimal import Decimal
from web3 import Web3
from eth_account import Account
from loguru import logger
from dotenv import load_dotenv

load_dotenv()


class SignerManager:
    """
    Provides the account that deploys contracts

    - Local signer: DEPLOYER_PRIVATE_KEY (or configured env var) is set,
      transactions are signed here and sent raw.
    - Node signer: no key set, the node's unlocked account at
      account_index signs (Hardhat/Anvil dev nodes).
    """

    def __init__(self, w3: Web3, signer_config: Dict = None):
        """
        Initialize signer manager

        Args:
            w3: Web3 instance
            signer_config: "signer" config section
        """
        self.w3 = w3
        signer_config = signer_config or {}

        self.private_key_env = signer_config.get('private_key_env', 'DEPLOYER_PRIVATE_KEY')
        self.account_index = signer_config.get('account_index', 0)

        private_key = os.getenv(self.private_key_env)

        if private_key:
            self.account = Account.from_key(private_key)
            self.address = self.account.address
            self.is_local = True
            logger.info(f"Deployer (local key): {self.address}")
        else:
            self.account = None
            self.address = self._get_node_account()
            self.is_local = False
            logger.info(f"Deployer (node account #{self.account_index}): {self.address}")

    def _get_node_account(self) -> str:
        """Pick an unlocked account from the node"""
        accounts = self.w3.eth.accounts

        if not accounts:
            raise ValueError(
                f"{self.private_key_env} must be set in .env "
                "(node exposes no unlocked accounts)"
            )

        if self.account_index >= len(accounts):
            raise ValueError(
                f"Signer account index {self.account_index} out of range "
                f"(node has {len(accounts)} accounts)"
            )

        return Web3.to_checksum_address(accounts[self.account_index])

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the local key

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        if not self.is_local:
            raise ValueError("Node-managed signer: transactions are signed by the node")

        try:
            return self.account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise

    def get_balance(self) -> Decimal:
        """Deployer native balance in ether units"""
        balance_wei = self.w3.eth.get_balance(self.address)
        return Decimal(str(Web3.from_wei(balance_wei, 'ether')))
