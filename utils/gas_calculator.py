"""
Gas Calculator
Fee and gas-limit calculation for deployment transactions
"""

from typing import Dict
from web3 import Web3
from loguru import logger


class GasCalculator:
    """
    Calculates fee parameters at the moment of sending
    EIP-1559 when the chain reports a base fee, legacy gasPrice otherwise
    """

    def __init__(self, w3: Web3, config: Dict):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
            config: Deployment configuration
        """
        self.w3 = w3

        gas_settings = config.get('gas_settings', {})

        self.gas_limit_buffer = gas_settings.get('gas_limit_buffer', 1.2)
        self.default_gas_limit = gas_settings.get('default_gas_limit', 3000000)
        self.gas_price_buffer = gas_settings.get('gas_price_buffer', 1.05)
        self.max_gas_price_gwei = gas_settings.get('max_gas_price_gwei')
        self.priority_fee_gwei = gas_settings.get('priority_fee_gwei', 2)

        logger.info("Gas Calculator initialized")

    def _max_fee_wei(self):
        if self.max_gas_price_gwei is None:
            return None
        return Web3.to_wei(self.max_gas_price_gwei, 'gwei')

    async def get_gas_params(self) -> Dict[str, int]:
        """
        Get fee fields for the next transaction

        Returns:
            Dict with maxFeePerGas/maxPriorityFeePerGas or gasPrice (wei)
        """
        latest_block = self.w3.eth.get_block('latest')
        base_fee_wei = latest_block.get('baseFeePerGas')

        if base_fee_wei is None:
            return {'gasPrice': await self.get_legacy_gas_price()}

        return self.get_eip1559_gas_params(base_fee_wei)

    def get_eip1559_gas_params(self, base_fee_wei: int) -> Dict[str, int]:
        """
        Get EIP-1559 gas parameters (maxFeePerGas, maxPriorityFeePerGas)

        Args:
            base_fee_wei: Base fee of the latest block

        Returns:
            Dict with gas parameters in wei
        """
        priority_fee_wei = Web3.to_wei(self.priority_fee_gwei, 'gwei')

        # Max fee = base fee * 2 + priority fee (buffer for fluctuations)
        max_fee_wei = (base_fee_wei * 2) + priority_fee_wei

        max_allowed_wei = self._max_fee_wei()
        if max_allowed_wei is not None and max_fee_wei > max_allowed_wei:
            logger.warning(
                f"Max fee capped at {self.max_gas_price_gwei} gwei "
                f"(wanted {Web3.from_wei(max_fee_wei, 'gwei')} gwei)"
            )
            max_fee_wei = max_allowed_wei

        # Tip can never exceed the max fee
        priority_fee_wei = min(priority_fee_wei, max_fee_wei)

        return {
            'maxFeePerGas': int(max_fee_wei),
            'maxPriorityFeePerGas': int(priority_fee_wei)
        }

    async def get_legacy_gas_price(self) -> int:
        """
        Get buffered legacy gas price

        Returns:
            Gas price in wei
        """
        gas_price_wei = self.w3.eth.gas_price

        # Apply buffer for faster inclusion
        buffered_wei = int(gas_price_wei * self.gas_price_buffer)

        max_allowed_wei = self._max_fee_wei()
        if max_allowed_wei is not None:
            buffered_wei = min(buffered_wei, max_allowed_wei)

        logger.debug(f"Legacy gas price: {Web3.from_wei(buffered_wei, 'gwei')} gwei")

        return int(buffered_wei)

    def apply_gas_buffer(self, gas_estimate: int) -> int:
        """Gas limit with safety buffer on top of the estimate"""
        return int(gas_estimate * self.gas_limit_buffer)

    @staticmethod
    def estimate_cost_wei(gas_limit: int, gas_params: Dict[str, int]) -> int:
        """
        Worst-case cost of a transaction

        Args:
            gas_limit: Gas limit
            gas_params: Output of get_gas_params

        Returns:
            Cost in wei
        """
        price = gas_params.get('maxFeePerGas', gas_params.get('gasPrice', 0))
        return gas_limit * price
