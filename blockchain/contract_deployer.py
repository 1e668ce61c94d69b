"""
Contract Deployer
Builds, sends and confirms contract creation transactions
"""

import asyncio
from typing import Dict, List
from web3 import Web3
from web3.exceptions import TimeExhausted
from loguru import logger


class DeploymentError(Exception):
    """Contract creation failed or could not be confirmed"""


class ContractDeployer:
    """
    Deploys a single contract from its artifact and waits for confirmation
    """

    def __init__(self, w3: Web3, signer_manager, nonce_manager, gas_calculator, config: Dict):
        """
        Initialize Contract Deployer

        Args:
            w3: Web3 instance
            signer_manager: Deployer identity
            nonce_manager: Nonce allocation for the deployer
            gas_calculator: Fee/gas-limit calculator
            config: Deployment configuration
        """
        self.w3 = w3
        self.signer_manager = signer_manager
        self.nonce_manager = nonce_manager
        self.gas_calculator = gas_calculator

        confirmation = config.get('confirmation', {})
        self.timeout_seconds = confirmation.get('timeout_seconds', 300)
        self.poll_latency = confirmation.get('poll_latency_seconds', 1)

        self.chain_id = config.get('chain_id')

    async def build_deploy_params(self, name: str, constructor) -> Dict:
        """
        Build transaction params for a constructor call

        Args:
            name: Contract name (for logs)
            constructor: web3 ContractConstructor

        Returns:
            Transaction params dict
        """
        deployer = self.signer_manager.address

        # Estimate gas
        try:
            gas_estimate = constructor.estimate_gas({'from': deployer})
            gas_limit = self.gas_calculator.apply_gas_buffer(gas_estimate)
        except Exception as e:
            logger.warning(f"Gas estimation failed for {name}: {e}, using default")
            gas_limit = self.gas_calculator.default_gas_limit

        gas_params = await self.gas_calculator.get_gas_params()
        nonce = await self.nonce_manager.get_nonce()

        params = {
            'from': deployer,
            'nonce': nonce,
            'gas': gas_limit,
            **gas_params
        }

        if self.chain_id is not None:
            params['chainId'] = self.chain_id

        cost_wei = self.gas_calculator.estimate_cost_wei(gas_limit, gas_params)

        logger.info(f"{name}: gas limit {gas_limit}, nonce {nonce}")
        logger.info(f"{name}: max deployment cost {Web3.from_wei(cost_wei, 'ether')} (native units)")

        return params

    async def send_deployment(self, constructor, params: Dict) -> bytes:
        """
        Sign (or delegate signing) and broadcast

        Returns:
            Transaction hash
        """
        try:
            if self.signer_manager.is_local:
                transaction = constructor.build_transaction(params)
                signed_tx = self.signer_manager.sign_transaction(transaction)
                return self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

            return constructor.transact(params)

        except Exception:
            # Nonce was never consumed on chain
            await self.nonce_manager.reset_nonce()
            raise

    async def wait_for_deployment(self, name: str, tx_hash) -> Dict:
        """
        Wait for the creation receipt and validate it

        Args:
            name: Contract name
            tx_hash: Deployment transaction hash

        Returns:
            Transaction receipt
        """
        try:
            receipt = await asyncio.to_thread(
                self.w3.eth.wait_for_transaction_receipt,
                tx_hash,
                timeout=self.timeout_seconds,
                poll_latency=self.poll_latency
            )
        except TimeExhausted as e:
            raise DeploymentError(
                f"{name} deployment {Web3.to_hex(tx_hash)} not confirmed "
                f"within {self.timeout_seconds}s"
            ) from e

        if receipt['status'] != 1:
            raise DeploymentError(f"{name} deployment reverted: {Web3.to_hex(tx_hash)}")

        contract_address = receipt.get('contractAddress')

        if not contract_address:
            raise DeploymentError(f"{name} receipt has no contract address: {Web3.to_hex(tx_hash)}")

        code = self.w3.eth.get_code(contract_address)

        if not code or code in (b'', '0x'):
            raise DeploymentError(f"No contract code at {contract_address} after {name} deployment")

        return receipt

    async def deploy(self, artifact: Dict, constructor_args: List) -> Dict:
        """
        Deploy a contract

        Args:
            artifact: Output of ArtifactLoader.load
            constructor_args: Resolved constructor arguments

        Returns:
            Deployment result dict
        """
        name = artifact['contractName']

        Contract = self.w3.eth.contract(abi=artifact['abi'], bytecode=artifact['bytecode'])
        constructor = Contract.constructor(*constructor_args)

        params = await self.build_deploy_params(name, constructor)

        logger.info(f"Sending {name} deployment transaction...")
        tx_hash = await self.send_deployment(constructor, params)

        logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")
        logger.info("Waiting for confirmation...")

        receipt = await self.wait_for_deployment(name, tx_hash)

        contract_address = Web3.to_checksum_address(receipt['contractAddress'])

        logger.success(f"{name} deployed at {contract_address}")
        logger.success(f"Gas used: {receipt['gasUsed']}")

        return {
            'name': name,
            'address': contract_address,
            'tx_hash': Web3.to_hex(tx_hash),
            'block_number': receipt['blockNumber'],
            'gas_used': receipt['gasUsed'],
            'constructor_args': constructor_args
        }
