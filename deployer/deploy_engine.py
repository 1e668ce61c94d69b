"""
Deployment Engine - Core orchestration logic
Connects, resolves the signer and deploys the plan in order
"""

import os
import json
from decimal import Decimal
from typing import Dict, List, Optional
from loguru import logger
from web3 import Web3

from blockchain.artifact_loader import ArtifactLoader
from blockchain.contract_deployer import ContractDeployer, DeploymentError
from blockchain.nonce_manager import NonceManager

from utils.gas_calculator import GasCalculator
from utils.rpc_manager import RPCManager
from utils.deployment_record import DeploymentRecord

from .deployment_plan import DeploymentPlan
from .signer_manager import SignerManager


DEFAULT_CONFIG_PATH = "config/deploy_config.json"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict:
    """Load deployment configuration JSON"""
    with open(config_path, 'r') as f:
        return json.load(f)


def select_network(config: Dict, network: Optional[str] = None) -> str:
    """
    Pick the target network

    Precedence: explicit argument, DEPLOY_NETWORK, config default_network
    """
    network_name = network or os.getenv('DEPLOY_NETWORK') or config.get('default_network')

    if not network_name:
        raise ValueError("No network selected and no default_network configured")

    if network_name not in config.get('networks', {}):
        available = ', '.join(sorted(config.get('networks', {})))
        raise ValueError(f"Unknown network '{network_name}' (available: {available})")

    return network_name


class DeploymentEngine:
    """
    Main deployment driver
    Obtains the signer, then deploys each plan entry and waits for it
    """

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH, network: Optional[str] = None,
                 config: Optional[Dict] = None):
        """Initialize Deployment Engine"""
        logger.info("Initializing Deployment Engine...")

        # Load configuration
        self.config = config if config is not None else load_config(config_path)

        self.network_name = select_network(self.config, network)
        self.network_config = self.config['networks'][self.network_name]

        self.plan = DeploymentPlan.from_config(self.config)

        artifacts_dir = self.config.get('artifacts', {}).get('artifacts_dir', 'artifacts')
        self.artifact_loader = ArtifactLoader(artifacts_dir)

        self.deployment_record = DeploymentRecord(self.config.get('output', {}), self.network_name)

        # Network-bound components, created in setup()
        self.rpc_manager = None
        self.w3: Optional[Web3] = None
        self.signer_manager = None
        self.nonce_manager = None
        self.gas_calculator = None
        self.contract_deployer = None

        logger.info(f"Network: {self.network_config.get('name', self.network_name)}")
        logger.info(f"Plan: {' -> '.join(self.plan.contract_names())}")

    def setup(self):
        """Connect to the network and obtain the signer"""
        self.rpc_manager = RPCManager(self.network_config)
        self.w3 = self.rpc_manager.connect()

        self.signer_manager = SignerManager(self.w3, self.config.get('signer', {}))
        self.nonce_manager = NonceManager(self.w3, self.signer_manager.address)
        self.gas_calculator = GasCalculator(self.w3, self.config)

        deployer_config = dict(self.config)
        deployer_config['chain_id'] = self.network_config.get('chain_id')

        self.contract_deployer = ContractDeployer(
            self.w3,
            self.signer_manager,
            self.nonce_manager,
            self.gas_calculator,
            deployer_config
        )

    def load_artifacts(self) -> Dict[str, Dict]:
        """Load every artifact up front so a missing one fails before any tx"""
        return {name: self.artifact_loader.load(name) for name in self.plan.contract_names()}

    def preflight(self) -> bool:
        """
        Balance and confirmation checks

        Returns:
            False if the user cancelled
        """
        safety = self.config.get('safety', {})
        symbol = self.network_config.get('native_symbol', 'ETH')

        balance = self.signer_manager.get_balance()
        logger.info(f"Account balance: {balance} {symbol}")

        min_balance = Decimal(str(safety.get('min_balance_ether', 0)))

        if balance < min_balance:
            raise DeploymentError(
                f"Insufficient balance for deployment (need at least {min_balance} {symbol})"
            )

        if safety.get('require_confirmation', False):
            confirm = input(
                f"\nDeploy {len(self.plan)} contract(s) to {self.network_name}? (yes/no): "
            )

            if confirm.strip().lower() != 'yes':
                logger.info("Deployment cancelled")
                return False

        return True

    async def deploy_all(self) -> List[Dict]:
        """
        Deploy every contract in the plan, in order

        Returns:
            Deployment results (empty if cancelled)
        """
        if self.w3 is None:
            self.setup()

        artifacts = self.load_artifacts()

        if not self.preflight():
            return []

        deployer_address = self.signer_manager.address
        deployed: Dict[str, str] = {}
        results = []

        for entry in self.plan:
            name = entry['name']
            constructor_args = self.plan.resolve_args(entry, deployer_address, deployed)

            logger.info(f"Deploying {name}...")
            result = await self.contract_deployer.deploy(artifacts[name], constructor_args)

            deployed[name] = result['address']
            results.append(result)

            print(f"{name} Contract Deployed at {result['address']}")

        self._record(results, deployer_address)

        return results

    def _record(self, results: List[Dict], deployer_address: str):
        """Persist addresses (best effort)"""
        self.deployment_record.save(
            results,
            deployer_address,
            self.network_config.get('chain_id')
        )

        if self.deployment_record.update_env:
            env_values = {
                entry['env_var']: result['address']
                for entry, result in zip(self.plan, results)
                if entry.get('env_var')
            }
            self.deployment_record.update_env_file(env_values)
