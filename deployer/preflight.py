"""
System Check
Verifies configuration, connection, signer and artifacts before deploying
"""

import os
from decimal import Decimal
from typing import Dict, Optional
from loguru import logger

from blockchain.artifact_loader import ArtifactLoader
from utils.deployment_record import DeploymentRecord
from utils.rpc_manager import RPCManager

from .deploy_engine import DEFAULT_CONFIG_PATH, load_config, select_network
from .deployment_plan import DeploymentPlan
from .signer_manager import SignerManager


class SystemCheck:
    """Runs the pre-deployment checks for one network"""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH, network: Optional[str] = None):
        self.config_path = config_path
        self.network = network

        self.config: Optional[Dict] = None
        self.network_name: Optional[str] = None
        self.plan: Optional[DeploymentPlan] = None
        self.w3 = None
        self.signer_manager = None

    def check_configuration(self) -> bool:
        """Config file loads, network resolves, plan is valid"""
        logger.info("Checking configuration...")

        if not os.path.exists(self.config_path):
            logger.error(f"  ✗ {self.config_path} not found")
            return False

        config = load_config(self.config_path)
        network_name = select_network(config, self.network)
        plan = DeploymentPlan.from_config(config)

        self.config, self.network_name, self.plan = config, network_name, plan

        logger.success(f"  ✓ {self.config_path} ({len(plan)} contracts, network {network_name})")
        return True

    def check_artifacts(self) -> bool:
        """Every plan entry has a deployable artifact"""
        logger.info("Checking contract artifacts...")

        if self.plan is None:
            logger.error("  ✗ Skipped: configuration not loaded")
            return False

        loader = ArtifactLoader(self.config.get('artifacts', {}).get('artifacts_dir', 'artifacts'))

        ok = True
        for name in self.plan.contract_names():
            try:
                artifact = loader.load(name)
                logger.success(f"  ✓ {name}: {artifact['source_path']}")
            except (FileNotFoundError, ValueError) as e:
                logger.error(f"  ✗ {e}")
                ok = False

        if not ok:
            logger.info("  Run: npx hardhat compile")

        return ok

    def check_rpc_connection(self) -> bool:
        """Selected network answers with the expected chain id"""
        logger.info("Checking RPC connection...")

        if self.plan is None:
            logger.error("  ✗ Skipped: configuration not loaded")
            return False

        rpc_manager = RPCManager(self.config['networks'][self.network_name])
        w3 = rpc_manager.connect()
        block = w3.eth.block_number

        self.w3 = w3

        logger.success(f"  ✓ Connected via {rpc_manager.active_endpoint} (Block: {block})")
        return True

    def check_signer(self) -> bool:
        """A deployer identity is available"""
        logger.info("Checking signer...")

        if self.w3 is None:
            logger.error("  ✗ Skipped: no RPC connection")
            return False

        self.signer_manager = SignerManager(self.w3, self.config.get('signer', {}))

        kind = "local key" if self.signer_manager.is_local else "node account"
        logger.success(f"  ✓ Deployer {self.signer_manager.address} ({kind})")
        return True

    def check_balance(self) -> bool:
        """Deployer holds at least min_balance_ether"""
        logger.info("Checking deployer balance...")

        if self.signer_manager is None:
            logger.error("  ✗ Skipped: no signer")
            return False

        symbol = self.config['networks'][self.network_name].get('native_symbol', 'ETH')
        min_balance = Decimal(str(self.config.get('safety', {}).get('min_balance_ether', 0)))

        balance = self.signer_manager.get_balance()
        logger.info(f"  Deployer: {balance:.4f} {symbol}")

        if balance < min_balance:
            logger.error(f"  ✗ Balance low (need at least {min_balance} {symbol})")
            return False

        if balance == 0:
            logger.warning("  ⚠ Deployer balance is zero")
        else:
            logger.success("  ✓ Balance sufficient")

        return True

    def check_previous_deployment(self) -> bool:
        """Addresses in an existing record still carry code"""
        logger.info("Checking previous deployment record...")

        if self.w3 is None:
            logger.error("  ✗ Skipped: no RPC connection")
            return False

        record = DeploymentRecord(self.config.get('output', {}), self.network_name).load()
        contracts = record.get('contracts', {})

        if not contracts:
            logger.info("  No previous deployment recorded")
            return True

        ok = True
        for name, entry in contracts.items():
            code = self.w3.eth.get_code(entry['address'])

            if not code or code in (b'', '0x'):
                logger.warning(f"  ⚠ {name}: no contract at {entry['address']} (stale record?)")
                ok = False
            else:
                logger.success(f"  ✓ {name} deployed at {entry['address']}")

        return ok

    def run(self) -> int:
        """
        Run all checks

        Returns:
            0 if every check passed, 1 otherwise
        """
        logger.info("=" * 70)
        logger.info("Aurora Deployment System Check")
        logger.info("=" * 70)

        checks = [
            ("Configuration", self.check_configuration),
            ("Contract Artifacts", self.check_artifacts),
            ("RPC Connection", self.check_rpc_connection),
            ("Signer", self.check_signer),
            ("Deployer Balance", self.check_balance),
            ("Previous Deployment", self.check_previous_deployment)
        ]

        results = []

        for name, check_func in checks:
            logger.info("")
            try:
                result = check_func()
                results.append((name, result))
            except Exception as e:
                logger.error(f"Error in {name}: {e}")
                results.append((name, False))

        # Summary
        logger.info("")
        logger.info("=" * 70)
        logger.info("Summary")
        logger.info("=" * 70)

        passed = sum(1 for _, result in results if result)

        for name, result in results:
            status = "✓ PASS" if result else "✗ FAIL"
            logger.info(f"  {status}: {name}")

        logger.info(f"Total: {passed}/{len(results)} checks passed")

        if passed == len(results):
            logger.success("✅ Ready to deploy: python main.py")
            return 0

        logger.error("❌ Not ready - fix issues above")
        return 1
