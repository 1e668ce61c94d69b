"""
Artifact Loader
Loads compiled contract artifacts (ABI + bytecode) for deployment
"""

import os
import json
from typing import Dict, Optional
from loguru import logger


class ArtifactLoader:
    """
    Resolves and loads Hardhat/Foundry JSON artifacts by contract name
    """

    def __init__(self, artifacts_dir: str = "artifacts"):
        """
        Initialize Artifact Loader

        Args:
            artifacts_dir: Root directory of compiled artifacts
        """
        self.artifacts_dir = artifacts_dir
        self._cache: Dict[str, Dict] = {}

    def find_artifact_path(self, contract_name: str) -> str:
        """
        Find artifact file for a contract

        Args:
            contract_name: Contract name (e.g. AuroraToken)

        Returns:
            Path to the artifact JSON
        """
        # Standard Hardhat layout
        default_path = os.path.join(
            self.artifacts_dir, 'contracts', f'{contract_name}.sol', f'{contract_name}.json'
        )

        if os.path.exists(default_path):
            return default_path

        found = self._search_artifact(contract_name)

        if found is None:
            raise FileNotFoundError(
                f"Contract artifact not found for {contract_name} in {self.artifacts_dir} "
                "(run 'npx hardhat compile' first)"
            )

        return found

    def _search_artifact(self, contract_name: str) -> Optional[str]:
        """Walk the artifacts tree for <name>.json"""
        if not os.path.isdir(self.artifacts_dir):
            return None

        target = f'{contract_name}.json'

        for root, dirs, files in os.walk(self.artifacts_dir):
            # build-info holds compiler I/O, never deployable artifacts
            dirs[:] = sorted(d for d in dirs if d != 'build-info')

            if target in files:
                return os.path.join(root, target)

        return None

    def load(self, contract_name: str) -> Dict:
        """
        Load contract artifact

        Args:
            contract_name: Contract name

        Returns:
            Dict with contractName, abi, bytecode and source_path
        """
        if contract_name in self._cache:
            return self._cache[contract_name]

        path = self.find_artifact_path(contract_name)

        with open(path, 'r') as f:
            contract_json = json.load(f)

        abi = contract_json.get('abi')
        if abi is None:
            raise ValueError(f"Artifact {path} has no ABI")

        bytecode = contract_json.get('bytecode')

        # Foundry stores {"object": "0x..."}
        if isinstance(bytecode, dict):
            bytecode = bytecode.get('object')

        if not bytecode or bytecode in ('0x', '0x0'):
            raise ValueError(
                f"{contract_name} has no deployable bytecode (interface or abstract contract?)"
            )

        if not bytecode.startswith('0x'):
            bytecode = '0x' + bytecode

        artifact = {
            'contractName': contract_name,
            'abi': abi,
            'bytecode': bytecode,
            'source_path': path
        }

        self._cache[contract_name] = artifact
        logger.debug(f"Loaded artifact for {contract_name}: {path}")

        return artifact
