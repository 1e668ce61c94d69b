"""
Deployment Record
Persists deployed addresses (JSON record + optional .env update)
"""

import os
import json
import time
from typing import Dict, List, Optional
from loguru import logger


class DeploymentRecord:
    """
    Writes deployments/<network>.json after a successful run
    """

    def __init__(self, output_config: Dict, network_name: str):
        """
        Initialize Deployment Record

        Args:
            output_config: "output" config section
            network_name: Selected network key
        """
        self.deployment_dir = output_config.get('deployment_dir')
        self.update_env = output_config.get('update_env_file', False)
        self.env_path = output_config.get('env_path', '.env')
        self.network_name = network_name

    @property
    def record_path(self) -> Optional[str]:
        if not self.deployment_dir:
            return None
        return os.path.join(self.deployment_dir, f'{self.network_name}.json')

    def build_record(self, results: List[Dict], deployer_address: str, chain_id: int) -> Dict:
        """Assemble record dict from deployment results"""
        return {
            'network': self.network_name,
            'chain_id': chain_id,
            'deployer': deployer_address,
            'timestamp': int(time.time()),
            'contracts': {
                result['name']: {
                    'address': result['address'],
                    'tx_hash': result['tx_hash'],
                    'block_number': result['block_number'],
                    'gas_used': result['gas_used']
                }
                for result in results
            }
        }

    def save(self, results: List[Dict], deployer_address: str, chain_id: int) -> Optional[str]:
        """
        Save deployment record

        Args:
            results: Deployment results in deployment order
            deployer_address: Signer address
            chain_id: Network chain id

        Returns:
            Path written, or None
        """
        path = self.record_path

        if path is None:
            return None

        try:
            os.makedirs(self.deployment_dir, exist_ok=True)

            with open(path, 'w') as f:
                json.dump(self.build_record(results, deployer_address, chain_id), f, indent=2)

            logger.success(f"Deployment record written: {path}")
            return path

        except (OSError, ValueError) as e:
            logger.error(f"Error writing deployment record: {e}")
            return None

    def load(self) -> Dict:
        """Load previous record for this network (empty dict if none)"""
        path = self.record_path

        if path is None or not os.path.exists(path):
            return {}

        with open(path, 'r') as f:
            return json.load(f)

    def update_env_file(self, values: Dict[str, str]) -> bool:
        """
        Upsert KEY=value lines in the .env file

        Args:
            values: Env var name -> address

        Returns:
            True if the file was written
        """
        if not values:
            return False

        try:
            lines = []
            if os.path.exists(self.env_path):
                with open(self.env_path, 'r', encoding='utf-8') as f:
                    lines = f.readlines()

            for key, value in values.items():
                found = False
                for i, line in enumerate(lines):
                    if line.startswith(f'{key}='):
                        lines[i] = f'{key}={value}\n'
                        found = True
                        break

                if not found:
                    if lines and not lines[-1].endswith('\n'):
                        lines[-1] += '\n'
                    lines.append(f'{key}={value}\n')

            with open(self.env_path, 'w', encoding='utf-8') as f:
                f.writelines(lines)

            logger.success(f"Updated {self.env_path} with {', '.join(values)}")
            return True

        except (OSError, ValueError) as e:
            logger.error(f"Error updating {self.env_path}: {e}")
            return False
