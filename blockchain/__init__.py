"""
Blockchain Interaction Package
Handles artifact loading, contract deployment and nonce management
"""

from .artifact_loader import ArtifactLoader
from .contract_deployer import ContractDeployer, DeploymentError
from .nonce_manager import NonceManager

__all__ = ['ArtifactLoader', 'ContractDeployer', 'DeploymentError', 'NonceManager']
