"""
Utilities Package
Gas calculation, RPC connection and deployment record helpers
"""

from .gas_calculator import GasCalculator
from .rpc_manager import RPCManager
from .deployment_record import DeploymentRecord

__all__ = [
    'GasCalculator',
    'RPCManager',
    'DeploymentRecord'
]
