"""
Deployment Core Package
Handles the deployment engine, plan resolution and signer management
"""

from .deploy_engine import DeploymentEngine
from .deployment_plan import DeploymentPlan, PlanError
from .signer_manager import SignerManager
from .preflight import SystemCheck

__all__ = ['DeploymentEngine', 'DeploymentPlan', 'PlanError', 'SignerManager', 'SystemCheck']
