"""
Deployment Plan
Ordered list of contracts to deploy and how their constructor args resolve
"""

from typing import Any, Dict, Iterator, List
from loguru import logger


DEPLOYER_REF = 'deployer'


class PlanError(ValueError):
    """Invalid deployment plan"""


def _is_ref(value: Any) -> bool:
    return isinstance(value, dict) and set(value.keys()) == {'ref'}


def _collect_refs(value: Any) -> List[str]:
    if _is_ref(value):
        return [value['ref']]
    if isinstance(value, (list, tuple)):
        return [ref for item in value for ref in _collect_refs(item)]
    if isinstance(value, dict):
        return [ref for item in value.values() for ref in _collect_refs(item)]
    return []


class DeploymentPlan:
    """
    Sequence of contract entries

    Entry format:
        {"name": "CreatorPlatformContract",
         "args": [{"ref": "AuroraToken"}, 1, {"ref": "deployer"}],
         "env_var": "CREATOR_PLATFORM_CONTRACT_ADDRESS"}

    {"ref": "deployer"} is the signer address, {"ref": "<Name>"} the address
    of a contract deployed earlier in the same plan.
    """

    def __init__(self, contracts: List[Dict]):
        self.contracts = contracts
        self._validate()

    @classmethod
    def from_config(cls, config: Dict) -> 'DeploymentPlan':
        """Build plan from the "contracts" config section"""
        contracts = config.get('contracts')

        if not isinstance(contracts, list):
            raise PlanError("Config must define a 'contracts' list")

        return cls(contracts)

    def _validate(self):
        if not self.contracts:
            raise PlanError("Deployment plan is empty")

        seen = set()

        for position, entry in enumerate(self.contracts):
            if not isinstance(entry, dict) or not entry.get('name'):
                raise PlanError(f"Plan entry #{position} has no contract name")

            name = entry['name']

            if not isinstance(name, str):
                raise PlanError(f"Plan entry #{position}: contract name must be a string, got {name!r}")

            if name == DEPLOYER_REF:
                raise PlanError(f"'{DEPLOYER_REF}' is reserved and cannot name a contract")

            if name in seen:
                raise PlanError(f"Contract {name} appears twice in the plan")

            args = entry.get('args', [])
            if not isinstance(args, list):
                raise PlanError(f"{name}: 'args' must be a list")

            for ref in _collect_refs(args):
                if not isinstance(ref, str):
                    raise PlanError(f"{name}: reference target must be a string, got {ref!r}")
                if ref != DEPLOYER_REF and ref not in seen:
                    raise PlanError(
                        f"{name}: argument references {ref}, which is not deployed before it"
                    )

            seen.add(name)

    def __iter__(self) -> Iterator[Dict]:
        return iter(self.contracts)

    def __len__(self) -> int:
        return len(self.contracts)

    def contract_names(self) -> List[str]:
        return [entry['name'] for entry in self.contracts]

    def resolve_args(
        self,
        entry: Dict,
        deployer_address: str,
        deployed: Dict[str, str]
    ) -> List:
        """
        Resolve constructor arguments

        Args:
            entry: Plan entry
            deployer_address: Signer address
            deployed: Contract name -> address for contracts already deployed

        Returns:
            Concrete constructor argument list
        """
        def resolve(value):
            if _is_ref(value):
                ref = value['ref']
                if ref == DEPLOYER_REF:
                    return deployer_address
                if ref not in deployed:
                    raise PlanError(f"{entry['name']}: {ref} has not been deployed yet")
                return deployed[ref]
            if isinstance(value, list):
                return [resolve(item) for item in value]
            if isinstance(value, dict):
                return {key: resolve(item) for key, item in value.items()}
            return value

        args = [resolve(arg) for arg in entry.get('args', [])]
        logger.debug(f"{entry['name']} constructor args: {args}")
        return args
