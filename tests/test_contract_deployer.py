"""
Unit Tests for Contract Deployer
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, Mock
from web3.exceptions import TimeExhausted

from blockchain.contract_deployer import ContractDeployer, DeploymentError
from blockchain.nonce_manager import NonceManager


DEPLOYER = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
TOKEN = '0x5FbDB2315678afecb367f032d93F642f64180aa3'
TX_HASH = bytes.fromhex('ab' * 32)


@pytest.fixture
def artifact():
    return {
        'contractName': 'AuroraToken',
        'abi': [{"inputs": [{"name": "owner", "type": "address"}], "type": "constructor"}],
        'bytecode': '0x6080604052',
        'source_path': 'artifacts/contracts/AuroraToken.sol/AuroraToken.json'
    }


@pytest.fixture
def w3():
    """Mock Web3 whose deployment succeeds"""
    w3 = MagicMock()
    w3.eth.get_transaction_count.return_value = 3

    constructor = w3.eth.contract.return_value.constructor.return_value
    constructor.estimate_gas.return_value = 1000000
    constructor.build_transaction.side_effect = lambda params: {**params, 'data': '0x6080'}
    constructor.transact.return_value = TX_HASH

    w3.eth.send_raw_transaction.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.return_value = {
        'status': 1,
        'contractAddress': TOKEN.lower(),
        'gasUsed': 950000,
        'blockNumber': 12
    }
    w3.eth.get_code.return_value = b'\x60\x80'
    return w3


@pytest.fixture
def signer():
    signer = Mock()
    signer.address = DEPLOYER
    signer.is_local = True
    signer.sign_transaction.return_value = Mock(raw_transaction=b'signed')
    return signer


@pytest.fixture
def gas_calculator():
    calculator = Mock()
    calculator.default_gas_limit = 3000000
    calculator.apply_gas_buffer.side_effect = lambda estimate: int(estimate * 1.2)
    calculator.get_gas_params = AsyncMock(return_value={'maxFeePerGas': 30, 'maxPriorityFeePerGas': 2})
    calculator.estimate_cost_wei.return_value = 36000000
    return calculator


@pytest.fixture
def config():
    return {
        'chain_id': 31337,
        'confirmation': {'timeout_seconds': 60, 'poll_latency_seconds': 0.1}
    }


@pytest.fixture
def deployer(w3, signer, gas_calculator, config):
    return ContractDeployer(w3, signer, NonceManager(w3, DEPLOYER), gas_calculator, config)


def constructor_of(w3):
    return w3.eth.contract.return_value.constructor.return_value


class TestDeploy:
    """Successful deployment flow"""

    @pytest.mark.asyncio
    async def test_local_signer(self, deployer, w3, signer, artifact):
        result = await deployer.deploy(artifact, [DEPLOYER])

        assert result['name'] == 'AuroraToken'
        assert result['address'] == TOKEN
        assert result['tx_hash'] == '0x' + 'ab' * 32
        assert result['block_number'] == 12
        assert result['gas_used'] == 950000
        assert result['constructor_args'] == [DEPLOYER]

        w3.eth.contract.assert_called_once_with(abi=artifact['abi'], bytecode=artifact['bytecode'])
        w3.eth.contract.return_value.constructor.assert_called_once_with(DEPLOYER)

        signed_tx = signer.sign_transaction.call_args[0][0]
        assert signed_tx['from'] == DEPLOYER
        assert signed_tx['nonce'] == 3
        assert signed_tx['gas'] == 1200000
        assert signed_tx['chainId'] == 31337
        assert signed_tx['maxFeePerGas'] == 30

        w3.eth.send_raw_transaction.assert_called_once_with(b'signed')
        w3.eth.wait_for_transaction_receipt.assert_called_once_with(
            TX_HASH, timeout=60, poll_latency=0.1
        )

    @pytest.mark.asyncio
    async def test_node_signer(self, deployer, w3, signer, artifact):
        signer.is_local = False

        result = await deployer.deploy(artifact, [DEPLOYER])

        assert result['address'] == TOKEN
        signer.sign_transaction.assert_not_called()
        params = constructor_of(w3).transact.call_args[0][0]
        assert params['from'] == DEPLOYER
        assert params['nonce'] == 3

    @pytest.mark.asyncio
    async def test_sequential_nonces(self, deployer, w3, signer, artifact):
        await deployer.deploy(artifact, [DEPLOYER])
        await deployer.deploy(artifact, [DEPLOYER])

        nonces = [call[0][0]['nonce'] for call in signer.sign_transaction.call_args_list]
        assert nonces == [3, 4]
        assert deployer.nonce_manager.next_nonce == 5

    @pytest.mark.asyncio
    async def test_gas_estimation_fallback(self, deployer, w3, signer, artifact):
        constructor_of(w3).estimate_gas.side_effect = Exception("execution reverted")

        await deployer.deploy(artifact, [DEPLOYER])

        assert signer.sign_transaction.call_args[0][0]['gas'] == 3000000

    @pytest.mark.asyncio
    async def test_no_chain_id(self, w3, signer, gas_calculator, artifact):
        deployer = ContractDeployer(w3, signer, NonceManager(w3, DEPLOYER), gas_calculator, {})

        await deployer.deploy(artifact, [DEPLOYER])

        assert 'chainId' not in signer.sign_transaction.call_args[0][0]


class TestDeployFailures:
    """Every failure surfaces as an exception"""

    @pytest.mark.asyncio
    async def test_reverted(self, deployer, w3, artifact):
        w3.eth.wait_for_transaction_receipt.return_value = {
            'status': 0, 'contractAddress': None, 'gasUsed': 1, 'blockNumber': 12
        }

        with pytest.raises(DeploymentError, match="reverted"):
            await deployer.deploy(artifact, [DEPLOYER])

    @pytest.mark.asyncio
    async def test_timeout(self, deployer, w3, artifact):
        w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("timeout")

        with pytest.raises(DeploymentError, match="not confirmed within 60s"):
            await deployer.deploy(artifact, [DEPLOYER])

    @pytest.mark.asyncio
    async def test_missing_contract_address(self, deployer, w3, artifact):
        w3.eth.wait_for_transaction_receipt.return_value = {
            'status': 1, 'contractAddress': None, 'gasUsed': 1, 'blockNumber': 12
        }

        with pytest.raises(DeploymentError, match="no contract address"):
            await deployer.deploy(artifact, [DEPLOYER])

    @pytest.mark.asyncio
    async def test_no_code(self, deployer, w3, artifact):
        w3.eth.get_code.return_value = b''

        with pytest.raises(DeploymentError, match="No contract code"):
            await deployer.deploy(artifact, [DEPLOYER])

    @pytest.mark.asyncio
    async def test_send_failure_resets_nonce(self, deployer, w3, artifact):
        w3.eth.send_raw_transaction.side_effect = ValueError("insufficient funds")

        with pytest.raises(ValueError, match="insufficient funds"):
            await deployer.deploy(artifact, [DEPLOYER])

        assert deployer.nonce_manager.next_nonce == 3
