"""
Unit Tests for Artifact Loader
"""

import json
import pytest

from blockchain.artifact_loader import ArtifactLoader


ABI = [{"inputs": [{"name": "owner", "type": "address"}], "stateMutability": "nonpayable", "type": "constructor"}]


def write_artifact(path, bytecode="0x6080604052", abi=ABI):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({'contractName': path.stem, 'abi': abi, 'bytecode': bytecode}))
    return path


@pytest.fixture
def artifacts_dir(tmp_path):
    """Hardhat-style artifacts tree"""
    root = tmp_path / 'artifacts'
    write_artifact(root / 'contracts' / 'AuroraToken.sol' / 'AuroraToken.json')
    return root


class TestArtifactLoader:
    """Test artifact resolution and parsing"""

    def test_load_hardhat_layout(self, artifacts_dir):
        loader = ArtifactLoader(str(artifacts_dir))

        artifact = loader.load('AuroraToken')

        assert artifact['contractName'] == 'AuroraToken'
        assert artifact['abi'] == ABI
        assert artifact['bytecode'] == '0x6080604052'
        assert artifact['source_path'].endswith('AuroraToken.json')

    def test_fallback_search(self, artifacts_dir):
        # Contract declared in a differently named source file
        write_artifact(artifacts_dir / 'contracts' / 'Platform.sol' / 'CreatorPlatformContract.json')

        artifact = ArtifactLoader(str(artifacts_dir)).load('CreatorPlatformContract')

        assert 'Platform.sol' in artifact['source_path']

    def test_build_info_ignored(self, artifacts_dir):
        write_artifact(artifacts_dir / 'build-info' / 'Ghost.json')

        with pytest.raises(FileNotFoundError):
            ArtifactLoader(str(artifacts_dir)).load('Ghost')

    def test_missing_artifact(self, artifacts_dir):
        with pytest.raises(FileNotFoundError, match="hardhat compile"):
            ArtifactLoader(str(artifacts_dir)).load('CreatorPlatformContract')

    def test_missing_artifacts_dir(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ArtifactLoader(str(tmp_path / 'nope')).load('AuroraToken')

    def test_interface_has_no_bytecode(self, artifacts_dir):
        write_artifact(artifacts_dir / 'contracts' / 'IAurora.sol' / 'IAurora.json', bytecode='0x')

        with pytest.raises(ValueError, match="bytecode"):
            ArtifactLoader(str(artifacts_dir)).load('IAurora')

    def test_foundry_bytecode_object(self, tmp_path):
        root = tmp_path / 'out'
        write_artifact(root / 'AuroraToken.sol' / 'AuroraToken.json', bytecode={'object': '6080'})

        artifact = ArtifactLoader(str(root)).load('AuroraToken')

        assert artifact['bytecode'] == '0x6080'

    def test_missing_abi(self, tmp_path):
        path = tmp_path / 'artifacts' / 'contracts' / 'Broken.sol' / 'Broken.json'
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({'bytecode': '0x6080'}))

        with pytest.raises(ValueError, match="ABI"):
            ArtifactLoader(str(tmp_path / 'artifacts')).load('Broken')

    def test_cached(self, artifacts_dir):
        loader = ArtifactLoader(str(artifacts_dir))

        first = loader.load('AuroraToken')
        (artifacts_dir / 'contracts' / 'AuroraToken.sol' / 'AuroraToken.json').unlink()

        assert loader.load('AuroraToken') is first
