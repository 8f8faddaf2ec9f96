"""Unit tests for the local devnet."""
import json
import pytest
from unittest.mock import patch
from staking.core.devnet import Devnet
from staking.core.errors import DevnetError


@pytest.fixture
def devnet():
    devnet = Devnet()
    devnet.deploy_token("Pickle", "PICK", 1_000_000, "owner")
    devnet.deploy_token("Rick", "RICK", 1_000_000, "owner")
    devnet.deploy_pool("PICK", "owner")
    return devnet


def test_deploy(devnet):
    assert set(devnet.tokens) == {"PICK", "RICK"}
    assert devnet.require_pool().staking_token_address == "PICK"
    assert devnet.block == 0


def test_duplicate_deployments_rejected(devnet):
    with pytest.raises(DevnetError):
        devnet.deploy_token("Pickle", "PICK", 1, "owner")
    with pytest.raises(DevnetError):
        devnet.deploy_pool("PICK", "owner")


def test_unknown_token(devnet):
    with pytest.raises(DevnetError, match="Available tokens: PICK, RICK"):
        devnet.token("NOPE")


def test_require_pool():
    with pytest.raises(DevnetError):
        Devnet().require_pool()


def test_save_and_load(devnet, tmp_path):
    """Test a pool with stake and schedule survives a save/load cycle."""
    pool = devnet.pool
    devnet.token("RICK").approve("owner", pool.address, 1_000_000)
    pool.fund(devnet.token("RICK"), 1_000_000, 10, sender="owner")
    devnet.token("PICK").approve("owner", pool.address, 500)
    pool.stake(500, sender="owner")
    devnet.mine(3)

    path = tmp_path / "state" / "devnet.json"
    devnet.save(path)
    assert json.loads(path.read_text())["block"] == 3

    loaded = Devnet.load(path)
    loaded_pool = loaded.require_pool()
    assert loaded.block == 3
    assert loaded_pool.reward_rate == 100_000
    assert loaded_pool.deposit_amount("owner") == 500
    assert loaded.token("PICK").balance_of(loaded_pool.address) == 500

    assert loaded_pool.claim(sender="owner") == 300_000
    assert loaded.token("RICK").balance_of("owner") == 300_000


def test_load_missing_state(tmp_path):
    with pytest.raises(DevnetError, match="init"):
        Devnet.load(tmp_path / "missing.json")


@pytest.mark.parametrize("content", [
    b"{not json",
    b'{"block": "not-a-number"}',
    b'{"tokens": {"PICK": {"address": "PICK"}}}',
    b"[1, 2, 3]",
    b"\xff\xfe\x00garbage",
])
def test_load_corrupted_state(tmp_path, content):
    """Test unreadable or wrongly shaped state files are reported as corrupted."""
    path = tmp_path / "devnet.json"
    path.write_bytes(content)
    with pytest.raises(DevnetError, match="Corrupted"):
        Devnet.load(path)


def test_load_pool_with_missing_token(devnet, tmp_path):
    path = tmp_path / "devnet.json"
    devnet.save(path)
    state = json.loads(path.read_text())
    del state["tokens"]["PICK"]
    path.write_text(json.dumps(state))
    with pytest.raises(DevnetError, match="Corrupted"):
        Devnet.load(path)


def test_failed_save_keeps_previous_state(devnet, tmp_path):
    """Test an interrupted save leaves the last good state and no temp files."""
    path = tmp_path / "devnet.json"
    devnet.save(path)
    before = path.read_text()

    devnet.mine(5)
    with patch("staking.core.devnet.json.dump", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            devnet.save(path)

    assert path.read_text() == before
    assert [p.name for p in tmp_path.iterdir()] == ["devnet.json"]
    assert Devnet.load(path).block == 0
