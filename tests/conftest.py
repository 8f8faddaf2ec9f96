"""Test configuration and fixtures for Block Staking."""
import pytest
from staking.core.chain import BlockClock
from staking.core.pool import StakingPool
from staking.core.token import InMemoryToken

OWNER = "owner"
STAKER1 = "staker1"
STAKER2 = "staker2"

SUPPLY = 1_000_000
REWARD_AMOUNT = 1_000_000
DURATION = 10


@pytest.fixture
def clock():
    """Block clock starting at a non-zero block."""
    return BlockClock(start=100)


@pytest.fixture
def staking_token():
    """Staking token with half the supply handed to each staker."""
    token = InMemoryToken("Pickle", "PICK", SUPPLY, OWNER)
    token.transfer(OWNER, STAKER1, SUPPLY // 2)
    token.transfer(OWNER, STAKER2, SUPPLY // 2)
    return token


@pytest.fixture
def reward_token():
    return InMemoryToken("Rick", "RICK", REWARD_AMOUNT, OWNER)


@pytest.fixture
def pool(staking_token, clock):
    return StakingPool(staking_token, OWNER, clock)


@pytest.fixture
def funded_pool(pool, reward_token):
    """Pool funded with the whole reward supply over DURATION blocks."""
    reward_token.approve(OWNER, pool.address, REWARD_AMOUNT)
    pool.fund(reward_token, REWARD_AMOUNT, DURATION, sender=OWNER)
    return pool


@pytest.fixture
def home_dir(tmp_path, monkeypatch):
    """Isolated state directory for CLI runs."""
    monkeypatch.setenv("BLOCK_STAKING_HOME", str(tmp_path))
    monkeypatch.delenv("BLOCK_STAKING_LOG_LEVEL", raising=False)
    return tmp_path
