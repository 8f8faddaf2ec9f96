"""Unit tests for reward accrual."""
import pytest
from staking.core.accrual import AccrualEngine
from staking.core.models import Pool, Deposit
from staking.core.scheduler import RewardScheduler


@pytest.fixture
def engine():
    scheduler = RewardScheduler(Pool(owner="owner", address="pool", staking_token="PICK"))
    scheduler.fund("RICK", 1_000_000, 10, current_block=100)
    return AccrualEngine(scheduler)


def test_accrue_per_elapsed_block(engine):
    deposit = Deposit(amount=500_000, last_accounted_block=103)
    assert engine.accrue(deposit, 106) == 300_000


def test_accrual_stops_at_end_block(engine):
    deposit = Deposit(amount=1, last_accounted_block=105)
    assert engine.accrue(deposit, 110) == 500_000
    assert engine.accrue(deposit, 500) == 500_000


def test_checkpoint_past_end_block_accrues_nothing(engine):
    deposit = Deposit(amount=1, last_accounted_block=112)
    assert engine.accrue(deposit, 120) == 0


def test_no_accrual_without_stake(engine):
    assert engine.accrue(None, 105) == 0
    assert engine.accrue(Deposit(amount=0, last_accounted_block=100), 105) == 0


def test_no_accrual_before_funding():
    scheduler = RewardScheduler(Pool(owner="owner", address="pool", staking_token="PICK"))
    engine = AccrualEngine(scheduler)
    assert engine.accrue(Deposit(amount=10, last_accounted_block=0), 50) == 0


def test_accrue_is_pure(engine):
    deposit = Deposit(amount=10, last_accounted_block=100)
    engine.accrue(deposit, 104)
    assert deposit.last_accounted_block == 100
    assert deposit.unclaimed == 0
