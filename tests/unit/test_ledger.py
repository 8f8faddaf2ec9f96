"""Unit tests for the stake ledger."""
import pytest
from staking.core.errors import InvalidAmount, InsufficientStake
from staking.core.ledger import StakeLedger


@pytest.fixture
def ledger():
    return StakeLedger()


def test_unknown_participant_defaults(ledger):
    assert ledger.deposit_amount("alice") == 0
    assert ledger.deposit_checkpoint_block("alice") == 0
    assert ledger.get("alice") is None


def test_record_stake(ledger):
    """Test stakes accumulate and move the checkpoint."""
    ledger.record_stake("alice", 100, current_block=5)
    ledger.record_stake("alice", 50, current_block=8)
    assert ledger.deposit_amount("alice") == 150
    assert ledger.deposit_checkpoint_block("alice") == 8


@pytest.mark.parametrize("amount", [0, -10])
def test_record_stake_requires_positive_amount(ledger, amount):
    with pytest.raises(InvalidAmount):
        ledger.record_stake("alice", amount, current_block=1)
    assert ledger.get("alice") is None


def test_record_withdrawal(ledger):
    ledger.record_stake("alice", 100, current_block=5)
    ledger.record_withdrawal("alice", 40)
    assert ledger.deposit_amount("alice") == 60
    # Withdrawals leave the checkpoint alone
    assert ledger.deposit_checkpoint_block("alice") == 5


def test_over_withdrawal_rejected(ledger):
    ledger.record_stake("alice", 100, current_block=5)
    with pytest.raises(InsufficientStake, match="Cannot withdraw more tokens than you deposited"):
        ledger.record_withdrawal("alice", 101)
    assert ledger.deposit_amount("alice") == 100


def test_withdrawal_without_deposit(ledger):
    with pytest.raises(InsufficientStake):
        ledger.record_withdrawal("bob", 1)


def test_totals(ledger):
    ledger.record_stake("alice", 100, current_block=1)
    ledger.record_stake("bob", 30, current_block=2)
    ledger.record_withdrawal("bob", 30)
    assert ledger.total_staked() == 100
    assert ledger.participants() == ["alice"]
    # Emptied deposits keep their history
    assert ledger.deposit_checkpoint_block("bob") == 2
