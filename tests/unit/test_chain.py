"""Unit tests for the block clock."""
import pytest
from staking.core.chain import BlockClock


def test_advance():
    clock = BlockClock()
    assert clock.number == 0
    assert clock.advance() == 1
    assert clock.advance(3) == 4
    assert clock.number == 4


def test_clock_never_moves_backwards():
    clock = BlockClock(start=10)
    with pytest.raises(ValueError):
        clock.advance(-1)
    assert clock.number == 10

    with pytest.raises(ValueError):
        BlockClock(start=-1)
