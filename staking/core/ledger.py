"""Per-participant stake accounting."""
from typing import Dict, List, Optional
from loguru import logger

from .errors import InvalidAmount, InsufficientStake
from .models import Deposit


class StakeLedger:
    """Tracks deposited amounts and accrual checkpoints by participant."""

    def __init__(self, deposits: Optional[Dict[str, Deposit]] = None):
        self._deposits: Dict[str, Deposit] = deposits if deposits is not None else {}

    def get(self, participant: str) -> Optional[Deposit]:
        """Get a participant's deposit, or None if they never staked."""
        return self._deposits.get(participant)

    def deposit_amount(self, participant: str) -> int:
        deposit = self._deposits.get(participant)
        return deposit.amount if deposit else 0

    def deposit_checkpoint_block(self, participant: str) -> int:
        deposit = self._deposits.get(participant)
        return deposit.last_accounted_block if deposit else 0

    def record_stake(self, participant: str, amount: int, current_block: int) -> Deposit:
        """Add to a participant's deposit and move its checkpoint.

        The deposit is created on first stake.
        """
        if amount <= 0:
            raise InvalidAmount(f"Stake amount must be positive, got {amount}")
        deposit = self._deposits.setdefault(participant, Deposit())
        deposit.amount += amount
        deposit.last_accounted_block = current_block
        logger.debug(f"{participant} deposit is now {deposit.amount} (checkpoint #{current_block})")
        return deposit

    def validate_withdrawal(self, participant: str, amount: int) -> None:
        """Raise if ``record_withdrawal`` would reject this request."""
        if amount <= 0:
            raise InvalidAmount(f"Withdrawal amount must be positive, got {amount}")
        if amount > self.deposit_amount(participant):
            raise InsufficientStake("Cannot withdraw more tokens than you deposited")

    def record_withdrawal(self, participant: str, amount: int) -> Deposit:
        """Reduce a participant's deposit. Never clamps."""
        self.validate_withdrawal(participant, amount)
        deposit = self._deposits[participant]
        deposit.amount -= amount
        logger.debug(f"{participant} deposit is now {deposit.amount}")
        return deposit

    def set_checkpoint(self, participant: str, block: int) -> None:
        deposit = self._deposits.get(participant)
        if deposit is not None:
            deposit.last_accounted_block = block

    def total_staked(self) -> int:
        return sum(d.amount for d in self._deposits.values())

    def participants(self) -> List[str]:
        """Participants with a non-zero deposit."""
        return [p for p, d in self._deposits.items() if d.amount > 0]

    def deposits(self) -> Dict[str, Deposit]:
        return self._deposits
