"""Reward accrual."""
from typing import Optional
from loguru import logger

from .models import Deposit
from .scheduler import RewardScheduler


class AccrualEngine:
    """Computes the reward a deposit has earned since its checkpoint.

    Accrual stops at the scheduler's end block. Only integer arithmetic is
    used and partial blocks never accrue.
    """

    def __init__(self, scheduler: RewardScheduler):
        self.scheduler = scheduler

    def accrue(self, deposit: Optional[Deposit], current_block: int) -> int:
        """Reward owed for blocks elapsed since the deposit's checkpoint.

        Takes the participant's ``Deposit`` rather than their identity so
        the engine stays independent of the ``StakeLedger``; the pool looks
        the deposit up under its lock and passes it in. A missing deposit
        (participant never staked) accrues nothing.

        Has no side effects; the caller settles and moves the checkpoint.
        """
        if deposit is None or deposit.amount == 0:
            return 0
        rate = self.scheduler.reward_rate
        if rate == 0:
            return 0
        until = min(current_block, self.scheduler.end_rewards_block)
        elapsed = until - deposit.last_accounted_block
        if elapsed <= 0:
            return 0
        owed = rate * elapsed
        logger.debug(f"Accrued {owed} over {elapsed} block(s) at {rate}/block")
        return owed
