"""Reward emission schedule."""
from typing import Tuple
from loguru import logger

from .errors import InvalidAmount, InvalidDuration, AlreadyFunded
from .models import Pool


class RewardScheduler:
    """Computes and stores the reward rate and the block where rewards end."""

    def __init__(self, pool: Pool):
        self.pool = pool

    def plan(self, reward_amount: int, duration_blocks: int,
             current_block: int) -> Tuple[int, int]:
        """Validate a funding request and compute its schedule.

        Nothing is stored, so the caller can move the reward tokens first
        and only commit once custody is secured.

        Args:
            reward_amount: Total reward units to emit
            duration_blocks: Number of blocks rewards are emitted for
            current_block: Block in which funding happens

        Returns:
            (reward_rate, end_rewards_block)

        Raises:
            AlreadyFunded: If the pool already has a schedule
            InvalidDuration: If duration_blocks is not positive
            InvalidAmount: If reward_amount is not positive
        """
        if self.pool.funded:
            raise AlreadyFunded("Pool has already been funded")
        if duration_blocks <= 0:
            raise InvalidDuration(f"Duration must be a positive number of blocks, got {duration_blocks}")
        if reward_amount <= 0:
            raise InvalidAmount(f"Reward amount must be positive, got {reward_amount}")
        return reward_amount // duration_blocks, current_block + duration_blocks

    def commit(self, reward_token: str, reward_amount: int,
               reward_rate: int, end_rewards_block: int) -> None:
        """Store a schedule produced by ``plan``."""
        self.pool.reward_token = reward_token
        self.pool.reward_amount = reward_amount
        self.pool.reward_rate = reward_rate
        self.pool.end_rewards_block = end_rewards_block
        logger.info(
            f"Scheduled {reward_amount} {reward_token} at {reward_rate}/block "
            f"until block #{end_rewards_block}"
        )

    def fund(self, reward_token: str, reward_amount: int, duration_blocks: int,
             current_block: int) -> Tuple[int, int]:
        """Validate and store a schedule in one step."""
        rate, end = self.plan(reward_amount, duration_blocks, current_block)
        self.commit(reward_token, reward_amount, rate, end)
        return rate, end

    @property
    def reward_rate(self) -> int:
        return self.pool.reward_rate

    @property
    def end_rewards_block(self) -> int:
        return self.pool.end_rewards_block
