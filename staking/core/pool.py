"""Single-pool staking with block-based reward emission."""
import threading
from enum import Enum
from typing import Callable, Dict, Optional
from loguru import logger

from .accrual import AccrualEngine
from .chain import BlockClock
from .errors import StakingError, TransferFailed, Unauthorized, InvalidAmount
from .ledger import StakeLedger
from .models import Pool, PoolSnapshot
from .scheduler import RewardScheduler
from .token import TokenLedger

DEFAULT_POOL_ADDRESS = "staking-pool"


class ParticipantState(str, Enum):
    UNSTAKED = "unstaked"
    STAKED = "staked"


class StakingPool:
    """Staking pool paying a single reward token per elapsed block.

    The life cycle of a pool is the following:

    1. [Owner] Create the pool for a staking token.
    2. [Owner] `fund(...)` it once with a reward token and a duration.
    3. [User] `approve` the pool on the staking token, then `stake(...)`.
    4. [User] `claim(...)` rewards and `withdraw(...)` stake at any time.

    Every operation runs under the pool lock and is all-or-nothing: token
    transfers happen before the ledger is touched, and a rejected transfer
    leaves the pool exactly as it was.
    """

    def __init__(self, staking_token: TokenLedger, owner: str, clock: BlockClock,
                 address: str = DEFAULT_POOL_ADDRESS):
        self.clock = clock
        self.pool = Pool(owner=owner, address=address, staking_token=staking_token.address)
        self.ledger = StakeLedger()
        self.scheduler = RewardScheduler(self.pool)
        self.accrual = AccrualEngine(self.scheduler)
        self._staking_token = staking_token
        self._reward_token: Optional[TokenLedger] = None
        self._lock = threading.RLock()
        logger.info(f"Created staking pool {address} for {staking_token.address} owned by {owner}")

    @classmethod
    def from_snapshot(cls, snapshot: PoolSnapshot, tokens: Dict[str, TokenLedger],
                      clock: BlockClock) -> "StakingPool":
        """Rebuild a pool from persisted state.

        Args:
            snapshot: State produced by ``snapshot()``
            tokens: Token ledgers by address, must include the pool's tokens
            clock: Block source for the restored pool
        """
        pool = cls.__new__(cls)
        pool.clock = clock
        pool.pool = snapshot.pool.model_copy()
        pool.ledger = StakeLedger({p: d.model_copy() for p, d in snapshot.deposits.items()})
        pool.scheduler = RewardScheduler(pool.pool)
        pool.accrual = AccrualEngine(pool.scheduler)
        pool._staking_token = tokens[pool.pool.staking_token]
        pool._reward_token = tokens[pool.pool.reward_token] if pool.pool.funded else None
        pool._lock = threading.RLock()
        return pool

    # Queries

    @property
    def owner(self) -> str:
        return self.pool.owner

    @property
    def address(self) -> str:
        return self.pool.address

    @property
    def staking_token_address(self) -> str:
        return self.pool.staking_token

    @property
    def reward_token_address(self) -> Optional[str]:
        return self.pool.reward_token

    @property
    def reward_rate(self) -> int:
        return self.scheduler.reward_rate

    @property
    def end_rewards_block(self) -> int:
        return self.scheduler.end_rewards_block

    @property
    def total_staked(self) -> int:
        return self.ledger.total_staked()

    def deposit_amount(self, participant: str) -> int:
        return self.ledger.deposit_amount(participant)

    def deposit_checkpoint_block(self, participant: str) -> int:
        return self.ledger.deposit_checkpoint_block(participant)

    def pending_reward(self, participant: str) -> int:
        """Reward ``claim`` would pay right now."""
        with self._lock:
            deposit = self.ledger.get(participant)
            if deposit is None:
                return 0
            return deposit.unclaimed + self.accrual.accrue(deposit, self.clock.number)

    def participant_state(self, participant: str) -> ParticipantState:
        if self.ledger.deposit_amount(participant) > 0:
            return ParticipantState.STAKED
        return ParticipantState.UNSTAKED

    def snapshot(self) -> PoolSnapshot:
        """Copy of the pool configuration and every deposit."""
        with self._lock:
            return PoolSnapshot(
                pool=self.pool.model_copy(),
                deposits={p: d.model_copy() for p, d in self.ledger.deposits().items()},
            )

    # Operations

    def fund(self, reward_token: TokenLedger, amount: int, duration: int, sender: str) -> None:
        """Pull ``amount`` of reward token from the owner and start emission.

        Rewards are emitted at ``amount // duration`` per block from the
        current block until ``current + duration``.

        Raises:
            Unauthorized: If sender is not the pool owner
            AlreadyFunded: If the pool was funded before
            InvalidDuration: If duration is not positive
            InvalidAmount: If amount is not positive
            TransferFailed: If the reward tokens could not be pulled
        """
        with self._lock:
            if sender != self.pool.owner:
                raise Unauthorized(f"Only the pool owner can fund the pool, not {sender}")
            block = self.clock.number
            rate, end = self.scheduler.plan(amount, duration, block)
            self._token_call(
                f"Pulling {amount} {reward_token.address} from {sender}",
                reward_token.transfer_from, self.pool.address, sender, self.pool.address, amount,
            )
            self.scheduler.commit(reward_token.address, amount, rate, end)
            self._reward_token = reward_token

    def stake(self, amount: int, sender: str) -> None:
        """Deposit ``amount`` of staking token; requires a prior approval.

        Reward accrued on an existing deposit is kept as unclaimed before the
        checkpoint moves to the current block.
        """
        with self._lock:
            if amount <= 0:
                raise InvalidAmount(f"Stake amount must be positive, got {amount}")
            block = self.clock.number
            self._token_call(
                f"Pulling {amount} {self.pool.staking_token} from {sender}",
                self._staking_token.transfer_from, self.pool.address, sender, self.pool.address, amount,
            )
            self._settle(sender, block)
            self.ledger.record_stake(sender, amount, block)
            logger.info(f"{sender} staked {amount} {self.pool.staking_token} at block #{block}")

    def withdraw(self, amount: int, sender: str) -> None:
        """Return ``amount`` of staked tokens to the sender.

        Raises:
            InvalidAmount: If amount is not positive
            InsufficientStake: If amount exceeds the sender's deposit
            TransferFailed: If the staking token rejects the transfer
        """
        with self._lock:
            self.ledger.validate_withdrawal(sender, amount)
            block = self.clock.number
            self._token_call(
                f"Returning {amount} {self.pool.staking_token} to {sender}",
                self._staking_token.transfer, self.pool.address, sender, amount,
            )
            if amount == self.ledger.deposit_amount(sender):
                # Full exit: keep what was earned so far, the empty deposit accrues nothing.
                self._settle(sender, block)
            self.ledger.record_withdrawal(sender, amount)
            logger.info(f"{sender} withdrew {amount} {self.pool.staking_token} at block #{block}")

    def claim(self, sender: str) -> int:
        """Pay out the sender's reward and reset its checkpoint.

        A claim with nothing owed transfers nothing but still moves the
        checkpoint to the current block.

        Returns:
            Amount of reward token paid
        """
        with self._lock:
            block = self.clock.number
            deposit = self.ledger.get(sender)
            if deposit is None:
                logger.debug(f"{sender} has no deposit, nothing to claim")
                return 0
            owed = deposit.unclaimed + self.accrual.accrue(deposit, block)
            if owed > 0:
                self._token_call(
                    f"Paying {owed} {self.pool.reward_token} to {sender}",
                    self._reward_token.transfer, self.pool.address, sender, owed,
                )
            deposit.unclaimed = 0
            deposit.last_accounted_block = block
            logger.info(f"{sender} claimed {owed} {self.pool.reward_token or 'reward'} at block #{block}")
            return owed

    def _settle(self, participant: str, block: int) -> None:
        """Move accrued reward into the deposit's unclaimed balance."""
        deposit = self.ledger.get(participant)
        if deposit is None:
            return
        deposit.unclaimed += self.accrual.accrue(deposit, block)
        deposit.last_accounted_block = block

    def _token_call(self, description: str, operation: Callable[..., bool], *args) -> None:
        try:
            ok = operation(*args)
        except StakingError:
            raise
        except Exception as e:
            raise TransferFailed(f"{description} failed: {e}") from e
        if not ok:
            raise TransferFailed(f"{description} was rejected by the token")
