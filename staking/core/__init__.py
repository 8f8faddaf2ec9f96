"""Staking engine: tokens, reward schedule, stake ledger and pool."""
from .accrual import AccrualEngine
from .chain import BlockClock
from .config import StakingConfig, configure_logging
from .devnet import Devnet, DevnetState
from .errors import (
    StakingError,
    InvalidAmount,
    InvalidDuration,
    InsufficientStake,
    TransferFailed,
    Unauthorized,
    AlreadyFunded,
    TokenError,
    InsufficientBalance,
    InsufficientAllowance,
    DevnetError,
)
from .ledger import StakeLedger
from .models import Pool, Deposit, PoolSnapshot
from .pool import StakingPool, ParticipantState, DEFAULT_POOL_ADDRESS
from .scheduler import RewardScheduler
from .token import TokenLedger, InMemoryToken, TokenRecord
