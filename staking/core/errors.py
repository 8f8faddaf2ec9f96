"""Exceptions raised by the staking engine."""


class StakingError(Exception):
    """Base class for staking pool failures."""


class InvalidAmount(StakingError):
    """Amount is zero or negative."""


class InvalidDuration(StakingError):
    """Funding duration is not a positive number of blocks."""


class InsufficientStake(StakingError):
    """Withdrawal exceeds the participant's deposit."""


class TransferFailed(StakingError):
    """A token ledger operation was rejected.

    The token-side error, when there is one, is available as ``__cause__``.
    """


class Unauthorized(StakingError):
    """Caller is not allowed to perform the operation."""


class AlreadyFunded(StakingError):
    """The pool has already been funded."""


class TokenError(Exception):
    """Base class for token ledger failures."""


class InsufficientBalance(TokenError):
    """Account balance is lower than the requested amount."""


class InsufficientAllowance(TokenError):
    """Spender allowance is lower than the requested amount."""


class DevnetError(Exception):
    """Local devnet state is missing or inconsistent."""
