"""Pool and deposit records."""
from typing import Optional, Dict
from pydantic import BaseModel


class Pool(BaseModel):
    """Configuration and reward schedule of a staking pool."""
    owner: str
    address: str
    staking_token: str
    reward_token: Optional[str] = None
    reward_amount: int = 0
    reward_rate: int = 0  # reward units per block
    end_rewards_block: int = 0

    @property
    def funded(self) -> bool:
        return self.reward_token is not None


class Deposit(BaseModel):
    """A participant's stake and reward checkpoint."""
    amount: int = 0
    last_accounted_block: int = 0
    unclaimed: int = 0  # settled but not yet paid out


class PoolSnapshot(BaseModel):
    """Serializable state of a pool and all of its deposits."""
    pool: Pool
    deposits: Dict[str, Deposit] = {}
