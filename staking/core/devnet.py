"""Local persisted environment for driving a staking pool."""
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional
from loguru import logger
from pydantic import BaseModel, ValidationError

from .chain import BlockClock
from .errors import DevnetError
from .models import PoolSnapshot
from .pool import StakingPool, DEFAULT_POOL_ADDRESS
from .token import InMemoryToken, TokenRecord


class DevnetState(BaseModel):
    """Everything needed to resume a devnet."""
    block: int = 0
    tokens: Dict[str, TokenRecord] = {}
    pool: Optional[PoolSnapshot] = None


class Devnet:
    """A block clock, a set of in-memory tokens and at most one pool.

    Blocks only advance through ``mine``; transactions in between all land
    in the current block.
    """

    def __init__(self, clock: Optional[BlockClock] = None):
        self.clock = clock or BlockClock()
        self.tokens: Dict[str, InMemoryToken] = {}
        self.pool: Optional[StakingPool] = None

    @property
    def block(self) -> int:
        return self.clock.number

    def deploy_token(self, name: str, symbol: str, supply: int, owner: str) -> InMemoryToken:
        """Create a fixed-supply token addressed by its symbol."""
        if symbol in self.tokens:
            raise DevnetError(f"Token {symbol} already exists")
        token = InMemoryToken(name, symbol, supply, owner)
        self.tokens[token.address] = token
        logger.info(f"Deployed token {name} ({symbol}) with supply {supply}")
        return token

    def deploy_pool(self, staking_token: str, owner: str,
                    address: str = DEFAULT_POOL_ADDRESS) -> StakingPool:
        if self.pool is not None:
            raise DevnetError("A staking pool is already deployed")
        self.pool = StakingPool(self.token(staking_token), owner, self.clock, address=address)
        return self.pool

    def token(self, address: str) -> InMemoryToken:
        if address not in self.tokens:
            available = ", ".join(sorted(self.tokens)) or "none"
            raise DevnetError(f"Token '{address}' not found. Available tokens: {available}")
        return self.tokens[address]

    def require_pool(self) -> StakingPool:
        if self.pool is None:
            raise DevnetError("No staking pool deployed")
        return self.pool

    def mine(self, blocks: int = 1) -> int:
        return self.clock.advance(blocks)

    def to_state(self) -> DevnetState:
        return DevnetState(
            block=self.clock.number,
            tokens={a: t.to_record() for a, t in self.tokens.items()},
            pool=self.pool.snapshot() if self.pool else None,
        )

    @classmethod
    def from_state(cls, state: DevnetState) -> "Devnet":
        devnet = cls(BlockClock(state.block))
        devnet.tokens = {a: InMemoryToken.from_record(r) for a, r in state.tokens.items()}
        if state.pool is not None:
            devnet.pool = StakingPool.from_snapshot(state.pool, devnet.tokens, devnet.clock)
        return devnet

    def save(self, path: Path) -> None:
        """Write devnet state to disk."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(self.to_state().model_dump(), f, indent=2)
            os.replace(tmp_path, path)
        except BaseException:
            os.unlink(tmp_path)
            raise
        logger.debug(f"Saved devnet state to {path}")

    @classmethod
    def load(cls, path: Path) -> "Devnet":
        """Read devnet state from disk."""
        path = Path(path)
        if not path.exists():
            raise DevnetError(f"No devnet state at {path}. Run 'block-staking init' first")
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise DevnetError(f"Corrupted devnet state at {path}: expected a JSON object")
            return cls.from_state(DevnetState(**data))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise DevnetError(f"Corrupted devnet state at {path}: {e}") from e
        except KeyError as e:
            raise DevnetError(f"Corrupted devnet state at {path}: unknown token {e}") from e
