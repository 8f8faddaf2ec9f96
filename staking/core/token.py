"""Fungible token ledgers used for staking and rewards."""
from abc import ABC, abstractmethod
from typing import Dict
from loguru import logger
from pydantic import BaseModel

from .errors import TokenError, InsufficientBalance, InsufficientAllowance


class TokenLedger(ABC):
    """Balance/allowance store with ERC20 semantics.

    The staking pool only talks to tokens through this interface, so any
    ledger implementing it (a chain client, a test double) can be injected.
    """

    address: str

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Get the balance held by an account."""
        pass

    @abstractmethod
    def allowance(self, owner: str, spender: str) -> int:
        """Get how much spender may still move on behalf of owner."""
        pass

    @abstractmethod
    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move tokens from sender to another account."""
        pass

    @abstractmethod
    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set the allowance of spender over owner's tokens."""
        pass

    @abstractmethod
    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Move tokens from owner to another account using spender's allowance."""
        pass


class TokenRecord(BaseModel):
    """Serializable state of an in-memory token."""
    address: str
    name: str
    symbol: str
    total_supply: int
    balances: Dict[str, int] = {}
    allowances: Dict[str, Dict[str, int]] = {}


class InMemoryToken(TokenLedger):
    """Fixed-supply token kept entirely in memory.

    The whole supply is minted to ``owner`` at creation, mirroring an
    ``ERC20PresetFixedSupply`` deployment.
    """

    def __init__(self, name: str, symbol: str, supply: int, owner: str,
                 address: str = None):
        if supply < 0:
            raise TokenError("ERC20: supply must not be negative")
        self.name = name
        self.symbol = symbol
        self.address = address or symbol
        self.total_supply = supply
        self._balances: Dict[str, int] = {owner: supply} if supply else {}
        self._allowances: Dict[str, Dict[str, int]] = {}
        logger.debug(f"Minted {supply} {symbol} to {owner}")

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get(owner, {}).get(spender, 0)

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        self._move(sender, to, amount)
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0:
            raise TokenError("ERC20: approve negative amount")
        self._allowances.setdefault(owner, {})[spender] = amount
        logger.debug(f"{owner} approved {spender} for {amount} {self.symbol}")
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowance("ERC20: insufficient allowance")
        self._move(owner, to, amount)
        self._allowances.setdefault(owner, {})[spender] = current - amount
        return True

    def _move(self, sender: str, to: str, amount: int) -> None:
        if amount < 0:
            raise TokenError("ERC20: transfer negative amount")
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance("ERC20: transfer amount exceeds balance")
        self._balances[sender] = balance - amount
        self._balances[to] = self.balance_of(to) + amount

    def to_record(self) -> TokenRecord:
        """Export token state for persistence."""
        return TokenRecord(
            address=self.address,
            name=self.name,
            symbol=self.symbol,
            total_supply=self.total_supply,
            balances=dict(self._balances),
            allowances={k: dict(v) for k, v in self._allowances.items()},
        )

    @classmethod
    def from_record(cls, record: TokenRecord) -> "InMemoryToken":
        """Rebuild a token from persisted state."""
        token = cls(record.name, record.symbol, 0, owner="", address=record.address)
        token.total_supply = record.total_supply
        token._balances = dict(record.balances)
        token._allowances = {k: dict(v) for k, v in record.allowances.items()}
        return token
