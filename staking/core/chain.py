"""Block-number time source."""
from loguru import logger


class BlockClock:
    """Monotonic block counter supplied to the staking pool.

    Every reading of time in the engine goes through ``number``, so tests
    and the local devnet control time by calling ``advance``.
    """

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError("Block number must not be negative")
        self._number = start

    @property
    def number(self) -> int:
        """Current block number."""
        return self._number

    def advance(self, blocks: int = 1) -> int:
        """Mine ``blocks`` empty blocks and return the new block number."""
        if blocks < 0:
            raise ValueError("Cannot move the block number backwards")
        self._number += blocks
        logger.debug(f"Advanced {blocks} block(s) to #{self._number}")
        return self._number
