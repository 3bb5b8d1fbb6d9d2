# Standard Lib
import time
from dataclasses import dataclass
from typing import Callable, Optional

# Bittensor
import bittensor


@dataclass
class CacheEntry:
    key: str
    price: float
    fetched_at: float


class PriceCache:
    """
    Keeps recently fetched prices for a fixed freshness window.

    Stale entries are not evicted; the next ``set`` for the key replaces them.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl: Seconds an entry stays fresh
            clock: Returns the current time in seconds
        """
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[float]:
        """Returns the cached price for ``key`` if it is still fresh, otherwise None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        age = self.clock() - entry.fetched_at
        if age >= self.ttl:
            bittensor.logging.debug(f"Cached price for {key} is stale ({age:.1f}s old)")
            return None
        return entry.price

    def set(self, key: str, price: float) -> None:
        self._entries[key] = CacheEntry(key=key, price=price, fetched_at=self.clock())

    def __len__(self) -> int:
        return len(self._entries)


class NullPriceCache:
    """A cache that never holds anything."""

    def get(self, key: str) -> Optional[float]:
        return None

    def set(self, key: str, price: float) -> None:
        pass

    def __len__(self) -> int:
        return 0
