"""
CoinPool -- an immutable count of coins per denomination.

Responsibility:
    Models both of the machine's coin stores: the reserve (change supply,
    receives settled payments) and the purchase buffer (credit for the
    purchase in progress). Every operation returns a new pool, so a pool
    held by a caller never changes under it.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    NON_NEGATIVE_POOL -- every count is a non-negative int.
    EXACT_CENTS       -- total_cents is an integer sum, no rounding.

Failure modes:
    - ValueError when a count would be negative (construction or minus)
    - TypeError when a count is not an int
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from vending_kernel.domain.coin import Coin


@dataclass(frozen=True, slots=True)
class CoinPool:
    """
    Coin -> count mapping, stored as a tuple aligned with Coin.ascending().

    Guarantees:
        - Immutable and hashable
        - Every count is >= 0
        - Equal pools hold equal counts of every coin
    """

    counts: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.counts) != len(Coin.ascending()):
            raise ValueError(
                f"CoinPool needs {len(Coin.ascending())} counts, got {len(self.counts)}"
            )
        for coin, n in zip(Coin.ascending(), self.counts):
            if isinstance(n, bool) or not isinstance(n, int):
                raise TypeError(f"Count for {coin.name} must be int, got {type(n).__name__}")
            if n < 0:
                raise ValueError(f"Count for {coin.name} cannot be negative, got {n}")

    @classmethod
    def empty(cls) -> CoinPool:
        return cls(counts=(0,) * len(Coin.ascending()))

    @classmethod
    def uniform(cls, number: int) -> CoinPool:
        """A pool holding ``number`` of every coin."""
        return cls(counts=(number,) * len(Coin.ascending()))

    @classmethod
    def of(cls, counts: Mapping[Coin, int]) -> CoinPool:
        """Build a pool from a partial mapping; missing coins count zero."""
        return cls(counts=tuple(counts.get(coin, 0) for coin in Coin.ascending()))

    @classmethod
    def from_coins(cls, *coins: Coin) -> CoinPool:
        """Build a pool holding exactly the coins given, e.g. ``from_coins(QUARTER, QUARTER)``."""
        pool = cls.empty()
        for coin in coins:
            pool = pool.add(coin)
        return pool

    def count(self, coin: Coin) -> int:
        return self.counts[Coin.ascending().index(coin)]

    def items(self) -> Iterator[tuple[Coin, int]]:
        """(coin, count) pairs in ascending coin order, zeros included."""
        return zip(Coin.ascending(), self.counts)

    def as_dict(self) -> dict[Coin, int]:
        return dict(self.items())

    @property
    def total_cents(self) -> int:
        return sum(coin.cents * n for coin, n in self.items())

    @property
    def coin_count(self) -> int:
        return sum(self.counts)

    @property
    def is_empty(self) -> bool:
        return not any(self.counts)

    def add(self, coin: Coin, number: int = 1) -> CoinPool:
        """Return a pool with ``number`` more of ``coin``."""
        index = Coin.ascending().index(coin)
        counts = list(self.counts)
        counts[index] += number
        return CoinPool(counts=tuple(counts))

    def plus(self, other: CoinPool) -> CoinPool:
        """Coin-wise sum of two pools."""
        return CoinPool(counts=tuple(a + b for a, b in zip(self.counts, other.counts)))

    def minus(self, other: CoinPool) -> CoinPool:
        """
        Coin-wise difference.

        Raises:
            ValueError: If ``other`` holds more of any coin than this pool.
        """
        return CoinPool(counts=tuple(a - b for a, b in zip(self.counts, other.counts)))

    def __str__(self) -> str:
        return "{" + ", ".join(f"{coin.name}={n}" for coin, n in self.items()) + "}"
