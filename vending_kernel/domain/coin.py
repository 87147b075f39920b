"""
Coin -- the machine's fixed set of denominations.

Responsibility:
    Declares the five coins the machine accepts, their values in integer
    cents, their total order, and the mapping from textual tokens to coins.

Architecture position:
    Kernel > Domain -- pure, zero I/O. Imported by every other module.

Invariants enforced:
    - Values are integer cents; there is no floating-point representation.
    - Ascending order is declaration order and value order at once, so
      ``pred()`` and ``largest()`` are well defined.
    - Tokens map 1:1 to members, case-insensitively.

Failure modes:
    - UnknownCoinError from ``from_token`` for anything but the five tokens.
"""

from __future__ import annotations

from enum import Enum, unique

from vending_kernel.exceptions import UnknownCoinError


@unique
class Coin(Enum):
    """A coin denomination. Declared in ascending value order."""

    NICKLE = 5
    DIME = 10
    QUARTER = 25
    HALFDOLLAR = 50
    DOLLARCOIN = 100

    @property
    def cents(self) -> int:
        """Value of one coin in cents."""
        return self.value

    @property
    def token(self) -> str:
        """The command token that names this coin."""
        return self.name

    def pred(self) -> Coin | None:
        """Next smaller coin, or None below the smallest."""
        order = Coin.ascending()
        index = order.index(self)
        return order[index - 1] if index > 0 else None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Coin):
            return NotImplemented
        return self.value < other.value

    @classmethod
    def ascending(cls) -> tuple[Coin, ...]:
        return _ASCENDING

    @classmethod
    def descending(cls) -> tuple[Coin, ...]:
        return _DESCENDING

    @classmethod
    def largest(cls) -> Coin:
        return _DESCENDING[0]

    @classmethod
    def smallest(cls) -> Coin:
        return _ASCENDING[0]

    @classmethod
    def from_token(cls, text: str) -> Coin:
        """
        Parse a coin token, ignoring case and surrounding whitespace.

        Raises:
            UnknownCoinError: If the token names no coin.
        """
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise UnknownCoinError(text) from None

    @classmethod
    def is_coin(cls, text: str) -> bool:
        return text.strip().upper() in cls.__members__

    @classmethod
    def describe_all(cls) -> str:
        """Render every coin with its dollar value, e.g. ``[NICKLE:0.05, ...]``."""
        return "[" + ", ".join(
            f"{c.name}:{c.value // 100}.{c.value % 100:02d}" for c in _ASCENDING
        ) + "]"


_ASCENDING: tuple[Coin, ...] = tuple(sorted(Coin, key=lambda c: c.value))
_DESCENDING: tuple[Coin, ...] = tuple(reversed(_ASCENDING))
