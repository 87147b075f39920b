"""
Values -- item definitions, shelf rows and cent arithmetic.

Responsibility:
    Provides the goods-side value types (Item, ItemRow) and the only two
    conversions between external dollar amounts and internal cents.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    EXACT_CENTS -- prices are stored as integer cents. A dollar amount with
                   a fractional cent is rejected, never rounded.
    Item equality is field equality (name, category, price).

Failure modes:
    - TypeError when a float is offered as a money amount
    - ValueError on fractional cents, negative prices or negative counts
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation

_CENTS_PER_DOLLAR = 100


def cents_from_amount(amount: Decimal | str | int) -> int:
    """
    Convert a dollar amount to integer cents.

    Preconditions:
        - amount is a Decimal, a decimal string, or a whole-dollar int.
          Floats are refused outright.

    Raises:
        TypeError: If amount is a float or another unsupported type.
        ValueError: If amount is not a number or carries a fractional cent.
    """
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, str, int)):
        raise TypeError(f"Money amount must be Decimal, str or int, got {type(amount).__name__}")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    scaled = value * _CENTS_PER_DOLLAR
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount} has a fractional cent")
    return int(scaled)


def format_cents(cents: int) -> str:
    """Render cents as dollars, e.g. ``135 -> "$1.35"``."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), _CENTS_PER_DOLLAR)
    return f"{sign}${dollars}.{remainder:02d}"


@dataclass(frozen=True, slots=True)
class Item:
    """
    One kind of product for sale.

    Guarantees:
        - Immutable and hashable
        - price_cents is a non-negative int
        - Two items are equal iff name, category and price all match
    """

    name: str
    category: str
    price_cents: int

    def __post_init__(self) -> None:
        if isinstance(self.price_cents, bool) or not isinstance(self.price_cents, int):
            raise TypeError(f"price_cents must be int, got {type(self.price_cents).__name__}")
        if self.price_cents < 0:
            raise ValueError(f"Item price cannot be negative, got {self.price_cents}")

    @classmethod
    def of(cls, name: str, category: str, price: Decimal | str | int) -> Item:
        """Build an Item from a dollar price such as ``"0.75"``."""
        return cls(name=name, category=category, price_cents=cents_from_amount(price))

    @property
    def price(self) -> Decimal:
        """Price in dollars, for display."""
        return Decimal(self.price_cents) / _CENTS_PER_DOLLAR

    def __str__(self) -> str:
        return f"{self.name} - {self.category} ({format_cents(self.price_cents)})"


@dataclass(slots=True)
class ItemRow:
    """
    A shelf slot: one label, one item definition, a stock count.

    The row is mutable only through InventoryLedger, which owns the count.
    Everything handed out of the ledger is a copy.
    """

    label: str
    item: Item
    count: int = 0

    def __post_init__(self) -> None:
        if not self.label or not self.label.strip():
            raise ValueError("Row label cannot be empty")
        if self.count < 0:
            raise ValueError(f"Row count cannot be negative, got {self.count}")

    @classmethod
    def of(
        cls,
        name: str,
        category: str,
        price: Decimal | str | int,
        count: int,
        label: str,
    ) -> ItemRow:
        return cls(label=label, item=Item.of(name, category, price), count=count)

    @property
    def key(self) -> str:
        """Case-insensitive lookup key for the label."""
        return self.label.strip().casefold()

    def matches(self, label: str) -> bool:
        return self.key == label.strip().casefold()

    def copy(self) -> ItemRow:
        return replace(self)

    def __str__(self) -> str:
        return f"{self.label}: {self.item}"
