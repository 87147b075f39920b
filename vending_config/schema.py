"""
Machine configuration schema.

Defines the frozen data model of a configuration set. YAML is parsed into
these types by the loader and checked by the validator; services receive
only these objects, never raw YAML.
"""

from __future__ import annotations

from dataclasses import dataclass

from vending_kernel.domain.coin import Coin
from vending_kernel.domain.coin_pool import CoinPool
from vending_kernel.domain.values import Item, ItemRow

# ---------------------------------------------------------------------------
# Restock plan
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RowDef:
    """One shelf row in a restock delivery."""

    label: str
    name: str
    category: str
    price_cents: int
    count: int

    def to_row(self) -> ItemRow:
        return ItemRow(
            label=self.label,
            item=Item(name=self.name, category=self.category, price_cents=self.price_cents),
            count=self.count,
        )


@dataclass(frozen=True)
class RestockPlan:
    """
    What a service visit loads into the machine.

    Goods are merged into the shelves; coins replace the reserve.
    """

    rows: tuple[RowDef, ...]
    coin_counts: tuple[tuple[Coin, int], ...]

    def goods(self) -> list[ItemRow]:
        """Fresh ItemRows for every row definition."""
        return [row.to_row() for row in self.rows]

    def money(self) -> CoinPool:
        return CoinPool.of(dict(self.coin_counts))


# ---------------------------------------------------------------------------
# Configuration set
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MachineConfiguration:
    """The root of a configuration set."""

    config_id: str
    version: int
    restock: RestockPlan
    description: str = ""
    log_level: str = "INFO"
    checksum: str = ""
