"""
Pure domain layer.

Coins, coin pools, items and rows, with NO dependencies on:
- Clock/time
- I/O
- Any service or configuration package

All value objects except ItemRow are immutable.
"""

from vending_kernel.domain.coin import Coin
from vending_kernel.domain.coin_pool import CoinPool
from vending_kernel.domain.values import (
    Item,
    ItemRow,
    cents_from_amount,
    format_cents,
)

__all__ = [
    "Coin",
    "CoinPool",
    "Item",
    "ItemRow",
    "cents_from_amount",
    "format_cents",
]
