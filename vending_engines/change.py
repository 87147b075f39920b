"""
vending_engines.change -- Largest-first exact change search.

Responsibility:
    Given an amount in cents and a coin supply, find a multiset of coins
    drawn from the supply whose value is exactly the amount.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only vending_kernel.domain. The pools it searches are passed
    in; MoneyEngine (vending_services) decides what to do with the plan.

Search order:
    Coins are visited from the largest to the smallest through an index
    cursor over ``Coin.descending()``. At each coin the maximum usable
    count is tried first (bounded by the remaining amount and the supply
    of that coin), then one fewer, down to zero, descending to the next
    smaller coin after each trial. A remainder still left after the
    smallest coin is a dead end and the cursor backtracks. The first
    exact combination met in this order is returned.

    This favours large coins but is NOT a minimum-coin-count guarantee.

Invariants enforced:
    - NO_SPECULATIVE_MUTATION: the supply is an immutable CoinPool and is
      only read. The result is a plan, applied later by the caller.
    - Iterative: the cursor walks an explicit array, so search depth is
      bounded by the number of denominations, not by the call stack.
    - ``plan.coins.total_cents == amount_cents`` for every returned plan.

Failure modes:
    - ValueError if amount_cents is negative.
    - Returns None when no exact combination exists.

Usage:
    from vending_engines.change import ChangeEngine
    from vending_kernel.domain import Coin, CoinPool

    engine = ChangeEngine()
    plan = engine.find_change(
        amount_cents=25,
        supply=CoinPool.from_coins(Coin.QUARTER, Coin.QUARTER),
    )
    assert plan.coins == CoinPool.from_coins(Coin.QUARTER)
"""

from __future__ import annotations

from dataclasses import dataclass

from vending_engines.tracer import traced_engine
from vending_kernel.domain.coin import Coin
from vending_kernel.domain.coin_pool import CoinPool
from vending_kernel.logging_config import get_logger

logger = get_logger("engines.change")


@dataclass(frozen=True, slots=True)
class ChangePlan:
    """
    The coins chosen to pay out a given amount.

    Guarantees:
        - coins.total_cents == amount_cents
        - an amount of zero always has an empty coin pool
    """

    amount_cents: int
    coins: CoinPool

    def __post_init__(self) -> None:
        if self.coins.total_cents != self.amount_cents:
            raise ValueError(
                f"Change plan coins total {self.coins.total_cents}, "
                f"expected {self.amount_cents}"
            )

    @property
    def is_empty(self) -> bool:
        return self.coins.is_empty

    def describe(self) -> str:
        """Render largest coin first, e.g. ``"1 HALFDOLLAR, 2 DIME"`` or ``"None"``."""
        parts = [
            f"{self.coins.count(coin)} {coin.name}"
            for coin in Coin.descending()
            if self.coins.count(coin)
        ]
        return ", ".join(parts) if parts else "None"


class ChangeEngine:
    """
    Exact change search over a coin supply.

    Contract:
        Pure and deterministic: identical amount and supply always yield
        the identical plan. No I/O, no pool mutation.
    Non-goals:
        - Does not minimise the number of coins.
        - Does not decide which pools make up the supply.
    """

    @traced_engine("change", "1.0", fingerprint_fields=("amount_cents", "supply"))
    def find_change(self, amount_cents: int, supply: CoinPool) -> ChangePlan | None:
        """
        Find coins from ``supply`` totalling exactly ``amount_cents``.

        Returns:
            The first ChangePlan found in largest-first order, or None.

        Raises:
            ValueError: If amount_cents is negative.
        """
        if amount_cents < 0:
            raise ValueError(f"Change amount cannot be negative, got {amount_cents}")

        denominations = Coin.descending()
        values = [coin.cents for coin in denominations]
        available = [supply.count(coin) for coin in denominations]
        last = len(denominations) - 1

        # remaining[i] is the amount still owed when the cursor reaches i;
        # chosen[i] is the trial count of denominations[i].
        remaining = [0] * len(denominations)
        chosen = [0] * len(denominations)

        cursor = 0
        remaining[0] = amount_cents
        chosen[0] = min(amount_cents // values[0], available[0])
        steps = 0

        while True:
            steps += 1
            left = remaining[cursor] - chosen[cursor] * values[cursor]
            if left == 0:
                break
            if cursor < last:
                cursor += 1
                remaining[cursor] = left
                chosen[cursor] = min(left // values[cursor], available[cursor])
                continue
            # Dead end below the smallest coin: back up to the nearest
            # position that can still try one fewer coin.
            while chosen[cursor] == 0:
                cursor -= 1
                if cursor < 0:
                    logger.info("change_not_found", extra={
                        "amount_cents": amount_cents,
                        "supply_cents": supply.total_cents,
                        "steps": steps,
                    })
                    return None
            chosen[cursor] -= 1

        coins = CoinPool.of({
            denominations[i]: chosen[i] for i in range(cursor + 1)
        })
        plan = ChangePlan(amount_cents=amount_cents, coins=coins)

        logger.info("change_found", extra={
            "amount_cents": amount_cents,
            "supply_cents": supply.total_cents,
            "coins": plan.describe(),
            "steps": steps,
        })
        return plan
