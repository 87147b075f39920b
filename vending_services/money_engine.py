"""
vending_services.money_engine -- Coin bookkeeping for one machine.

Responsibility:
    Own the machine's two coin pools (reserve and purchase buffer), accept
    inserted coins, refund the buffer, plan exact change through
    ChangeEngine and settle a completed purchase.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Composes ChangeEngine (pure search) with CoinPool values. Each pool
    attribute is replaced, never edited in place.

Invariants enforced:
    - NO_SPECULATIVE_MUTATION: plan_change only reads the pools.
    - ATOMIC_SETTLEMENT: settle() computes both new pools before assigning
      either, so a failure leaves both pools as they were.
    - Conservation: after settle(plan), reserve + purchase has dropped by
      exactly plan.amount_cents.

Failure modes:
    - ChangeUnavailableError from plan_change/make_change when no exact
      combination exists in reserve + purchase. Nothing is mutated.
    - ValueError from plan_change if the amount is negative.

Usage:
    money = MoneyEngine(reserve=CoinPool.uniform(3))
    money.insert_coin(Coin.DOLLARCOIN)
    plan = money.make_change(25)       # dispense 25, settle the dollar
"""

from __future__ import annotations

from vending_engines.change import ChangeEngine, ChangePlan
from vending_kernel.domain.coin import Coin
from vending_kernel.domain.coin_pool import CoinPool
from vending_kernel.domain.values import format_cents
from vending_kernel.exceptions import ChangeUnavailableError
from vending_kernel.logging_config import get_logger

logger = get_logger("services.money")


class MoneyEngine:
    """
    Machine reserve and purchase buffer.

    Contract:
        The reserve is the change supply and receives settled payments.
        The purchase buffer holds the credit for the purchase in progress
        and is emptied by refund() or settle().
    """

    def __init__(
        self,
        reserve: CoinPool | None = None,
        change_engine: ChangeEngine | None = None,
    ):
        self._reserve = reserve if reserve is not None else CoinPool.empty()
        self._purchase = CoinPool.empty()
        self._change_engine = change_engine or ChangeEngine()

    @property
    def reserve(self) -> CoinPool:
        return self._reserve

    @property
    def purchase(self) -> CoinPool:
        return self._purchase

    @staticmethod
    def total_value(pool: CoinPool) -> int:
        """Value of a pool in cents."""
        return pool.total_cents

    @property
    def machine_total(self) -> int:
        return self.total_value(self._reserve)

    @property
    def purchase_total(self) -> int:
        return self.total_value(self._purchase)

    def insert_coin(self, coin: Coin) -> int:
        """Add one coin to the purchase buffer. Returns the new credit in cents."""
        self._purchase = self._purchase.add(coin)
        total = self.purchase_total
        logger.info("coin_inserted", extra={
            "coin": coin.name,
            "coin_cents": coin.cents,
            "purchase_cents": total,
        })
        return total

    def refund(self) -> int:
        """Empty the purchase buffer. Returns the amount handed back in cents."""
        refunded = self.purchase_total
        returned = self._purchase
        self._purchase = CoinPool.empty()
        logger.info("purchase_refunded", extra={
            "refunded_cents": refunded,
            "coins": str(returned),
        })
        return refunded

    def restock_money(self, pool: CoinPool) -> None:
        """Replace the reserve wholesale. The purchase buffer is untouched."""
        previous = self.machine_total
        self._reserve = pool
        logger.info("reserve_restocked", extra={
            "previous_cents": previous,
            "reserve_cents": pool.total_cents,
            "coins": str(pool),
        })

    def plan_change(self, amount_cents: int) -> ChangePlan:
        """
        Choose coins for ``amount_cents`` from reserve + purchase combined.

        Postconditions:
            - Neither pool has changed.
            - plan.coins.total_cents == amount_cents.

        Raises:
            ChangeUnavailableError: If no exact combination exists.
            ValueError: If amount_cents is negative.
        """
        supply = self._reserve.plus(self._purchase)
        plan = self._change_engine.find_change(amount_cents=amount_cents, supply=supply)
        if plan is None:
            logger.warning("change_unavailable", extra={
                "amount_cents": amount_cents,
                "supply_cents": supply.total_cents,
            })
            raise ChangeUnavailableError(amount_cents, supply.total_cents)
        logger.info("change_planned", extra={
            "amount_cents": amount_cents,
            "coins": plan.describe(),
        })
        return plan

    def settle(self, plan: ChangePlan) -> None:
        """
        Pay out ``plan`` and move the purchase buffer into the reserve.

        The plan may draw on coins that were inserted for this purchase, so
        the dispensed coins come out of reserve + purchase combined.

        Raises:
            ValueError: If the plan needs coins the pools do not hold
                (a stale plan). Both pools are left as they were.
        """
        settled_cents = self.purchase_total
        new_reserve = self._reserve.plus(self._purchase).minus(plan.coins)
        self._reserve = new_reserve
        self._purchase = CoinPool.empty()
        logger.info("pools_settled", extra={
            "settled_cents": settled_cents,
            "dispensed_cents": plan.amount_cents,
            "reserve_cents": new_reserve.total_cents,
        })

    def make_change(self, amount_cents: int) -> ChangePlan:
        """
        Plan change for ``amount_cents`` and settle it in one step.

        On failure nothing is mutated and the credit stays in the buffer.

        Raises:
            ChangeUnavailableError: If no exact combination exists.
        """
        plan = self.plan_change(amount_cents)
        self.settle(plan)
        return plan

    def describe(self) -> str:
        return (
            f"reserve={self._reserve} ({format_cents(self.machine_total)}), "
            f"purchase={self._purchase} ({format_cents(self.purchase_total)})"
        )
