"""
vending_services.machine_controller -- One vending machine and its purchase protocol.

Responsibility:
    Own all state of one machine (InventoryLedger + MoneyEngine) and expose
    the operations a front end calls: insert a coin, refund, restock, select
    a label, list the shelves and read the pool totals.

Architecture position:
    Services -- the composition root for one machine. There is no module
    level machine; every controller owns its ledger and pools exclusively.

Purchase protocol (select_label / purchase):
    1. Look the label up. No row -> UNRECOGNIZED_LABEL.
    2. Two or more rows -> DuplicateLabelError propagates.
    3. deficit = credit - price (integer cents).
    4. deficit < 0 -> INSUFFICIENT_FUNDS with required_cents = -deficit.
    5. deficit >= 0 -> plan change for deficit.
       Found     -> vend the item, settle the pools, VENDED.
       Not found -> CHANGE_UNAVAILABLE, credit stays in the buffer.

Invariants enforced:
    - ATOMIC_SETTLEMENT: plan, vend and settle run under one lock and the
      plan is computed before either the ledger or the pools change.
    - IntegrityViolation is never turned into a result.

Failure modes:
    - purchase() raises UnrecognizedLabelError, InsufficientFundsError or
      ChangeUnavailableError; select_label() returns them as results.
    - DuplicateLabelError from either form.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from uuid import uuid4

from vending_engines.change import ChangePlan
from vending_kernel.domain.coin import Coin
from vending_kernel.domain.coin_pool import CoinPool
from vending_kernel.domain.values import Item, ItemRow
from vending_kernel.exceptions import (
    ChangeUnavailableError,
    InsufficientFundsError,
    UnrecognizedLabelError,
)
from vending_kernel.logging_config import LogContext, get_logger
from vending_services.inventory_ledger import InventoryLedger, RestockReport
from vending_services.money_engine import MoneyEngine

logger = get_logger("services.machine")


class PurchaseStatus(str, Enum):
    """Outcome of a label selection."""

    VENDED = "vended"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    CHANGE_UNAVAILABLE = "change_unavailable"
    UNRECOGNIZED_LABEL = "unrecognized_label"


@dataclass(frozen=True)
class PurchaseResult:
    """
    Result of select_label().

    Guarantees:
        - VENDED carries item and change
        - INSUFFICIENT_FUNDS carries required_cents > 0
        - every other status left the machine unchanged
    """

    status: PurchaseStatus
    label: str
    item: Item | None = None
    change: ChangePlan | None = None
    required_cents: int = 0
    error_code: str | None = None

    @property
    def is_vended(self) -> bool:
        return self.status == PurchaseStatus.VENDED


class MachineController:
    """
    The state owner for one vending machine.

    Contract:
        Every public method runs under one re-entrant lock, so a purchase
        (plan + vend + settle) is atomic relative to any other call on the
        same controller.
    """

    def __init__(
        self,
        ledger: InventoryLedger | None = None,
        money: MoneyEngine | None = None,
        machine_id: str | None = None,
    ):
        self._ledger = ledger if ledger is not None else InventoryLedger()
        self._money = money if money is not None else MoneyEngine()
        self.machine_id = machine_id or str(uuid4())
        self._lock = threading.RLock()

    @property
    def ledger(self) -> InventoryLedger:
        return self._ledger

    @property
    def money(self) -> MoneyEngine:
        return self._money

    # ------------------------------------------------------------------
    # Coins
    # ------------------------------------------------------------------

    def insert_coin(self, coin: Coin) -> int:
        """Add a coin to the credit. Returns the credit in cents."""
        with self._lock, LogContext.bind(machine_id=self.machine_id, command="insert_coin"):
            return self._money.insert_coin(coin)

    def refund(self) -> int:
        """Hand back the whole credit. Returns the amount in cents."""
        with self._lock, LogContext.bind(machine_id=self.machine_id, command="refund"):
            return self._money.refund()

    # ------------------------------------------------------------------
    # Restocking: goods merge, money replaces
    # ------------------------------------------------------------------

    def restock_goods(self, rows: Iterable[ItemRow]) -> RestockReport:
        with self._lock, LogContext.bind(machine_id=self.machine_id, command="restock_goods"):
            return self._ledger.restock_goods(rows)

    def restock_money(self, pool: CoinPool) -> None:
        with self._lock, LogContext.bind(machine_id=self.machine_id, command="restock_money"):
            self._money.restock_money(pool)

    def restock(
        self,
        goods: Iterable[ItemRow] | None,
        money: CoinPool | None,
    ) -> RestockReport | None:
        """
        Service visit: replace the reserve and merge the goods.

        Either part may be None to leave that side alone. Returns the goods
        report, or None when no goods were delivered.
        """
        with self._lock, LogContext.bind(machine_id=self.machine_id, command="restock"):
            if money is not None:
                self._money.restock_money(money)
            if goods is None:
                return None
            return self._ledger.restock_goods(goods)

    # ------------------------------------------------------------------
    # Purchasing
    # ------------------------------------------------------------------

    def is_stocked(self, label: str) -> bool:
        """True if a row answers to ``label``. Raises on duplicate labels."""
        with self._lock:
            return self._ledger.lookup(label) is not None

    def purchase(self, label: str) -> tuple[Item, ChangePlan]:
        """
        Buy the item under ``label`` with the current credit.

        Returns:
            The vended item and the change paid out.

        Raises:
            UnrecognizedLabelError: No row under the label.
            InsufficientFundsError: Credit below the price.
            ChangeUnavailableError: No exact change; credit retained.
            DuplicateLabelError: Corrupt ledger.
        """
        with self._lock, LogContext.bind(
            machine_id=self.machine_id, command="purchase", label=label,
        ):
            row = self._ledger.lookup(label)
            if row is None:
                raise UnrecognizedLabelError(label)

            price = row.item.price_cents
            credit = self._money.purchase_total
            deficit = credit - price
            if deficit < 0:
                raise InsufficientFundsError(label, price, credit)

            plan = self._money.plan_change(deficit)
            item = self._ledger.vend(row)
            self._money.settle(plan)

            logger.info("purchase_completed", extra={
                "item": item.name,
                "price_cents": price,
                "credit_cents": credit,
                "change_cents": plan.amount_cents,
                "change_coins": plan.describe(),
            })
            return item, plan

    def select_label(self, label: str) -> PurchaseResult:
        """
        Purchase protocol with recoverable failures reported as results.

        Raises:
            IntegrityViolation: Never converted into a result.
        """
        try:
            item, plan = self.purchase(label)
        except UnrecognizedLabelError as e:
            return PurchaseResult(
                status=PurchaseStatus.UNRECOGNIZED_LABEL,
                label=label,
                error_code=e.code,
            )
        except InsufficientFundsError as e:
            logger.info("purchase_insufficient_funds", extra={
                "required_cents": e.required_cents,
                "price_cents": e.price_cents,
            })
            return PurchaseResult(
                status=PurchaseStatus.INSUFFICIENT_FUNDS,
                label=label,
                required_cents=e.required_cents,
                error_code=e.code,
            )
        except ChangeUnavailableError as e:
            return PurchaseResult(
                status=PurchaseStatus.CHANGE_UNAVAILABLE,
                label=label,
                error_code=e.code,
            )
        return PurchaseResult(
            status=PurchaseStatus.VENDED,
            label=label,
            item=item,
            change=plan,
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def list_inventory(self) -> tuple[ItemRow, ...]:
        with self._lock:
            return self._ledger.list_rows()

    def machine_total(self) -> int:
        with self._lock:
            return self._money.machine_total

    def purchase_total(self) -> int:
        with self._lock:
            return self._money.purchase_total

    def machine_coins(self) -> CoinPool:
        with self._lock:
            return self._money.reserve

    def purchase_coins(self) -> CoinPool:
        with self._lock:
            return self._money.purchase
