"""
vending_services.command_dispatcher -- Text commands to controller calls.

Responsibility:
    Interpret one line of customer or service input and invoke the
    matching MachineController operation. Rendering is left to the caller.

Command vocabulary (trimmed, case-insensitive, first match wins):
    <coin token>   insert that coin            (NICKLE, DIME, QUARTER, ...)
    refund         hand back the credit
    restock        service visit from the active restock plan
    quit           end the session (no machine call)
    <label>        buy the item stocked under that label
    anything else  UNRECOGNIZED, nothing changes

Every log record emitted while handling one line carries the same fresh
correlation_id.

Failure modes:
    - IntegrityViolation from the controller propagates unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import uuid4

from vending_config.schema import RestockPlan
from vending_kernel.domain.coin import Coin
from vending_kernel.exceptions import UnrecognizedCommandError
from vending_kernel.logging_config import LogContext, get_logger
from vending_services.inventory_ledger import RestockReport
from vending_services.machine_controller import MachineController, PurchaseResult

logger = get_logger("services.commands")


class CommandKind(str, Enum):
    COIN = "coin"
    REFUND = "refund"
    RESTOCK = "restock"
    SELECT = "select"
    QUIT = "quit"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class CommandResult:
    """What one command did. Only the fields for its kind are set."""

    kind: CommandKind
    command: str
    coin: Coin | None = None
    credit_cents: int = 0
    refunded_cents: int = 0
    restock: RestockReport | None = None
    purchase: PurchaseResult | None = None
    error_code: str | None = None


class CommandDispatcher:
    """Dispatch text commands to one MachineController."""

    def __init__(self, controller: MachineController, restock_plan: RestockPlan | None = None):
        self._controller = controller
        self._restock_plan = restock_plan

    def dispatch(self, line: str) -> CommandResult:
        command = line.strip().lower()
        with LogContext.bind(
            correlation_id=str(uuid4()),
            machine_id=self._controller.machine_id,
            command=command,
        ):
            logger.debug("command_received", extra={"raw": line})

            if Coin.is_coin(command):
                coin = Coin.from_token(command)
                credit = self._controller.insert_coin(coin)
                return CommandResult(
                    kind=CommandKind.COIN, command=command, coin=coin, credit_cents=credit,
                )

            if command == "refund":
                refunded = self._controller.refund()
                return CommandResult(
                    kind=CommandKind.REFUND, command=command, refunded_cents=refunded,
                )

            if command == "restock":
                return self._restock(command)

            if command == "quit":
                return CommandResult(kind=CommandKind.QUIT, command=command)

            if command and self._controller.is_stocked(command):
                purchase = self._controller.select_label(command)
                return CommandResult(
                    kind=CommandKind.SELECT, command=command, purchase=purchase,
                )

            error = UnrecognizedCommandError(command)
            logger.info("command_unrecognized", extra={"error_code": error.code})
            return CommandResult(
                kind=CommandKind.UNRECOGNIZED, command=command, error_code=error.code,
            )

    def _restock(self, command: str) -> CommandResult:
        if self._restock_plan is None:
            logger.warning("restock_without_plan")
            return CommandResult(kind=CommandKind.RESTOCK, command=command)
        report = self._controller.restock(
            self._restock_plan.goods(), self._restock_plan.money(),
        )
        return CommandResult(kind=CommandKind.RESTOCK, command=command, restock=report)
