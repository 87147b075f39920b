"""
Stateful services for one vending machine.

- MoneyEngine: reserve and purchase pools, change planning, settlement
- InventoryLedger: labelled shelf rows, restock merge, vend
- MachineController: composition root and purchase protocol
- CommandDispatcher: text commands to controller calls
"""

from vending_services.command_dispatcher import (
    CommandDispatcher,
    CommandKind,
    CommandResult,
)
from vending_services.inventory_ledger import (
    InventoryLedger,
    RestockRejection,
    RestockReport,
)
from vending_services.machine_controller import (
    MachineController,
    PurchaseResult,
    PurchaseStatus,
)
from vending_services.money_engine import MoneyEngine

__all__ = [
    "CommandDispatcher",
    "CommandKind",
    "CommandResult",
    "InventoryLedger",
    "MachineController",
    "MoneyEngine",
    "PurchaseResult",
    "PurchaseStatus",
    "RestockRejection",
    "RestockReport",
]
