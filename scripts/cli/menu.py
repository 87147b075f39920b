"""CLI menu: print machine state and the command prompt."""

from vending_kernel.domain.coin import Coin
from vending_services.machine_controller import MachineController

from scripts.cli.util import fmt_amount

PROMPT = "Enter type of cash, label of item, refund, restock, or quit: "


def print_state(controller: MachineController, out) -> None:
    """Print the shelves, both coin pools and the current credit."""
    print("Vending machine contains:", file=out)
    print(file=out)
    rows = controller.list_inventory()
    if not rows:
        print("Empty", file=out)
    for row in rows:
        print(row, file=out)
    print(f"In machine: {controller.machine_coins()}", file=out)
    print(f"In purchase: {controller.purchase_coins()}", file=out)
    print(f"Coins accepted: {Coin.describe_all()}", file=out)
    print(file=out)


def print_prompt(controller: MachineController, out) -> None:
    out.write(f"Credit={fmt_amount(controller.purchase_total())}: {PROMPT}")
    out.flush()
