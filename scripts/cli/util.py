"""CLI utilities: formatting, result rendering, logging mute/restore."""

import logging

from vending_kernel.domain.values import format_cents
from vending_services.command_dispatcher import CommandKind, CommandResult
from vending_services.machine_controller import PurchaseStatus

NO_CHANGE_MESSAGE = (
    "Machine can not make change with the cash on hand.  "
    "Insert more money or ask for refund"
)


def fmt_amount(cents: int) -> str:
    """Format cents for display (e.g. $1.35)."""
    return format_cents(cents)


def render_result(result: CommandResult) -> list[str]:
    """Lines to show the customer after one command."""
    if result.kind == CommandKind.COIN:
        return [f"Adding credit: {fmt_amount(result.coin.cents)}"]
    if result.kind == CommandKind.REFUND:
        return [f"Refunding: {fmt_amount(result.refunded_cents)}"]
    if result.kind == CommandKind.RESTOCK:
        if result.restock is None:
            return ["Nothing to restock"]
        lines = [str(rejection) for rejection in result.restock.rejected]
        lines.append("Machine restocked")
        return lines
    if result.kind == CommandKind.SELECT:
        return _render_purchase(result)
    if result.kind == CommandKind.UNRECOGNIZED:
        return [f"Unrecognized item label: {result.command}"]
    return []


def _render_purchase(result: CommandResult) -> list[str]:
    purchase = result.purchase
    if purchase.status == PurchaseStatus.VENDED:
        return [
            f"Change: {purchase.change.describe()}",
            f"Vending: {purchase.item}",
        ]
    if purchase.status == PurchaseStatus.INSUFFICIENT_FUNDS:
        return [
            f"You need {fmt_amount(purchase.required_cents)} more "
            f"to buy item in {purchase.label}"
        ]
    if purchase.status == PurchaseStatus.CHANGE_UNAVAILABLE:
        return [NO_CHANGE_MESSAGE]
    return [f"Unrecognized item label: {purchase.label}"]


def enable_quiet_logging():
    """Mute console handlers so CLI output stays clean. Returns list to pass to restore_logging."""
    vk_logger = logging.getLogger("vending_kernel")
    muted = []
    for h in vk_logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            muted.append((h, h.level))
            h.setLevel(logging.CRITICAL + 1)
    return muted


def restore_logging(muted):
    """Restore muted handlers after a quiet-logging section."""
    for h, orig_level in muted:
        h.setLevel(orig_level)
