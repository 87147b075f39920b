"""
Tests for CommandDispatcher: text lines to controller operations.
"""

import pytest

from vending_kernel.domain.coin import Coin
from vending_kernel.exceptions import DuplicateLabelError
from vending_kernel.logging_config import LogContext
from vending_services.command_dispatcher import CommandDispatcher, CommandKind
from vending_services.machine_controller import PurchaseStatus

from tests.conftest import make_row


class TestCoinCommands:

    @pytest.mark.parametrize("line,coin", [
        ("quarter\n", Coin.QUARTER),
        ("  DIME ", Coin.DIME),
        ("NiCkLe", Coin.NICKLE),
        ("halfdollar", Coin.HALFDOLLAR),
        ("dollarcoin", Coin.DOLLARCOIN),
    ])
    def test_coin_inserted(self, dispatcher, machine, line, coin):
        result = dispatcher.dispatch(line)
        assert result.kind == CommandKind.COIN
        assert result.coin is coin
        assert result.credit_cents == coin.cents
        assert machine.purchase_total() == coin.cents

    def test_credit_accumulates(self, dispatcher):
        dispatcher.dispatch("quarter")
        result = dispatcher.dispatch("dime")
        assert result.credit_cents == 35


class TestKeywordCommands:

    def test_refund(self, dispatcher, machine):
        dispatcher.dispatch("dollarcoin")
        result = dispatcher.dispatch("Refund")
        assert result.kind == CommandKind.REFUND
        assert result.refunded_cents == 100
        assert machine.purchase_total() == 0

    def test_restock(self, dispatcher, machine):
        result = dispatcher.dispatch("restock")
        assert result.kind == CommandKind.RESTOCK
        assert set(result.restock.merged) == {"A1", "A2", "B1", "B2", "C1"}
        assert all(row.count == 6 for row in machine.list_inventory())

    def test_restock_without_plan(self, machine):
        result = CommandDispatcher(machine).dispatch("restock")
        assert result.kind == CommandKind.RESTOCK
        assert result.restock is None

    def test_quit_touches_nothing(self, dispatcher, machine):
        dispatcher.dispatch("quarter")
        result = dispatcher.dispatch("QUIT")
        assert result.kind == CommandKind.QUIT
        assert machine.purchase_total() == 25


class TestSelection:

    def test_label_vends(self, dispatcher):
        dispatcher.dispatch("dollarcoin")
        result = dispatcher.dispatch("a1")
        assert result.kind == CommandKind.SELECT
        assert result.purchase.status == PurchaseStatus.VENDED
        assert result.purchase.change.describe() == "1 QUARTER"

    def test_label_insufficient(self, dispatcher):
        result = dispatcher.dispatch("A2")
        assert result.kind == CommandKind.SELECT
        assert result.purchase.status == PurchaseStatus.INSUFFICIENT_FUNDS
        assert result.purchase.required_cents == 150

    def test_unknown_text_unrecognized(self, dispatcher, machine):
        result = dispatcher.dispatch("XXX")
        assert result.kind == CommandKind.UNRECOGNIZED
        assert result.command == "xxx"
        assert result.error_code == "UNRECOGNIZED_COMMAND"
        assert machine.machine_total() == 570

    def test_blank_line_unrecognized(self, dispatcher):
        assert dispatcher.dispatch("\n").kind == CommandKind.UNRECOGNIZED

    def test_duplicate_label_propagates(self, dispatcher, machine):
        machine.ledger._rows.append(make_row("A1"))
        with pytest.raises(DuplicateLabelError):
            dispatcher.dispatch("a1")

    def test_command_context_logged(self, dispatcher, captured_logs):
        dispatcher.dispatch("quarter")
        inserted = [r for r in captured_logs() if r["message"] == "coin_inserted"]
        assert inserted[0]["command"] == "insert_coin"
        received = [r for r in captured_logs() if r["message"] == "command_received"]
        assert received[0]["command"] == "quarter"

    def test_correlation_id_per_command(self, dispatcher, captured_logs):
        dispatcher.dispatch("quarter")
        dispatcher.dispatch("dime")
        logs = captured_logs()
        received = [r for r in logs if r["message"] == "command_received"]
        inserted = [r for r in logs if r["message"] == "coin_inserted"]
        assert received[0]["correlation_id"]
        assert inserted[0]["correlation_id"] == received[0]["correlation_id"]
        assert inserted[1]["correlation_id"] == received[1]["correlation_id"]
        assert received[0]["correlation_id"] != received[1]["correlation_id"]

    def test_correlation_id_cleared_after_command(self, dispatcher):
        dispatcher.dispatch("quarter")
        assert "correlation_id" not in LogContext.get_all()
