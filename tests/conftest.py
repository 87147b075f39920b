"""
Pytest fixtures for the vending machine test suite.

Provides:
- Structured logging configuration and log capture
- Fresh machines (empty, or stocked from the default configuration set)
- Small row/pool builders shared by the service tests
"""

import json
import logging
from io import StringIO

import pytest

from vending_config import get_active_config
from vending_kernel.domain import Coin, CoinPool, ItemRow
from vending_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from vending_services.command_dispatcher import CommandDispatcher
from vending_services.inventory_ledger import InventoryLedger
from vending_services.machine_controller import MachineController
from vending_services.money_engine import MoneyEngine


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture vending_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, machine):
            machine.refund()
            logs = captured_logs()
            assert any(r["message"] == "purchase_refunded" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("vending_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Machine fixtures
# =============================================================================


@pytest.fixture
def default_config():
    return get_active_config()


@pytest.fixture
def empty_machine():
    """A machine with no goods and an empty reserve."""
    return MachineController(machine_id="test-machine")


@pytest.fixture
def machine(default_config):
    """A machine stocked from the default configuration set."""
    controller = MachineController(machine_id="test-machine")
    controller.restock(default_config.restock.goods(), default_config.restock.money())
    return controller


@pytest.fixture
def dispatcher(machine, default_config):
    return CommandDispatcher(machine, default_config.restock)


@pytest.fixture
def money():
    """A MoneyEngine with an empty reserve."""
    return MoneyEngine()


@pytest.fixture
def ledger():
    return InventoryLedger()


def make_row(label: str = "@1", name: str = "Name", price: str = "0.75", count: int = 1,
             category: str = "Type") -> ItemRow:
    return ItemRow.of(name, category, price, count, label)


def insert_all(target, *coins: Coin) -> None:
    """Insert coins one by one into a MoneyEngine or MachineController."""
    for coin in coins:
        target.insert_coin(coin)


def pool(**counts: int) -> CoinPool:
    """``pool(QUARTER=2, DIME=1)``"""
    return CoinPool.of({Coin[name]: n for name, n in counts.items()})
