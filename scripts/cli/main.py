"""CLI main loop: show state, read a command, dispatch, render."""

import logging
import sys

from vending_config import get_active_config
from vending_kernel.exceptions import IntegrityViolation
from vending_kernel.logging_config import StructuredFormatter, get_logger
from vending_services.command_dispatcher import CommandDispatcher, CommandKind
from vending_services.machine_controller import MachineController

from scripts.cli import config as cli_config
from scripts.cli.menu import print_prompt, print_state
from scripts.cli.util import enable_quiet_logging, fmt_amount, render_result, restore_logging

logger = get_logger("cli")


class _FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit so vending.log updates immediately."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


def build_machine(config) -> tuple[MachineController, CommandDispatcher]:
    """A freshly restocked machine and its dispatcher."""
    controller = MachineController()
    controller.restock(config.restock.goods(), config.restock.money())
    return controller, CommandDispatcher(controller, config.restock)


def run_session(controller: MachineController, dispatcher: CommandDispatcher, stdin, out) -> int:
    """
    Read commands until ``quit`` or end of input.

    Raises:
        IntegrityViolation: Logged at CRITICAL, then re-raised.
    """
    while True:
        print_state(controller, out)
        print_prompt(controller, out)

        line = stdin.readline()
        if not line:
            print(file=out)
            break

        try:
            result = dispatcher.dispatch(line)
        except IntegrityViolation:
            logger.critical("machine_corrupt", exc_info=True)
            print("Machine is corrupt!", file=out)
            raise

        if result.kind == CommandKind.QUIT:
            break
        for message in render_result(result):
            print(message, file=out)
        print(file=out)

    print(f"Money remaining in machine: {fmt_amount(controller.machine_total())}", file=out)
    print(f"Money remaining in purchase: {fmt_amount(controller.purchase_total())}", file=out)
    return 0


def main(stdin=None, out=None) -> int:
    stdin = stdin or sys.stdin
    out = out or sys.stdout

    cli_config.LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = _FlushingFileHandler(str(cli_config.LOG_FILE), mode="a")
    file_handler.setFormatter(StructuredFormatter())
    vk_logger = logging.getLogger("vending_kernel")
    vk_logger.addHandler(file_handler)
    vk_logger.propagate = False

    try:
        config = get_active_config(cli_config.CONFIG_ID)
        vk_logger.setLevel(config.log_level)
        logger.info("vending_cli_started", extra={
            "log_path": str(cli_config.LOG_FILE),
            "config_set_id": config.config_id,
        })

        controller, dispatcher = build_machine(config)
        muted = enable_quiet_logging()
        try:
            return run_session(controller, dispatcher, stdin, out)
        except IntegrityViolation as exc:
            print(f"  ERROR: {exc}", file=sys.stderr)
            return 1
        finally:
            restore_logging(muted)
    finally:
        vk_logger.removeHandler(file_handler)
        file_handler.close()
