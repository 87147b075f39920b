"""
Configuration Validator (``vending_config.validator``).

Responsibility
--------------
Checks a parsed ``MachineConfiguration`` before any machine is built
from it.

Invariants enforced
-------------------
* Label uniqueness -- two rows under one label (case-insensitive) would
  either corrupt the ledger or be silently merged; both are errors.
* Non-negative counts for rows and coins.
* Known logging level.
* An empty restock plan is legal but reported as a warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vending_config.schema import MachineConfiguration


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` returns ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_configuration(config: MachineConfiguration) -> ConfigValidationResult:
    """Validate a configuration set. Never raises; collects every problem."""
    result = ConfigValidationResult()

    seen: dict[str, str] = {}
    for row in config.restock.rows:
        key = row.label.strip().casefold()
        if not key:
            result.add_error(f"Row '{row.name}' has an empty label")
            continue
        if key in seen:
            result.add_error(
                f"Label '{row.label}' is used by both '{seen[key]}' and '{row.name}'"
            )
        else:
            seen[key] = row.name
        if row.count < 0:
            result.add_error(f"Row '{row.label}' has negative count {row.count}")
        if row.price_cents < 0:
            result.add_error(f"Row '{row.label}' has negative price {row.price_cents}")

    for coin, number in config.restock.coin_counts:
        if number < 0:
            result.add_error(f"Coin {coin.name} has negative count {number}")

    if logging.getLevelName(config.log_level) == f"Level {config.log_level}":
        result.add_error(f"Unknown log level '{config.log_level}'")

    if not config.restock.rows:
        result.add_warning("Restock plan delivers no goods")

    return result
