"""
Configuration Loader (``vending_config.loader``).

Responsibility
--------------
Loads a configuration set's YAML file and parses it into the frozen
``vending_config.schema`` dataclasses.  The single public entry point for
runtime config is ``vending_config.get_active_config()``.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required fields.
* Prices become integer cents at this boundary.  YAML reads an unquoted
  ``0.75`` as a float; it is converted through its shortest decimal
  representation and then must be a whole number of cents.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys in parsed dict  -> ``KeyError`` propagates.
* Unknown coin token  -> ``UnknownCoinError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from vending_config.schema import MachineConfiguration, RestockPlan, RowDef
from vending_kernel.domain.coin import Coin
from vending_kernel.domain.values import cents_from_amount


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_price(value: Any) -> int:
    """Parse a dollar price from YAML into cents."""
    if isinstance(value, float):
        value = Decimal(repr(value))
    return cents_from_amount(value)


def parse_row(data: dict[str, Any]) -> RowDef:
    """Parse a ``RowDef`` from a dict."""
    return RowDef(
        label=str(data["label"]),
        name=data["name"],
        category=data["category"],
        price_cents=parse_price(data["price"]),
        count=int(data.get("count", 0)),
    )


def parse_coin_counts(data: dict[str, Any]) -> tuple[tuple[Coin, int], ...]:
    """
    Parse the reserve coin counts.

    ``default_count`` applies to every coin; ``counts`` overrides
    individual coins by token.
    """
    default = int(data.get("default_count", 0))
    counts = {coin: default for coin in Coin.ascending()}
    for token, number in (data.get("counts") or {}).items():
        counts[Coin.from_token(str(token))] = int(number)
    return tuple((coin, counts[coin]) for coin in Coin.ascending())


def parse_restock(data: dict[str, Any]) -> RestockPlan:
    return RestockPlan(
        rows=tuple(parse_row(r) for r in data.get("rows") or ()),
        coin_counts=parse_coin_counts(data.get("coins") or {}),
    )


def parse_configuration(data: dict[str, Any]) -> MachineConfiguration:
    """
    Parse a whole configuration set from its root dict.

    Postconditions:
        - ``checksum`` is computed over the raw dict, before parsing.
    """
    return MachineConfiguration(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        description=data.get("description", ""),
        log_level=str(data.get("log_level", "INFO")).upper(),
        restock=parse_restock(data["restock"]),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
