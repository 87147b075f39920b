"""
vending_config -- single public entrypoint for machine configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration
    files.  Configuration sets are bundled with the package under
    ``vending_config/sets/<config_id>/root.yaml``.

Architecture position:
    Configuration -- sits above ``vending_kernel`` and below
    ``vending_services`` and the CLI.  The kernel MUST NEVER import from
    ``vending_config``.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Validation before use: a set with errors is never returned.
    - Deterministic identity: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the requested id.
    - ``ValueError`` -- schema or validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``VENDING_CONFIG_TRACE`` log entry with the config id, version,
    checksum and restock summary.
"""

from __future__ import annotations

import logging
from pathlib import Path

from vending_config.loader import load_yaml_file, parse_configuration
from vending_config.schema import MachineConfiguration, RestockPlan, RowDef
from vending_config.validator import ConfigValidationResult, validate_configuration

_logger = logging.getLogger("vending_kernel.config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

DEFAULT_CONFIG_ID = "default"


def get_active_config(
    config_id: str = DEFAULT_CONFIG_ID,
    config_dir: Path | None = None,
) -> MachineConfiguration:
    """The ONLY public configuration entrypoint.

    Args:
        config_id: Name of the configuration set directory.
        config_dir: Override path to the configuration sets directory.
            Defaults to vending_config/sets/.

    Returns:
        A validated, frozen MachineConfiguration.

    Raises:
        FileNotFoundError: If no matching configuration set is found.
        ValueError: If configuration validation fails.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    root_file = sets_dir / config_id / "root.yaml"
    if not root_file.is_file():
        raise FileNotFoundError(
            f"No configuration set '{config_id}' in {sets_dir}"
        )

    config = parse_configuration(load_yaml_file(root_file))

    validation = validate_configuration(config)
    if not validation.is_valid:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in validation.errors)
        )
    for warning in validation.warnings:
        _logger.warning("config_validation_warning", extra={
            "config_set_id": config.config_id,
            "warning": warning,
        })

    _logger.info(
        "VENDING_CONFIG_TRACE",
        extra={
            "trace_type": "VENDING_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
            "row_count": len(config.restock.rows),
            "reserve_cents": config.restock.money().total_cents,
        },
    )
    return config


__all__ = [
    "ConfigValidationResult",
    "DEFAULT_CONFIG_ID",
    "MachineConfiguration",
    "RestockPlan",
    "RowDef",
    "get_active_config",
    "validate_configuration",
]
