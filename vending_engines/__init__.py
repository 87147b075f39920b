"""
Module: vending_engines
Responsibility:
    Package entrypoint that re-exports the pure calculation engines.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import vending_kernel.domain and vending_kernel.logging_config.
    MUST NOT import vending_services or vending_config.

Invariants enforced:
    - Integer-cent arithmetic only.
    - Determinism: identical inputs always produce identical outputs.
    - Engines read the pools they are given and never mutate state.

Audit relevance:
    Every engine invocation is traced via ``@traced_engine`` (see
    ``vending_engines.tracer``), emitting VENDING_ENGINE_TRACE records.

Usage:
    from vending_engines.change import ChangeEngine, ChangePlan
"""

from vending_engines.change import ChangeEngine, ChangePlan
from vending_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "ChangeEngine",
    "ChangePlan",
    "compute_input_fingerprint",
    "traced_engine",
]
