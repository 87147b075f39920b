"""
Machine Invariants Contract.

These invariants are structural law for every machine instance. No
restock plan or configuration may switch them off.

This module exists solely to declare them explicitly. Enforcement is
distributed across CoinPool, the change engine, MoneyEngine and
InventoryLedger.
"""

from enum import Enum, unique


@unique
class MachineInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel.

    Each value names one structural guarantee that the machine provides
    unconditionally.
    """

    EXACT_CENTS = "exact_cents"
    """All money is integer cents. Prices with a fractional cent are
    rejected at construction (vending_kernel.domain.values)."""

    NON_NEGATIVE_POOL = "non_negative_pool"
    """No coin count in either pool is ever negative. Enforced by
    CoinPool construction and CoinPool.minus."""

    UNIQUE_LABEL = "unique_label"
    """At most one row per label, compared case-insensitively. A breach
    raises DuplicateLabelError at lookup or restock time."""

    FIXED_LABEL_ITEM = "fixed_label_item"
    """A label's item definition cannot change while stock exists under
    it. Conflicting restock rows are rejected without mutation."""

    NO_SPECULATIVE_MUTATION = "no_speculative_mutation"
    """The change search reads pools only. Pools change after a winning
    coin multiset is known, never during the search."""

    ATOMIC_SETTLEMENT = "atomic_settlement"
    """Dispensing change and moving the purchase buffer into the reserve
    happen as one replacement of both pools (MoneyEngine.settle)."""


# All invariants as a frozenset for programmatic checks.
ALL_MACHINE_INVARIANTS: frozenset[MachineInvariant] = frozenset(MachineInvariant)

# The kernel package may not import from these packages.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "vending_services",
    "vending_config",
    "vending_engines",
)
