"""
Vending Kernel

The in-memory state model of a coin-operated vending machine:
- Five fixed coin denominations, integer-cent arithmetic only
- Immutable item and coin-pool value objects
- Typed errors separating advisory failures from broken invariants
- Structured JSON logging
"""

__version__ = "0.1.0"
