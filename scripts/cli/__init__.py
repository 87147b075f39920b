"""
Interactive vending machine shell.

Shows the shelves and coin pools, reads one command per line and prints
what the machine did. All behaviour lives in vending_services; this
package only reads and renders.

Entry point: scripts/vend.py or python -m scripts.cli
"""

from scripts.cli.main import main

__all__ = ["main"]
