#!/usr/bin/env python3
"""
Interactive vending machine.

Insert coins by name (nickle, dime, quarter, halfdollar, dollarcoin),
buy by shelf label (a1, b2, ...), or type refund, restock or quit.

Usage:
    python3 scripts/vend.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from scripts.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
