"""CLI configuration: paths and the configuration set to load."""

import os
from pathlib import Path

# Project root (parent of scripts/)
ROOT = Path(__file__).resolve().parent.parent.parent

LOG_DIR = ROOT / "logs"
LOG_FILE = LOG_DIR / "vending.log"

# Configuration set under vending_config/sets/. Set VENDING_CONFIG_ID to pick another.
CONFIG_ID = os.environ.get("VENDING_CONFIG_ID", "default")
