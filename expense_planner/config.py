"""Configuration management for the expense planner.

This module centralizes all configuration values including paths,
storage constants, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in expense_planner/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("EXPENSE_PLANNER_DATA_DIR", _PROJECT_ROOT / "data"))
STORAGE_DIR = DATA_DIR / "storage"

# Persisted document layout
STORAGE_VERSION = "1.0.0"
EXPENSES_KEY = "expense_planner_expenses"
CUSTOM_CATEGORIES_KEY = "expense_planner_custom_categories"

# Most browsers cap local storage around 5-10MB; we report against 5MB
STORAGE_CAPACITY_BYTES = int(
    os.getenv("EXPENSE_PLANNER_STORAGE_CAPACITY", 5 * 1024 * 1024)
)

# Artificial latency for the location lookup endpoint, in seconds
LOOKUP_DELAY_SECONDS = float(os.getenv("EXPENSE_PLANNER_LOOKUP_DELAY", 0.5))


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STORAGE_DIR]:
        directory.mkdir(parents=True, exist_ok=True)
