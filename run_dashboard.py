#!/usr/bin/env python3
"""Direct launcher for the Expense Planner dashboard.

This script launches Streamlit with the expense_planner directory as the app root,
enabling automatic page discovery from the pages/ subdirectory.
"""

import sys
import subprocess
import os
from pathlib import Path

# Get the project root and expense_planner directory
project_root = Path(__file__).parent.resolve()
app_dir = project_root / "expense_planner"

if __name__ == "__main__":
    # Streamlit discovers pages/ relative to the entry script
    os.chdir(app_dir)
    sys.path.insert(0, str(project_root))
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        "Home.py"
    ])
