"""Main entry point for the Streamlit multi-page app.

Pages in the pages/ directory appear automatically in the sidebar.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import streamlit as st

# Add project root to path for imports
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from expense_planner import config
from expense_planner.cost_of_living import get_all_cities
from expense_planner.storage import get_storage


def main() -> None:
    """Render the welcome page."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    st.set_page_config(
        page_title="Expense Planner",
        page_icon="🌰",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    config.ensure_data_directories()

    info = get_storage().get_storage_info()

    st.markdown("""
    # Welcome to the Expense Planner! 🌰

    This dashboard helps you:
    - 🧭 **Plan a monthly budget** from average living costs in your city
    - 💸 **Track expenses** with automatic category suggestions
    - 📊 **Review spending** by category and time period
    - 📤 **Export and import** your data as JSON

    ## Getting Started

    1. Open **Budget Suggestions** and enter your city, e.g. `New York, NY`
    2. Open **Expenses** to record what you spend
    """)

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Recorded expenses", info['record_count'])
    with col2:
        st.metric("Cities with budget data", len(get_all_cities()))


if __name__ == "__main__":
    main()
