"""Top‑level package for the Expense Planner.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``cost_of_living`` – average monthly budgets by city
* ``expense_utils`` – validation, categorization, filtering and summaries
* ``storage`` – persistence of expenses and custom categories
* ``analytics`` / ``visualization`` – pandas tables and Plotly figures
* ``api`` – FastAPI service for the location lookup

To run the dashboard from the command line you can execute:

```bash
python run_dashboard.py
```

and to serve the lookup API:

```bash
uvicorn expense_planner.api:app
```
"""

from . import cost_of_living  # noqa: F401  # re-exported for convenience
from . import expense_utils  # noqa: F401  # re-exported for convenience
from . import storage  # noqa: F401  # re-exported for convenience

__all__ = ["cost_of_living", "expense_utils", "storage"]
