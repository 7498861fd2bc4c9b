"""Top‑level package for the Expense Tracker.

The primary modules are:

* ``aggregation`` – pure totals, category breakdowns and day buckets
* ``validation`` – entry form rules
* ``export`` – CSV and PDF export
* ``db`` – the SQLite expense store
* ``service`` – UI state over the store, used by the dashboard

To run the dashboard from the command line you can execute:

```bash
streamlit run expense_tracker/dashboard.py
```
"""

from . import aggregation  # noqa: F401  # re-exported for convenience
from . import export  # noqa: F401  # re-exported for convenience
from . import validation  # noqa: F401  # re-exported for convenience
from .categories import ExpenseCategory
from .models import CategoryTotal, ExpenseRecord

__all__ = [
    "aggregation",
    "export",
    "validation",
    "ExpenseCategory",
    "ExpenseRecord",
    "CategoryTotal",
]
