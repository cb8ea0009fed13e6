"""Tabular summaries of expenses for the dashboard.

These helpers turn lists of ``ExpenseRecord`` into pandas DataFrames for
display and charting. They hold no state and never touch storage.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from .categories import Category, get_category_by_id, get_payment_method_label
from .expense_utils import category_breakdown
from .models import ExpenseRecord

EXPENSE_COLUMNS = [
    'id', 'Date', 'Merchant', 'Category', 'Amount',
    'Payment Method', 'Recurring', 'Frequency', 'Status', 'Notes',
]
CATEGORY_SUMMARY_COLUMNS = ['Category ID', 'Category', 'Icon', 'Color', 'Count', 'Total', 'Percentage']


def expenses_to_dataframe(expenses: Sequence[ExpenseRecord],
                          custom_categories: Optional[Iterable[Category]] = None) -> pd.DataFrame:
    """Build a display table with one row per expense.

    Category ids are resolved to names and dates are parsed; rows with an
    unparseable date keep NaT.
    """
    custom = list(custom_categories or [])
    rows: List[Dict[str, Any]] = []
    for expense in expenses:
        category = get_category_by_id(expense.category, custom)
        rows.append({
            'id': expense.id,
            'Date': expense.parsed_date,
            'Merchant': expense.merchant,
            'Category': f"{category.icon} {category.name}",
            'Amount': expense.amount,
            'Payment Method': get_payment_method_label(expense.payment_method),
            'Recurring': expense.is_recurring,
            'Frequency': expense.frequency if expense.is_recurring else '',
            'Status': expense.status,
            'Notes': expense.notes,
        })

    df = pd.DataFrame(rows, columns=EXPENSE_COLUMNS)
    df['Date'] = pd.to_datetime(df['Date'], errors='coerce')
    df['Amount'] = pd.to_numeric(df['Amount'], errors='coerce').fillna(0.0)
    return df


def category_summary(expenses: Sequence[ExpenseRecord],
                     custom_categories: Optional[Iterable[Category]] = None) -> pd.DataFrame:
    """Spending per category, largest total first."""
    rows = []
    for group in category_breakdown(list(expenses), custom_categories):
        category = group['category']
        rows.append({
            'Category ID': category.id,
            'Category': category.name,
            'Icon': category.icon,
            'Color': category.color,
            'Count': len(group['expenses']),
            'Total': group['total'],
            'Percentage': group['percentage'],
        })
    return pd.DataFrame(rows, columns=CATEGORY_SUMMARY_COLUMNS)


def daily_totals(expenses: Sequence[ExpenseRecord]) -> pd.DataFrame:
    """Total spend per calendar day, indexed by date.

    Days without expenses inside the covered range are filled with zero so
    line charts don't skip gaps.
    """
    df = expenses_to_dataframe(expenses).dropna(subset=['Date'])
    if df.empty:
        return pd.DataFrame(columns=['Amount'], index=pd.DatetimeIndex([], name='Date'))

    totals = df.groupby(df['Date'].dt.normalize())['Amount'].sum()
    full_range = pd.date_range(totals.index.min(), totals.index.max(), freq='D')
    totals = totals.reindex(full_range, fill_value=0.0)
    totals.index.name = 'Date'
    return totals.to_frame(name='Amount')


def budget_comparison(budget: Dict[str, float], expenses: Sequence[ExpenseRecord]) -> pd.DataFrame:
    """Compare a monthly budget with actual spend in the same categories.

    Expenses whose category has no budget line are counted under 'other'.
    """
    actual = {key: 0.0 for key in budget}
    for group in category_breakdown(list(expenses)):
        key = group['category'].id
        target = key if key in actual else 'other'
        if target in actual:
            actual[target] += group['total']

    rows = []
    for key, amount in budget.items():
        rows.append({
            'Category': key,
            'Budget': float(amount),
            'Actual': actual[key],
            'Remaining': float(amount) - actual[key],
        })
    return pd.DataFrame(rows, columns=['Category', 'Budget', 'Actual', 'Remaining'])
