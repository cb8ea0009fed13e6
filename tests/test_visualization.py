"""Tests for expense_planner.visualization."""

from __future__ import annotations

import pandas as pd

from expense_planner.analytics import budget_comparison, category_summary, daily_totals
from expense_planner.cost_of_living import get_cost_of_living
from expense_planner.models import ExpenseRecord
from expense_planner.visualization import (
    create_budget_comparison_chart,
    create_budget_pie_chart,
    create_category_spending_chart,
    create_daily_spending_chart,
)

EXPENSES = [
    ExpenseRecord(id='1', amount=40.0, merchant='Grocer', category='food', date='2024-03-01'),
    ExpenseRecord(id='2', amount=25.0, merchant='Shell', category='transportation', date='2024-03-02'),
]


def test_budget_pie_chart() -> None:
    template = get_cost_of_living('Chicago, IL')
    fig = create_budget_pie_chart(template)
    assert fig.layout.title.text == 'Suggested budget for Chicago, IL'
    assert fig.data[0].type == 'pie'
    assert fig.data[0].hole == 0.4
    assert sum(fig.data[0].values) == template.total


def test_budget_pie_chart_uses_adjusted_amounts() -> None:
    template = get_cost_of_living('Chicago, IL')
    budget = dict(template.budget, housing=0)
    fig = create_budget_pie_chart(template, budget, title='Mine')
    assert fig.layout.title.text == 'Mine'
    assert sum(fig.data[0].values) == template.total - template.budget['housing']


def test_budget_pie_chart_with_zero_budget_is_empty() -> None:
    template = get_cost_of_living('Chicago, IL')
    fig = create_budget_pie_chart(template, {key: 0 for key in template.budget})
    assert fig.layout.title.text == 'No data to display'
    assert len(fig.data) == 0


def test_category_spending_chart() -> None:
    fig = create_category_spending_chart(category_summary(EXPENSES))
    assert fig.data[0].type == 'bar'
    assert fig.data[0].orientation == 'h'
    assert list(fig.data[0].x) == [25.0, 40.0]


def test_daily_spending_chart() -> None:
    fig = create_daily_spending_chart(daily_totals(EXPENSES))
    assert fig.layout.title.text == 'Daily spending'
    assert list(fig.data[0].y) == [40.0, 25.0]


def test_budget_comparison_chart() -> None:
    comparison = budget_comparison({'food': 100, 'transportation': 50}, EXPENSES)
    fig = create_budget_comparison_chart(comparison)
    assert [trace.name for trace in fig.data] == ['Budget', 'Actual']
    assert fig.layout.barmode == 'group'


def test_empty_inputs_give_placeholder_figure() -> None:
    for fig in (
        create_category_spending_chart(category_summary([])),
        create_daily_spending_chart(daily_totals([])),
        create_budget_comparison_chart(pd.DataFrame()),
    ):
        assert fig.layout.title.text == 'No data to display'
        assert len(fig.data) == 0
