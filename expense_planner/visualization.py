"""Plotly visualisation helpers for the expense planner.

Each function takes the output of :mod:`analytics` or a
:class:`~expense_planner.cost_of_living.BudgetTemplate` and returns a
``plotly.graph_objects.Figure`` that Streamlit renders with
``st.plotly_chart``. Empty input yields a blank figure titled
"No data to display" rather than an error.
"""

from __future__ import annotations

from typing import Mapping, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .cost_of_living import BUDGET_CATEGORIES, BudgetTemplate


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_budget_pie_chart(template: BudgetTemplate,
                            budget: Optional[Mapping[str, float]] = None,
                            title: str | None = None) -> go.Figure:
    """Pie chart of a monthly budget split across the seven categories.

    Parameters
    ----------
    template : BudgetTemplate
        Suggested budget for a location.
    budget : mapping, optional
        Adjusted amounts to chart instead of the template's own figures.
    title : str, optional
        Chart title.  Defaults to the location name.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart of category amounts.
    """
    amounts = dict(budget if budget is not None else template.budget)
    labels = {key: f"{icon} {label}" for key, label, icon in BUDGET_CATEGORIES}
    df = pd.DataFrame(
        [{'Category': labels.get(key, key), 'Amount': value} for key, value in amounts.items()]
    )
    if df.empty or df['Amount'].sum() <= 0:
        return _empty_figure()
    fig = px.pie(df, names='Category', values='Amount', hole=0.4)
    fig.update_layout(title=title or f"Suggested budget for {template.display_name}")
    return fig


def create_category_spending_chart(summary: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Horizontal bar chart of spending per category.

    Parameters
    ----------
    summary : pandas.DataFrame
        Output of :func:`analytics.category_summary`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bars coloured with each category's own colour.
    """
    if summary.empty:
        return _empty_figure()
    df = summary.sort_values('Total')
    fig = go.Figure(
        go.Bar(
            x=df['Total'],
            y=df['Icon'] + ' ' + df['Category'],
            orientation='h',
            marker_color=df['Color'],
            customdata=df['Percentage'],
            hovertemplate='%{y}: $%{x:,.2f} (%{customdata:.1f}%)<extra></extra>',
        )
    )
    fig.update_layout(
        title=title or "Spending by category",
        xaxis_title="Amount",
        yaxis_title="",
    )
    return fig


def create_daily_spending_chart(daily: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Line chart of daily spend.

    Parameters
    ----------
    daily : pandas.DataFrame
        Output of :func:`analytics.daily_totals`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Line chart of amount per day.
    """
    if daily.empty:
        return _empty_figure()
    df = daily.reset_index()
    fig = px.line(df, x='Date', y='Amount', markers=True)
    fig.update_layout(
        title=title or "Daily spending",
        xaxis_title="Date",
        yaxis_title="Amount",
    )
    return fig


def create_budget_comparison_chart(comparison: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped bars of budgeted versus actual spend per category."""
    if comparison.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(name='Budget', x=comparison['Category'], y=comparison['Budget']))
    fig.add_trace(go.Bar(name='Actual', x=comparison['Category'], y=comparison['Actual']))
    fig.update_layout(
        title=title or "Budget vs actual",
        barmode='group',
        xaxis_title="Category",
        yaxis_title="Amount",
    )
    return fig
