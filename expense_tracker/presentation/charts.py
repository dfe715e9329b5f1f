"""
Spending Charts

Builds the two plotly figures shown on the page from the category summary.
Figures are plain data; rendering them is the page's job.
"""

from typing import Iterable

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from expense_tracker.models.expense import Category, CategoryTotal


CATEGORY_COLORS = {
    Category.FOOD.value: "#0088FE",
    Category.TRAVEL.value: "#00C49F",
    Category.ENTERTAINMENT.value: "#FFBB28",
}
BAR_COLOR = "#8884d8"
CHART_HEIGHT = 250


def summary_frame(summary: Iterable[CategoryTotal]) -> pd.DataFrame:
    """One row per category, in summary order."""
    rows = [
        {"Category": row.category.value, "Total": float(row.total)}
        for row in summary
    ]
    return pd.DataFrame(rows, columns=["Category", "Total"])


def distribution_chart(summary: Iterable[CategoryTotal]) -> go.Figure:
    """Pie chart of each category's share of total spending."""
    df = summary_frame(summary)
    fig = px.pie(
        df,
        names="Category",
        values="Total",
        color="Category",
        color_discrete_map=CATEGORY_COLORS,
        title="Expense Summary",
        height=CHART_HEIGHT,
    )
    fig.update_traces(textinfo="label+value", sort=False)
    fig.update_layout(margin=dict(l=10, r=10, t=40, b=10))
    return fig


def category_totals_chart(summary: Iterable[CategoryTotal]) -> go.Figure:
    """Bar chart of the amount spent per category."""
    df = summary_frame(summary)
    fig = px.bar(
        df,
        x="Category",
        y="Total",
        title="Expense Trends",
        height=CHART_HEIGHT,
    )
    fig.update_traces(marker_color=BAR_COLOR)
    fig.update_layout(
        margin=dict(l=10, r=10, t=40, b=10),
        xaxis_title=None,
        yaxis_title=None,
    )
    return fig
