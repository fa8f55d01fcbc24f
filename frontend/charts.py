"""Plotly figures and table styling for the RetailIntel page.

Every builder takes the plain row dicts produced by
``app.services.aggregation_service`` and returns a figure; nothing here
reads dashboard state.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import pandas as pd
import plotly.express as px
from plotly.graph_objects import Figure

from app.domain.assortment import PRICE_BUCKETS

Rows = Sequence[dict[str, Any]]

# ── Palette ────────────────────────────────────────────────────────────────
INK = "#0f172a"
SLATE = "#64748b"
EMPTY_CELL = "#f8fafc"
SERIES_COLOURS = [
    "#0f172a", "#334155", "#64748b", "#94a3b8",
    "#1e3a8a", "#3b82f6", "#0ea5e9", "#14b8a6",
]

CATEGORY_MIX_LIMIT = 8

# Cell intensity scales: counts at or above the ceiling get full colour.
HEATMAP_CEILING = 200
DEEP_DIVE_CEILING = 25


def _base_layout(fig: Figure, *, height: int = 360) -> Figure:
    fig.update_layout(
        height=height,
        plot_bgcolor="white",
        paper_bgcolor="white",
        margin=dict(l=40, r=20, t=40, b=40),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        font=dict(size=11, color=INK),
    )
    fig.update_xaxes(showgrid=False)
    fig.update_yaxes(showgrid=True, gridwidth=1, gridcolor="#f0f0f0")
    return fig


def _long_form(rows: Rows, id_column: str, var_name: str, value_name: str) -> pd.DataFrame:
    """Melt wide ``{id, <series>: value}`` rows into long form for px."""
    frame = pd.DataFrame(list(rows))
    if frame.empty:
        return pd.DataFrame(columns=[id_column, var_name, value_name])
    return frame.melt(id_vars=[id_column], var_name=var_name, value_name=value_name)


# ── Selected brand ─────────────────────────────────────────────────────────
def price_distribution_chart(rows: Rows) -> Figure:
    frame = pd.DataFrame(list(rows), columns=["bucket", "count"])
    fig = px.bar(
        frame,
        x="bucket",
        y="count",
        text_auto=True,
        category_orders={"bucket": list(PRICE_BUCKETS)},
        color_discrete_sequence=[INK],
    )
    fig.update_layout(xaxis_title="Price tier", yaxis_title="Styles")
    return _base_layout(fig)


def category_mix_chart(rows: Rows, limit: int = CATEGORY_MIX_LIMIT) -> Figure:
    """Donut of the largest categories; rows arrive already sorted."""
    frame = pd.DataFrame(list(rows)[:limit], columns=["category", "total"])
    fig = px.pie(
        frame,
        names="category",
        values="total",
        hole=0.4,
        color_discrete_sequence=SERIES_COLOURS,
    )
    fig.update_traces(textposition="inside", textinfo="percent")
    return _base_layout(fig)


def catalog_matrix_chart(rows: Rows) -> Figure:
    """Stacked horizontal bars: one bar per category, one segment per price tier."""
    frame = _long_form(rows, "category", "bucket", "styles")
    fig = px.bar(
        frame,
        y="category",
        x="styles",
        color="bucket",
        orientation="h",
        category_orders={"bucket": list(PRICE_BUCKETS)},
        color_discrete_sequence=SERIES_COLOURS,
    )
    fig.update_layout(barmode="stack", yaxis_title=None, xaxis_title="Styles")
    fig.update_yaxes(autorange="reversed")
    return _base_layout(fig, height=560)


# ── Cross-brand ────────────────────────────────────────────────────────────
def cross_brand_assortment_chart(rows: Rows, highlight: Optional[str] = None) -> Figure:
    frame = pd.DataFrame(list(rows), columns=["name", "total_styles", "logo"])
    colours = [INK if name == highlight else SLATE for name in frame["name"]]
    fig = px.bar(frame, y="name", x="total_styles", orientation="h", text_auto=True)
    fig.update_traces(marker_color=colours)
    fig.update_layout(yaxis_title=None, xaxis_title="Total styles")
    fig.update_yaxes(autorange="reversed")
    return _base_layout(fig)


def pricing_curve_chart(rows: Rows) -> Figure:
    frame = _long_form(rows, "bucket", "brand", "styles")
    fig = px.line(
        frame,
        x="bucket",
        y="styles",
        color="brand",
        markers=True,
        category_orders={"bucket": list(PRICE_BUCKETS)},
        color_discrete_sequence=SERIES_COLOURS,
    )
    fig.update_layout(hovermode="x unified", xaxis_title="Price tier", yaxis_title="Styles")
    return _base_layout(fig)


def category_drilldown_chart(rows: Rows) -> Figure:
    """Stacked bars per brand for the chosen category."""
    frame = _long_form(rows, "brand", "bucket", "styles")
    fig = px.bar(
        frame,
        x="brand",
        y="styles",
        color="bucket",
        category_orders={"bucket": list(PRICE_BUCKETS)},
        color_discrete_sequence=SERIES_COLOURS,
    )
    fig.update_layout(barmode="stack", xaxis_title=None, yaxis_title="Styles")
    return _base_layout(fig, height=420)


# ── Styled tables ──────────────────────────────────────────────────────────
def cell_intensity(value: int, ceiling: int) -> float:
    """Fraction of full colour for a count, clamped to [0, 1]."""
    if ceiling <= 0 or value <= 0:
        return 0.0
    return min(value / ceiling, 1.0)


def heatmap_cell_style(value: Any, ceiling: int = HEATMAP_CEILING) -> str:
    if not isinstance(value, (int, float)) or value <= 0:
        return f"background-color: {EMPTY_CELL}; color: #cbd5e1"
    alpha = cell_intensity(int(value), ceiling) * 0.8 + 0.05
    colour = "white" if value > ceiling / 2 else "#1e293b"
    return f"background-color: rgba(15, 23, 42, {alpha:.3f}); color: {colour}"


def deep_dive_cell_style(value: Any, ceiling: int = DEEP_DIVE_CEILING) -> str:
    if not isinstance(value, (int, float)) or value <= 0:
        return "color: #cbd5e1"
    alpha = cell_intensity(int(value), ceiling) * 0.4 + 0.05
    return f"background-color: rgba(15, 23, 42, {alpha:.3f}); color: #1e293b"


def styled_table(rows: Rows, index: str, cell_style) -> Any:
    """Return a pandas Styler for *rows* indexed by *index*."""
    frame = pd.DataFrame(list(rows))
    if frame.empty:
        return frame
    frame = frame.set_index(index)
    return frame.style.map(cell_style)
