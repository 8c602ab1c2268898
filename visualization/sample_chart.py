"""
BeachWatch — Plotly Sample Charts

  - Enterococci history for one site, with the good / caution cutoffs
  - Site count per status across the whole map
"""

from typing import Dict, List

import pandas as pd
import plotly.graph_objects as go

from config.constants import BACTERIA_CUTOFFS, BACTERIA_FIELD, DATE_FIELD, STATUS_LEVELS, STATUSES
from features.site_record import SiteRecord


CUTOFF_LINES = [
    {"value": BACTERIA_CUTOFFS["good"],    "label": "Good limit",    "color": STATUS_LEVELS["good"]["color"]},
    {"value": BACTERIA_CUTOFFS["caution"], "label": "Caution limit", "color": STATUS_LEVELS["caution"]["color"]},
]


def build_sample_chart(record: SiteRecord) -> go.Figure:
    """
    Line chart of a site's enterococci counts over time.

    Samples without a parseable date or count are left out.
    """
    df = pd.DataFrame({
        "date": pd.to_datetime([row.get(DATE_FIELD) for row in record.data], errors="coerce", utc=True),
        "count": pd.to_numeric(
            pd.Series([row.get(BACTERIA_FIELD) for row in record.data], dtype=object),
            errors="coerce",
        ),
    })
    df = df.dropna().sort_values("date")

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=df["date"],
        y=df["count"],
        mode="lines+markers",
        line=dict(color="#2980b9", width=2),
        marker=dict(size=7, color=[_count_color(v) for v in df["count"]]),
        name="Enterococci",
        hovertemplate="<b>%{x|%Y-%m-%d}</b>: %{y:.0f} NMP/100 mL<extra></extra>",
    ))

    for line in CUTOFF_LINES:
        fig.add_hline(
            y=line["value"],
            line_dash="dash",
            line_color=line["color"],
            line_width=1,
            annotation_text=line["label"],
            annotation_position="top left",
            annotation_font_size=9,
        )

    fig.update_layout(
        title=dict(text=f"{record.site_name} — Enterococci", font=dict(size=13)),
        yaxis=dict(title="NMP / 100 mL", gridcolor="#f0f0f0", rangemode="tozero"),
        xaxis=dict(title=""),
        height=260,
        margin=dict(l=10, r=10, t=40, b=20),
        paper_bgcolor="white",
        plot_bgcolor="white",
        font=dict(family="Inter, sans-serif", size=11),
        showlegend=False,
    )
    return fig


def build_status_bar(statuses: List[str]) -> go.Figure:
    """Bar chart with the number of sites in each status."""
    counts = status_counts(statuses)
    labels = [STATUS_LEVELS[s]["label"] for s in STATUSES]
    values = [counts[s] for s in STATUSES]
    colors = [STATUS_LEVELS[s]["color"] for s in STATUSES]

    fig = go.Figure(go.Bar(
        x=labels,
        y=values,
        marker=dict(color=colors, line=dict(color="white", width=1)),
        text=[str(v) for v in values],
        textposition="outside",
        hovertemplate="<b>%{x}</b>: %{y} sites<extra></extra>",
    ))
    fig.update_layout(
        yaxis=dict(title="Sites", gridcolor="#f0f0f0", rangemode="tozero"),
        height=220,
        margin=dict(l=10, r=10, t=10, b=20),
        paper_bgcolor="white",
        plot_bgcolor="white",
        font=dict(family="Inter, sans-serif", size=11),
        showlegend=False,
    )
    return fig


def status_counts(statuses: List[str]) -> Dict[str, int]:
    counts = {s: 0 for s in STATUSES}
    for s in statuses:
        counts[s] += 1
    return counts


def _count_color(value: float) -> str:
    if value <= BACTERIA_CUTOFFS["good"]:
        return STATUS_LEVELS["good"]["color"]
    if value <= BACTERIA_CUTOFFS["caution"]:
        return STATUS_LEVELS["caution"]["color"]
    return STATUS_LEVELS["unhealthy"]["color"]
