"""Chart figure and HTML page rendering."""

from __future__ import annotations

from html import escape
from typing import List, Optional

import plotly.graph_objects as go

from .models import Projection
from .state import AppState

LINE_COLOR = "steelblue"
CHART_DIV_ID = "chart-plot"


def build_figure(projection: Projection) -> go.Figure:
    """Line chart of the projected points; hovering a point shows its label."""
    layout = projection.layout
    m = layout.margins
    plotted = [p for p in projection.points if p.plottable]

    if not plotted:
        fig = _empty_fig(f"No data for {projection.selection}" if projection.selection else "No data")
    else:
        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=[p.year for p in plotted],
            y=[p.value for p in plotted],
            mode="lines+markers",
            name=projection.selection,
            line=dict(color=LINE_COLOR, width=1.5),
            marker=dict(color=LINE_COLOR, size=4),
            customdata=[p.label.text for p in plotted],
            hovertemplate="%{customdata}<extra></extra>",
        ))
        # y starts at zero; a degenerate domain is left to autorange
        if projection.x_domain and projection.x_domain[0] != projection.x_domain[1]:
            fig.update_xaxes(range=list(projection.x_domain))
        if projection.y_domain and projection.y_domain[0] != projection.y_domain[1]:
            fig.update_yaxes(range=list(projection.y_domain))

    fig.update_layout(
        width=layout.width,
        height=layout.height,
        margin=dict(l=m.left, r=m.right, t=m.top, b=m.bottom),
        template="simple_white",
        showlegend=False,
    )
    return fig


def _empty_fig(msg: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=msg, showarrow=False, xref="paper", yref="paper", x=0.5, y=0.5)
    fig.update_layout(xaxis=dict(visible=False), yaxis=dict(visible=False))
    return fig


def render_chart(projection: Projection) -> str:
    """HTML fragment with the interactive chart; plotly.js comes from the CDN."""
    return build_figure(projection).to_html(full_html=False, include_plotlyjs="cdn", div_id=CHART_DIV_ID)


def render_page(state: AppState, countries: List[str], enabled: bool, title: str = "Inflation Data") -> str:
    refresh = ""
    if state.status in ("idle", "loading"):
        body = "<div>Loading...</div>"
        refresh = '<meta http-equiv="refresh" content="2">'
    elif state.status == "error":
        body = f"<div>Error fetching data: {escape(state.error or '')}</div>"
    else:
        body = "\n".join([
            f"<h1>{escape(title)}</h1>",
            '<form method="post" action="/selection">',
            '<label for="countrySelect">Select Country:</label>',
            _render_select(countries, state.selection, enabled),
            "</form>",
            f'<div id="chart">{render_chart(state.projection)}</div>',
        ])

    return (
        "<!doctype html>\n"
        f'<html><head><meta charset="utf-8">{refresh}<title>{escape(title)}</title></head>\n'
        f"<body>\n{body}\n</body></html>\n"
    )


def _render_select(countries: List[str], selected: Optional[str], enabled: bool) -> str:
    options = [
        f'<option value="{escape(c)}"{" selected" if c == selected else ""}>{escape(c)}</option>'
        for c in countries
    ]
    disabled = "" if enabled else " disabled"
    return (
        f'<select id="countrySelect" name="country" onchange="this.form.submit()"{disabled}>'
        + "".join(options)
        + "</select>"
    )
