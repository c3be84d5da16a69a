"""
Chart projection.

Turns the full record set plus a selected category into plotted points and
the connecting line. Pure: no caching, same input, same output.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .config import ChartLayout
from .models import Point, Projection, Record, TooltipLabel
from .scales import LinearScale, format_coord


def filter_records(records: Sequence[Record], selection: Optional[str]) -> List[Record]:
    """Records whose category equals ``selection``, in input order."""
    if selection is None:
        return []
    return [r for r in records if r.category == selection]


def x_domain(records: Sequence[Record]) -> Optional[Tuple[float, float]]:
    years = [r.year for r in records if r.year is not None]
    if not years:
        return None
    return (min(years), max(years))


def y_domain(records: Sequence[Record]) -> Optional[Tuple[float, float]]:
    # lower bound pinned at zero, whatever the data minimum
    values = [r.value for r in records if r.value is not None]
    if not values:
        return None
    return (0, max(values))


def line_path(vertices: Sequence[Tuple[float, float]]) -> Optional[str]:
    """SVG path data for a polyline, None when there is nothing to draw."""
    if not vertices:
        return None
    head, *tail = vertices
    parts = [f"M{format_coord(head[0])},{format_coord(head[1])}"]
    parts.extend(f"L{format_coord(x)},{format_coord(y)}" for x, y in tail)
    return "".join(parts)


def project(
    records: Sequence[Record],
    selection: Optional[str],
    layout: Optional[ChartLayout] = None,
) -> Projection:
    layout = layout or ChartLayout()
    subset = filter_records(records, selection)

    xd = x_domain(subset)
    yd = y_domain(subset)
    x = LinearScale(xd, (0, layout.inner_width)) if xd is not None else None
    y = LinearScale(yd, (layout.inner_height, 0)) if yd is not None else None

    points: List[Point] = []
    for r in subset:
        plottable = x is not None and y is not None and r.year is not None and r.value is not None
        points.append(
            Point(
                year=r.year,
                value=r.value,
                x=x(r.year) if plottable else None,
                y=y(r.value) if plottable else None,
                label=TooltipLabel(year=r.year, value=r.value),
            )
        )

    line = [(p.x, p.y) for p in points if p.plottable]

    return Projection(
        selection=selection,
        x_domain=xd,
        y_domain=yd,
        points=points,
        line=line,
        path=line_path(line),
        layout=layout,
    )

