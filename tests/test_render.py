import pytest

from conftest import SAMPLE_CSV
from inflation_chart.loader import parse_records
from inflation_chart.projection import project
from inflation_chart.render import build_figure, render_chart, render_page
from inflation_chart.state import AppState


@pytest.fixture
def records():
    return parse_records(SAMPLE_CSV)


def test_figure_traces_the_selected_country(records):
    fig = build_figure(project(records, "X"))
    assert len(fig.data) == 1

    trace = fig.data[0]
    assert trace.mode == "lines+markers"
    assert list(trace.x) == [2000, 2001]
    assert list(trace.y) == [3, -2]
    assert trace.line.color == "steelblue"


def test_hover_shows_year_and_inflation(records):
    trace = build_figure(project(records, "X")).data[0]
    assert list(trace.customdata) == ["Year: 2000, Inflation: 3%", "Year: 2001, Inflation: -2%"]
    assert trace.hovertemplate == "%{customdata}<extra></extra>"


def test_axis_ranges_follow_domains(records):
    fig = build_figure(project(records, "X"))
    assert tuple(fig.layout.xaxis.range) == (2000, 2001)
    assert tuple(fig.layout.yaxis.range) == (0, 3)


def test_layout_size_and_margins(records):
    fig = build_figure(project(records, "X"))
    assert fig.layout.width == 800
    assert fig.layout.height == 400
    assert (fig.layout.margin.l, fig.layout.margin.r, fig.layout.margin.t, fig.layout.margin.b) == (40, 30, 20, 30)


def test_single_point_uses_autorange():
    fig = build_figure(project(parse_records("Country,Year,Inflation\nZ,1999,4\n"), "Z"))
    assert len(fig.data[0].x) == 1
    assert fig.layout.xaxis.range is None


def test_missing_values_are_left_out():
    records = parse_records("Country,Year,Inflation\nZ,2000,1\nZ,2001,\nZ,2002,3\n")
    trace = build_figure(project(records, "Z")).data[0]
    assert list(trace.x) == [2000, 2002]


def test_empty_projection(records):
    fig = build_figure(project(records, "Atlantis"))
    assert len(fig.data) == 0
    assert fig.layout.annotations[0].text == "No data for Atlantis"


def test_render_chart_fragment(records):
    html = render_chart(project(records, "X"))
    assert 'id="chart-plot"' in html
    assert "cdn.plot.ly" in html
    assert "<html" not in html


def test_page_states(records):
    assert "Loading..." in render_page(AppState(status="loading"), [], False)
    assert "Error fetching data: boom" in render_page(AppState(status="error", error="boom"), [], False)

    state = AppState(status="ready", records=tuple(records), selection="X", projection=project(records, "X"))
    page = render_page(state, ["X", "Y"], True)
    assert '<option value="X" selected>X</option>' in page
    assert " disabled" not in page
