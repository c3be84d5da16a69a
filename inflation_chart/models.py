from __future__ import annotations

from types import MappingProxyType
from typing import List, Literal, Mapping, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field

from .config import ChartLayout


Status = Literal["idle", "loading", "ready", "error"]


class Record(BaseModel):
    """One parsed CSV row."""

    model_config = ConfigDict(frozen=True)

    category: Optional[str] = None
    year: Optional[Union[int, float]] = None
    value: Optional[int] = None
    # raw row as (header, text) pairs, in header order
    raw: Tuple[Tuple[str, str], ...] = ()

    @property
    def fields(self) -> Mapping[str, str]:
        """The raw row keyed by header name, read-only."""
        return MappingProxyType(dict(self.raw))


class TooltipLabel(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: Optional[Union[int, float]] = None
    value: Optional[int] = None

    @property
    def text(self) -> str:
        return f"Year: {_fmt(self.year)}, Inflation: {_fmt(self.value)}%"


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: Optional[Union[int, float]] = None
    value: Optional[int] = None
    # None when the record cannot be placed on the chart
    x: Optional[float] = None
    y: Optional[float] = None
    label: TooltipLabel

    @property
    def plottable(self) -> bool:
        return self.x is not None and self.y is not None


class Projection(BaseModel):
    model_config = ConfigDict(frozen=True)

    selection: Optional[str] = None
    x_domain: Optional[Tuple[float, float]] = None
    y_domain: Optional[Tuple[float, float]] = None
    points: List[Point] = Field(default_factory=list)
    line: List[Tuple[float, float]] = Field(default_factory=list)
    path: Optional[str] = None
    layout: ChartLayout = Field(default_factory=ChartLayout)

    @property
    def is_empty(self) -> bool:
        return not self.points


class HealthResponse(BaseModel):
    ok: bool = True
    status: Status = "idle"


class CountriesResponse(BaseModel):
    countries: List[str] = Field(default_factory=list)
    selected: Optional[str] = None
    enabled: bool = False


class SelectionRequest(BaseModel):
    country: str


class ProjectionResponse(BaseModel):
    status: Status
    projection: Projection


def _fmt(number: Optional[float]) -> str:
    if number is None:
        return ""
    if float(number).is_integer():
        return str(int(number))
    return str(number)
