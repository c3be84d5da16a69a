"""
Runtime settings.

Defaults live here as module constants; every one of them can be overridden
through an ``INFLATION_CHART_*`` environment variable.
"""

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

DATA_URL = "https://datahub.io/core/inflation/r/inflation-gdp.csv"

CATEGORY_FIELD = "Country"
YEAR_FIELD = "Year"
VALUE_FIELD = "Inflation"

ENV_PREFIX = "INFLATION_CHART_"

EmptyDatasetPolicy = Literal["empty", "error"]


class Margins(BaseModel):
    top: int = 20
    right: int = 30
    bottom: int = 30
    left: int = 40


class ChartLayout(BaseModel):
    """Outer size of the chart surface in pixels, plus the margins around the plot area."""

    width: int = Field(default=800, gt=0)
    height: int = Field(default=400, gt=0)
    margins: Margins = Field(default_factory=Margins)

    @property
    def inner_width(self) -> int:
        return self.width - self.margins.left - self.margins.right

    @property
    def inner_height(self) -> int:
        return self.height - self.margins.top - self.margins.bottom


class Columns(BaseModel):
    category: str = CATEGORY_FIELD
    year: str = YEAR_FIELD
    value: str = VALUE_FIELD


class Settings(BaseModel):
    data_url: str = DATA_URL
    columns: Columns = Field(default_factory=Columns)
    layout: ChartLayout = Field(default_factory=ChartLayout)
    # "empty": an empty dataset is a legitimate state (no selection, disabled selector)
    # "error": an empty dataset is reported as a load error
    empty_dataset: EmptyDatasetPolicy = "empty"
    timeout: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Unset variables fall back to the defaults above. Invalid values raise
    pydantic's ValidationError.
    """
    env = os.environ if environ is None else environ

    def get(name: str) -> Optional[str]:
        value = env.get(ENV_PREFIX + name)
        return value if value not in (None, "") else None

    data: dict = {}
    columns: dict = {}

    if get("DATA_URL"):
        data["data_url"] = get("DATA_URL")
    if get("EMPTY_DATASET"):
        data["empty_dataset"] = get("EMPTY_DATASET")
    if get("TIMEOUT"):
        data["timeout"] = get("TIMEOUT")
    if get("LOG_LEVEL"):
        data["log_level"] = get("LOG_LEVEL")
    if get("LOG_FILE"):
        data["log_file"] = get("LOG_FILE")

    for key in ("category", "year", "value"):
        value = get(f"{key.upper()}_FIELD")
        if value:
            columns[key] = value
    if columns:
        data["columns"] = columns

    return Settings.model_validate(data)
