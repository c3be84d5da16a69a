import pytest
from pydantic import ValidationError

from inflation_chart.config import DATA_URL, load_settings


def test_defaults():
    settings = load_settings({})
    assert settings.data_url == DATA_URL
    assert settings.columns.category == "Country"
    assert settings.layout.width == 800
    assert settings.layout.inner_width == 730
    assert settings.empty_dataset == "empty"


def test_environment_overrides():
    settings = load_settings({
        "INFLATION_CHART_DATA_URL": "https://example.test/cpi.csv",
        "INFLATION_CHART_VALUE_FIELD": "CPI",
        "INFLATION_CHART_EMPTY_DATASET": "error",
        "INFLATION_CHART_TIMEOUT": "5",
        "INFLATION_CHART_LOG_LEVEL": "debug",
    })
    assert settings.data_url == "https://example.test/cpi.csv"
    assert settings.columns.value == "CPI"
    assert settings.columns.year == "Year"
    assert settings.empty_dataset == "error"
    assert settings.timeout == 5.0
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"INFLATION_CHART_EMPTY_DATASET": "ignore"},
        {"INFLATION_CHART_TIMEOUT": "-1"},
        {"INFLATION_CHART_LOG_LEVEL": "loud"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ValidationError):
        load_settings(env)
