import asyncio

import httpx
import pytest

from inflation_chart.config import Settings
from inflation_chart.state import ChartController

SAMPLE_CSV = "Country,Year,Inflation\nX,2000,3.4\nX,2001,-1.6\nY,2000,9.9\n"


def csv_transport(body: str, status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=body.encode("utf-8"))

    return httpx.MockTransport(handler)


def failing_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def settings():
    return Settings(data_url="https://example.test/inflation.csv")


@pytest.fixture
def loaded_controller(settings):
    controller = ChartController(settings, transport=csv_transport(SAMPLE_CSV))
    asyncio.run(controller.load())
    return controller
