from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Form, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from .config import Settings, load_settings
from .errors import SelectionError
from .logging_config import setup_logging
from .models import CountriesResponse, HealthResponse, ProjectionResponse, SelectionRequest
from .render import build_figure, render_chart, render_page
from .state import ChartController

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    controller: Optional[ChartController] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or (controller.settings if controller else load_settings())
    setup_logging(settings.log_level, log_file=settings.log_file)
    controller = controller or ChartController(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = None
        if controller.state.status == "idle":
            # one load per session, in the background so the page stays responsive
            logger.info("Starting dataset load")
            task = asyncio.create_task(controller.load())
        yield
        if task is not None and not task.done():
            task.cancel()

    app = FastAPI(
        title="inflation-chart",
        description="Inflation by country, rendered as a line chart",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.controller = controller

    def _require_data() -> None:
        status = controller.state.status
        if status in ("idle", "loading"):
            raise HTTPException(status_code=503, detail="Dataset is still loading")
        if status == "error":
            raise HTTPException(status_code=502, detail=f"Error fetching data: {controller.state.error}")

    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"ok": controller.state.status != "error", "status": controller.state.status}

    @app.get("/", response_class=HTMLResponse)
    def index():
        return render_page(controller.state, controller.countries, controller.selector_enabled)

    @app.get("/countries", response_model=CountriesResponse)
    def countries():
        return {
            "countries": controller.countries,
            "selected": controller.state.selection,
            "enabled": controller.selector_enabled,
        }

    def _projection(country: Optional[str]):
        _require_data()
        if country is None:
            return controller.state.projection
        return controller.preview(country)

    @app.get("/chart", response_model=ProjectionResponse)
    def chart(country: Optional[str] = None):
        return {"status": controller.state.status, "projection": _projection(country)}

    @app.get("/chart.html", response_class=HTMLResponse)
    def chart_html(country: Optional[str] = None):
        return render_chart(_projection(country))

    @app.get("/chart/figure")
    def chart_figure(country: Optional[str] = None):
        return Response(content=build_figure(_projection(country)).to_json(), media_type="application/json")

    @app.post("/selection")
    def select_form(country: str = Form(...)):
        _select(country)
        return RedirectResponse(url="/", status_code=303)

    @app.put("/selection", response_model=ProjectionResponse)
    def select_json(body: SelectionRequest):
        projection = _select(body.country)
        return {"status": controller.state.status, "projection": projection}

    def _select(country: str):
        _require_data()
        try:
            return controller.select(country)
        except SelectionError as e:
            raise HTTPException(status_code=409, detail=str(e))

    return app


app = create_app()
