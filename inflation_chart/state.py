"""
Application state and the controller that owns it.

The controller is the only writer: it loads the dataset once, applies
selection changes, and recomputes the projection after every mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import httpx

from .config import Settings
from .errors import LoadError, SelectionError
from .loader import categories, default_selection, load_dataset
from .models import Projection, Record, Status
from .projection import project

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    status: Status = "idle"
    records: Tuple[Record, ...] = ()
    selection: Optional[str] = None
    error: Optional[str] = None
    projection: Projection = field(default_factory=Projection)


class ChartController:
    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or Settings()
        self.transport = transport
        self.state = AppState(projection=Projection(layout=self.settings.layout))

    @property
    def countries(self) -> List[str]:
        return categories(self.state.records)

    @property
    def selector_enabled(self) -> bool:
        return self.state.status == "ready" and bool(self.countries)

    async def load(self) -> AppState:
        """
        Load the dataset. Runs at most once; a failed load is not retried.

        On failure the record set stays empty and the error message is kept in
        the state for display.
        """
        if self.state.status != "idle":
            logger.debug("Load already %s, ignoring", self.state.status)
            return self.state

        self.state.status = "loading"
        try:
            records = await load_dataset(self.settings, transport=self.transport)
        except LoadError as e:
            logger.error("Loading dataset failed: %s", e)
            self.state.status = "error"
            self.state.error = str(e)
            self.refresh()
            return self.state

        self.state.records = tuple(records)
        self.state.selection = default_selection(records)
        self.state.status = "ready"
        logger.info("Default selection: %s", self.state.selection)
        self.refresh()
        return self.state

    def select(self, category: str) -> Projection:
        if self.state.status != "ready" or not self.state.records:
            raise SelectionError("No data loaded; selection is disabled")

        if category not in self.countries:
            logger.warning("Selected category %r is not in the dataset", category)
        logger.info("Selection changed: %s -> %s", self.state.selection, category)

        self.state.selection = category
        return self.refresh()

    def refresh(self) -> Projection:
        """Recompute the projection from the current records and selection."""
        self.state.projection = project(self.state.records, self.state.selection, self.settings.layout)
        return self.state.projection

    def preview(self, category: str) -> Projection:
        """Project another category without touching the selection."""
        return project(self.state.records, category, self.settings.layout)
