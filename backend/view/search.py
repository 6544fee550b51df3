from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from catalog.types import Point
from geo.region import Span
from view.viewport import SELECT_SPAN, ViewportController

logger = logging.getLogger(__name__)


class SearchPhase(str, Enum):
    idle = "idle"
    editing = "editing"


@dataclass
class SearchState:
    query: str = ""
    # True while the search field has focus and results are shown.
    active: bool = False

    @property
    def phase(self) -> SearchPhase:
        return SearchPhase.editing if self.active else SearchPhase.idle


class SearchInteractionController:
    """
    Two-state machine (idle <-> editing) around the search field.

    - focus gained: idle -> editing
    - focus lost: editing -> idle, query kept as typed
    - result selected: query becomes the point name, the viewport jumps to the point,
      editing -> idle
    - clear: empties the query without touching the phase

    Selecting and clearing also request keyboard/focus dismissal; the host picks the
    request up via `consume_dismiss_request()`.
    """

    def __init__(
        self,
        viewport: ViewportController,
        *,
        select_span: Span = SELECT_SPAN,
    ):
        self.viewport = viewport
        self.select_span = select_span
        self.state = SearchState()
        self._dismiss_requested = False

    @property
    def phase(self) -> SearchPhase:
        return self.state.phase

    @property
    def show_clear_button(self) -> bool:
        return bool(self.state.query)

    def focus_changed(self, has_focus: bool) -> None:
        self.state.active = bool(has_focus)

    def text_changed(self, text: str) -> None:
        self.state.query = text or ""

    def select(self, point: Point) -> None:
        self.state.query = point.name
        self.viewport.recenter(point.coordinate, self.select_span)
        self.state.active = False
        self._dismiss_requested = True
        logger.info("Selected '%s' (%s)", point.name, point.id)

    def clear(self) -> None:
        self.state.query = ""
        self._dismiss_requested = True

    def consume_dismiss_request(self) -> bool:
        """
        Returns whether a keyboard dismissal was requested since the last call, and clears it.
        """
        requested = self._dismiss_requested
        self._dismiss_requested = False
        return requested
