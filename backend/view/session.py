from __future__ import annotations

from typing import Sequence

from catalog.types import Point, PointCatalog
from geo.region import Region, Span
from view.presenter import DisplayState, present, search_results
from view.search import SearchInteractionController, SearchState
from view.viewport import SELECT_SPAN, ViewportController, ViewportLimits


class MapSession:
    """
    One user's view state over a catalog.

    Each method corresponds to one inbound UI event (map gesture, search field edit,
    button tap). State changes are applied immediately; `display()` and `results()`
    reflect them on the next call.
    """

    def __init__(
        self,
        catalog: PointCatalog,
        start_region: Region,
        *,
        limits: ViewportLimits | None = None,
        select_span: Span = SELECT_SPAN,
        show_labels: bool = True,
    ):
        self.catalog = catalog
        self.viewport = ViewportController(start_region, limits)
        self.search = SearchInteractionController(self.viewport, select_span=select_span)
        self.show_labels = show_labels

    @property
    def region(self) -> Region:
        return self.viewport.region

    @property
    def search_state(self) -> SearchState:
        return self.search.state

    # Map widget
    def region_changed(self, region: Region) -> None:
        self.viewport.set_region(region)

    # Search field
    def text_changed(self, text: str) -> None:
        self.search.text_changed(text)

    def focus_changed(self, has_focus: bool) -> None:
        self.search.focus_changed(has_focus)

    def select(self, point_id: str) -> Point:
        point = self.catalog.get(point_id)
        if point is None:
            raise KeyError(point_id)
        self.search.select(point)
        return point

    def clear_search(self) -> None:
        self.search.clear()

    # Buttons
    def zoom_in(self) -> None:
        self.viewport.zoom_in()

    def zoom_out(self) -> None:
        self.viewport.zoom_out()

    def reset_view(self) -> None:
        self.viewport.reset()

    def toggle_labels(self) -> None:
        self.show_labels = not self.show_labels

    def display(self) -> DisplayState:
        state = self.search.state
        return present(self.catalog, state, self.show_labels, state.active)

    def results(self) -> Sequence[Point]:
        return search_results(self.catalog, self.search.state)
