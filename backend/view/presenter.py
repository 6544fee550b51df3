from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from catalog.types import Point
from view.search import SearchState
from view.search_filter import filter_points


@dataclass(frozen=True)
class DisplayState:
    """
    What the map widget draws: one marker per annotation, labelled when `show_labels`.
    """

    annotations: Sequence[Point]
    show_labels: bool


def present(
    catalog: Sequence[Point],
    search_state: SearchState,
    show_labels: bool,
    is_search_active: bool,
) -> DisplayState:
    if is_search_active and search_state.query:
        annotations = filter_points(catalog, search_state.query)
    else:
        annotations = catalog
    return DisplayState(annotations=annotations, show_labels=bool(show_labels))


def search_results(catalog: Sequence[Point], search_state: SearchState) -> Sequence[Point]:
    """
    The selectable list under the search field: only while editing a non-empty query.
    """
    if not search_state.active or not search_state.query:
        return ()
    return filter_points(catalog, search_state.query)
