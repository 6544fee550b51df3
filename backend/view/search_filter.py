from __future__ import annotations

from typing import Sequence

from catalog.types import Point


def filter_points(catalog: Sequence[Point], query: str) -> Sequence[Point]:
    """
    Case-insensitive substring match of `query` against point names.

    A blank query returns `catalog` itself. Both sides are lower-cased only, with
    no case folding, so "groß" finds "Großer See" but "GROSS" does not. Catalog
    order is preserved.
    """
    if not (query or "").strip():
        return catalog
    needle = query.lower()
    return tuple(p for p in catalog if needle in p.name.lower())
