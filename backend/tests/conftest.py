import sys
from pathlib import Path

import pytest


# Ensure `backend/` is on sys.path so tests can import local modules
# like `catalog.*`, `view.*`, and `main`.
BACKEND_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_ROOT))

from catalog.types import Coordinate, Point, PointCatalog  # noqa: E402
from geo.region import Region, Span  # noqa: E402


def make_point(pid: str, name: str, lat: float, lon: float) -> Point:
    return Point(id=pid, name=name, coordinate=Coordinate(lat=lat, lon=lon))


@pytest.fixture
def catalog() -> PointCatalog:
    return PointCatalog.of(
        [
            make_point("wb-0001", "Neddersee", 53.7033, 11.0630),
            make_point("wb-0002", "Menzendorfer See", 53.8436, 11.0045),
            make_point("wb-0003", "Kiebitzmoor", 53.8797, 11.1570),
            make_point("wb-0004", "Großeichsener See", 53.7493, 11.2607),
            make_point("wb-0005", "Lüttsee", 53.7804, 11.0504),
            make_point("wb-0006", "Mühlenteich (Rehna)", 53.7810, 11.0488),
        ]
    )


@pytest.fixture
def start_region() -> Region:
    return Region(
        center=Coordinate(lat=53.77, lon=11.15),
        span=Span(lat_delta=0.5, lon_delta=0.5),
    )
