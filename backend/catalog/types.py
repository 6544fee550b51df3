from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence


@dataclass(frozen=True)
class Coordinate:
    """
    WGS84 position in degrees.
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (math.isfinite(float(self.lat)) and math.isfinite(float(self.lon))):
            raise ValueError(f"Coordinate must be finite, got ({self.lat}, {self.lon})")
        if not -90.0 <= float(self.lat) <= 90.0:
            raise ValueError(f"Latitude out of range [-90, 90]: {self.lat}")
        if not -180.0 <= float(self.lon) <= 180.0:
            raise ValueError(f"Longitude out of range [-180, 180]: {self.lon}")


@dataclass(frozen=True)
class Point:
    id: str
    name: str
    coordinate: Coordinate

    @property
    def lat(self) -> float:
        return self.coordinate.lat

    @property
    def lon(self) -> float:
        return self.coordinate.lon


@dataclass(frozen=True)
class PointCatalog(Sequence[Point]):
    """
    Immutable, ordered list of named points.

    Order is the load order of the source file and is preserved by every
    derived view (search results, map annotations).
    """

    points: tuple[Point, ...]
    _by_id: dict[str, Point] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        by_id: dict[str, Point] = {}
        for p in self.points:
            if not (p.name or "").strip():
                raise ValueError(f"Point '{p.id}' has an empty name")
            if p.id in by_id:
                raise ValueError(f"Duplicate point id: {p.id}")
            by_id[p.id] = p
        object.__setattr__(self, "_by_id", by_id)

    @classmethod
    def of(cls, points: Iterable[Point]) -> "PointCatalog":
        return cls(points=tuple(points))

    def get(self, point_id: str) -> Point | None:
        return self._by_id.get((point_id or "").strip())

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, i):  # type: ignore[override]
        return self.points[i]
