from __future__ import annotations

import os
from pathlib import Path


def repo_root() -> Path:
    # .../backend/maps/config.py -> repo root is 2 levels up
    return Path(__file__).resolve().parents[2]


def maps_root() -> Path:
    return Path(os.getenv("WATERMAP_MAPS_PATH") or (repo_root() / "maps"))


def preferred_map_id() -> str:
    return (os.getenv("WATERMAP_DEFAULT_MAP") or "mecklenburg_waters").strip()
