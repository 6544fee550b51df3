from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable

import yaml

from maps.config import maps_root, preferred_map_id, repo_root
from maps.types import MapConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapEntry:
    config: MapConfig
    # Absolute path to map.yaml on disk (useful for debugging).
    path: Path


def _iter_map_yaml_files() -> Iterable[Path]:
    root = maps_root()
    if not root.exists():
        return []
    # Convention: maps/*/map.yaml
    return root.glob("*/map.yaml")


def _load_yaml(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid map yaml root: {path}")
    return data


@lru_cache(maxsize=1)
def get_registry() -> dict[str, MapEntry]:
    out: dict[str, MapEntry] = {}
    for p in sorted(_iter_map_yaml_files(), key=lambda x: str(x)):
        cfg = MapConfig.model_validate(_load_yaml(p))
        if not cfg.enabled:
            continue
        if cfg.id in out:
            raise ValueError(f"Duplicate map id '{cfg.id}': {p} and {out[cfg.id].path}")
        out[cfg.id] = MapEntry(config=cfg, path=p)
    logger.info("Discovered %d map(s) under %s", len(out), maps_root())
    return out


def default_map_id() -> str:
    reg = get_registry()
    preferred = preferred_map_id()
    if not reg or preferred in reg:
        return preferred
    # Fall back to stable ordering.
    return next(iter(reg.keys()))


def list_maps() -> list[MapConfig]:
    return [e.config for e in get_registry().values()]


def find_map(map_id: str | None) -> MapEntry | None:
    reg = get_registry()
    if not reg:
        raise RuntimeError("No maps discovered under `maps/*/map.yaml`")
    mid = (map_id or "").strip() or default_map_id()
    return reg.get(mid)


def resolve_repo_path(path: str) -> Path:
    p = Path(path)
    if p.is_absolute():
        return p
    return repo_root() / p


def clear_registry_cache() -> None:
    """
    Clear the in-memory map registry (and the catalogs loaded from it).

    Map YAML changes are otherwise not picked up until the backend process restarts.
    """
    from maps.load_catalog import load_map_catalog

    get_registry.cache_clear()
    load_map_catalog.cache_clear()
