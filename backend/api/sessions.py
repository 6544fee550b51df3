from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field

from api.config import max_sessions
from maps.load_catalog import LoadedMap
from view.session import MapSession

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    id: str
    map: LoadedMap
    session: MapSession
    # Pixel size of the client's map; used to convert spans to mapbox zoom.
    viewport: dict[str, int] | None = None
    # Events for one session are applied one at a time, in arrival order.
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)


@dataclass
class SessionStore:
    """
    In-memory sessions, oldest evicted first once `max_items` is exceeded.
    """

    max_items: int = 256
    _items: dict[str, SessionEntry] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def create(self, loaded: LoadedMap) -> SessionEntry:
        cfg = loaded.config
        session = MapSession(
            loaded.catalog,
            cfg.defaultView.to_region(),
            limits=cfg.viewport.to_limits(),
            select_span=cfg.search.selectSpan.to_span(),
            show_labels=cfg.plot.showLabels,
        )
        entry = SessionEntry(id=uuid.uuid4().hex, map=loaded, session=session)
        with self._lock:
            self._items[entry.id] = entry
            while len(self._items) > self.max_items:
                oldest = next(iter(self._items.keys()))
                self._items.pop(oldest, None)
                logger.info("Evicted session %s (limit %d)", oldest, self.max_items)
        logger.info("Created session %s for map '%s'", entry.id, cfg.id)
        return entry

    def get(self, session_id: str) -> SessionEntry | None:
        with self._lock:
            return self._items.get(session_id)

    def drop(self, session_id: str) -> bool:
        with self._lock:
            return self._items.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


_STORE: SessionStore | None = None
_STORE_LOCK = threading.RLock()


def get_session_store() -> SessionStore:
    global _STORE
    with _STORE_LOCK:
        if _STORE is None:
            _STORE = SessionStore(max_items=max_sessions())
        return _STORE


def reset_session_store() -> None:
    global _STORE
    with _STORE_LOCK:
        _STORE = None
