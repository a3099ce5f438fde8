from __future__ import annotations

import logging
from collections import OrderedDict
from functools import lru_cache
from threading import Lock
from typing import Iterable, Optional, Tuple

from models.records import Measurement
from settings import get_settings

logger = logging.getLogger(__name__)

MeasurementSeries = Tuple[Measurement, ...]


class MeasurementCache:
    """Station id -> parsed series, evicting the least recently used station.

    ``max_entries`` of ``None`` or ``0`` keeps every station for the life of
    the cache.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self.max_entries = max_entries or None
        self._items: "OrderedDict[str, MeasurementSeries]" = OrderedDict()
        self._lock = Lock()

    def get(self, station_id: str) -> Optional[MeasurementSeries]:
        with self._lock:
            series = self._items.get(station_id)
            if series is not None:
                self._items.move_to_end(station_id)
            return series

    def put(self, station_id: str, series: Iterable[Measurement]) -> MeasurementSeries:
        stored = tuple(series)
        with self._lock:
            self._items[station_id] = stored
            self._items.move_to_end(station_id)
            self._evict()
        return stored

    def __contains__(self, station_id: object) -> bool:
        with self._lock:
            return station_id in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def station_ids(self) -> list[str]:
        """Cached station ids, least recently used first."""
        with self._lock:
            return list(self._items.keys())

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def _evict(self) -> None:
        if self.max_entries is None:
            return
        while len(self._items) > self.max_entries:
            evicted, _ = self._items.popitem(last=False)
            logger.debug(
                "Evicted station from measurement cache",
                extra={"evicted": evicted, "cache_size": len(self._items)},
            )


@lru_cache
def build_default_cache(max_entries: Optional[int] = None) -> MeasurementCache:
    settings = get_settings()
    size = settings.cache_size if max_entries is None else max_entries
    return MeasurementCache(max_entries=size)
