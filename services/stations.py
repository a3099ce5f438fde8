"""Station directory, inventory coverage, and great-circle proximity search."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from models.records import InventoryEntry, MeasurementType, Station

EARTH_RADIUS_KM = 6378.388


def _clamp_half_chord(a: float, legacy_clamp: bool = False) -> float:
    if a > 1.0:
        return 1.0
    if a < 0.0:
        # Historical results clamped a negative rounding residue to 1.
        return 1.0 if legacy_clamp else 0.0
    return a


def haversine_km(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    legacy_clamp: bool = False,
) -> float:
    """Great-circle distance in kilometres between two points in decimal degrees.

    The squared half-chord ``a`` is clamped to ``[0, 1]`` so rounding near
    coincident or antipodal points cannot produce NaN. Pass
    ``legacy_clamp=True`` to reproduce older output, where a negative ``a``
    was clamped to 1.
    """
    r_lat1 = math.radians(lat1)
    r_lat2 = math.radians(lat2)
    d_lat = r_lat2 - r_lat1
    d_lng = math.radians(lng2) - math.radians(lng1)

    a = math.sin(d_lat / 2) ** 2 + math.sin(d_lng / 2) ** 2 * math.cos(r_lat1) * math.cos(r_lat2)
    a = _clamp_half_chord(a, legacy_clamp=legacy_clamp)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


@dataclass(frozen=True)
class NearbyStation:
    """A station within the search radius and its distance from the query point."""

    station_id: str
    distance_km: float


class StationDirectory:
    """In-memory station list in file order, plus optional inventory."""

    def __init__(
        self,
        stations: Iterable[Station],
        inventory: Optional[Iterable[InventoryEntry]] = None,
    ) -> None:
        self.stations: List[Station] = list(stations)
        self._by_id: Dict[str, Station] = {station.station_id: station for station in self.stations}
        self._inventory: Optional[Dict[str, List[InventoryEntry]]] = None
        if inventory is not None:
            self._inventory = {}
            for entry in inventory:
                self._inventory.setdefault(entry.station_id, []).append(entry)

    def __len__(self) -> int:
        return len(self.stations)

    @property
    def has_inventory(self) -> bool:
        return self._inventory is not None

    def get(self, station_id: str) -> Optional[Station]:
        return self._by_id.get(station_id)

    def inventory_for(self, station_id: str) -> List[InventoryEntry]:
        if self._inventory is None:
            return []
        return list(self._inventory.get(station_id, []))

    def covers(
        self,
        station_id: str,
        start_year: int,
        end_year: int,
        measurement_type: MeasurementType,
    ) -> bool:
        return any(
            entry.type is measurement_type and entry.covers(start_year, end_year)
            for entry in self.inventory_for(station_id)
        )

    def find_nearby(self, latitude: float, longitude: float, radius_km: float) -> List[NearbyStation]:
        """Stations within ``radius_km`` of the point, nearest first."""
        nearby: List[NearbyStation] = []
        for station in self.stations:
            distance = haversine_km(latitude, longitude, station.latitude, station.longitude)
            if distance <= radius_km:
                nearby.append(NearbyStation(station_id=station.station_id, distance_km=distance))
        nearby.sort(key=lambda result: result.distance_km)
        return nearby
