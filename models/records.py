"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


MISSING_ELEVATION = -999.9


class MeasurementType(str, Enum):
    """GHCN-Daily core elements.

    Values are stored as integers in tenths of the natural unit.
    """

    PRCP = "PRCP"
    SNOW = "SNOW"
    SNWD = "SNWD"
    TMAX = "TMAX"
    TMIN = "TMIN"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_element(cls, code: str) -> "MeasurementType":
        """Map an element code to a type; unrecognized codes become ``UNKNOWN``."""
        try:
            member = cls(code)
        except ValueError:
            return cls.UNKNOWN
        return member

    @property
    def scaling(self) -> float:
        return MEASUREMENT_SCALING[self]


MEASUREMENT_SCALING: Dict[MeasurementType, float] = {
    MeasurementType.PRCP: 0.1,
    MeasurementType.SNOW: 0.1,
    MeasurementType.SNWD: 0.1,
    MeasurementType.TMAX: 0.1,
    MeasurementType.TMIN: 0.1,
    MeasurementType.UNKNOWN: 0.0,
}


class Season(str, Enum):
    """Meteorological seasons (northern hemisphere naming)."""

    winter = "winter"
    spring = "spring"
    summer = "summer"
    autumn = "autumn"
    year = "year"

    @property
    def months(self) -> tuple[int, int]:
        return _SEASON_MONTHS[self]


_SEASON_MONTHS: Dict[Season, tuple[int, int]] = {
    Season.winter: (12, 2),
    Season.spring: (3, 5),
    Season.summer: (6, 8),
    Season.autumn: (9, 11),
    Season.year: (1, 12),
}


@dataclass(frozen=True, slots=True)
class Station:
    """A row of ``ghcnd-stations.txt``."""

    station_id: str
    latitude: float
    longitude: float
    elevation: float
    name: str

    @property
    def elevation_m(self) -> Optional[float]:
        if self.elevation == MISSING_ELEVATION:
            return None
        return self.elevation


@dataclass(frozen=True, slots=True)
class Measurement:
    """A single daily observation parsed from a station CSV."""

    year: int
    month: int
    day: int
    value: int
    type: MeasurementType

    @property
    def scaled_value(self) -> float:
        return self.value * self.type.scaling


@dataclass(frozen=True, slots=True)
class InventoryEntry:
    """A row of ``ghcnd-inventory.txt``: which years an element covers."""

    station_id: str
    latitude: float
    longitude: float
    type: MeasurementType
    first_year: int
    last_year: int

    def covers(self, start_year: int, end_year: int) -> bool:
        return self.first_year <= start_year and self.last_year >= end_year
