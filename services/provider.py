"""Query façade over local GHCN-Daily station files."""

from __future__ import annotations

import logging
from functools import lru_cache
from threading import Lock
from typing import Dict, List, Optional, Sequence

from datastore.measurement_cache import MeasurementCache, MeasurementSeries, build_default_cache
from models.records import InventoryEntry, Measurement, MeasurementType, Season, Station
from services.aggregator import Aggregator
from services.intervals import extract_year_range
from services.parsing import MalformedLinePolicy, iter_measurements, read_inventory, read_stations
from services.stations import NearbyStation, StationDirectory
from settings import get_settings
from storage.station_files import StationDataDirectory, build_default_directory

logger = logging.getLogger(__name__)


def _validate_month(month: int, label: str) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"{label} must be between 1 and 12, got {month}.")


def _is_chronological(measurements: Sequence[Measurement]) -> bool:
    previous = None
    for item in measurements:
        current = (item.year, item.month, item.day)
        if previous is not None and current < previous:
            return False
        previous = current
    return True


class DataProvider:
    """Answers aggregation and proximity queries for one station at a time.

    Absent data (unknown station, missing file, year or element not recorded)
    always yields an empty result rather than an error.
    """

    def __init__(
        self,
        directory: StationDataDirectory,
        cache: MeasurementCache,
        aggregator: Aggregator,
        malformed_lines: MalformedLinePolicy = MalformedLinePolicy.skip,
    ) -> None:
        self.directory = directory
        self.cache = cache
        self.aggregator = aggregator
        self.malformed_lines = MalformedLinePolicy(malformed_lines)
        self._stations: Optional[StationDirectory] = None
        self._stations_lock = Lock()
        self._load_lock = Lock()

    # Measurement series

    def ensure_loaded(self, station_id: str) -> bool:
        """Load and cache a station's series; ``False`` when no usable data exists."""
        return self._series(station_id) is not None

    def _series(self, station_id: str) -> Optional[MeasurementSeries]:
        series = self.cache.get(station_id)
        if series is not None:
            return series
        with self._load_lock:
            series = self.cache.get(station_id)
            if series is not None:
                return series
            return self._load_series(station_id)

    def _load_series(self, station_id: str) -> Optional[MeasurementSeries]:
        path = self.directory.resolve_csv_path(station_id)
        if path is None:
            logger.info("No data file for station", extra={"station_id": station_id})
            return None

        try:
            with self.directory.open_text(path, errors="replace") as handle:
                measurements = list(
                    iter_measurements(handle, policy=self.malformed_lines, station_id=station_id)
                )
        except OSError as exc:
            logger.warning(
                "Could not read station data file",
                extra={"station_id": station_id, "path": str(path), "reason": str(exc)},
            )
            return None

        if not measurements:
            logger.info(
                "Station data file holds no measurements",
                extra={"station_id": station_id, "path": str(path)},
            )
            return None

        if not _is_chronological(measurements):
            logger.warning(
                "Station data file is not in date order; sorting",
                extra={"station_id": station_id, "path": str(path)},
            )
            measurements.sort(key=lambda item: (item.year, item.month, item.day))

        series = self.cache.put(station_id, measurements)
        logger.info(
            "Loaded station measurements",
            extra={"station_id": station_id, "path": str(path), "row_count": len(series)},
        )
        return series

    def _typed_interval(
        self,
        station_id: str,
        start_year: int,
        end_year: int,
        measurement_type: MeasurementType,
    ) -> List[Measurement]:
        if measurement_type is MeasurementType.UNKNOWN:
            return []
        series = self._series(station_id)
        if series is None:
            return []
        return extract_year_range(series, start_year, end_year).of_type(measurement_type)

    # Aggregation queries

    def get_yearly_averages(
        self,
        station_id: str,
        start_year: int,
        end_year: int,
        measurement_type: MeasurementType,
    ) -> Dict[int, float]:
        items = self._typed_interval(station_id, start_year, end_year, measurement_type)
        if not items:
            return {}
        return self.aggregator.yearly_averages(items, measurement_type.scaling)

    def get_averages_for_month_range(
        self,
        station_id: str,
        start_year: int,
        end_year: int,
        start_month: int,
        end_month: int,
        measurement_type: MeasurementType,
    ) -> Dict[int, float]:
        """Per-year averages over ``start_month..end_month``.

        When the range wraps past December the data is read from
        ``start_year - 1`` so the first window can start in the preceding
        December; each window is keyed by the year of its final month.
        """
        _validate_month(start_month, "start_month")
        _validate_month(end_month, "end_month")
        first_year = start_year if start_month <= end_month else start_year - 1
        items = self._typed_interval(station_id, first_year, end_year, measurement_type)
        if not items:
            return {}
        return self.aggregator.month_range_averages(
            items, start_month, end_month, measurement_type.scaling
        )

    def get_seasonal_averages(
        self,
        station_id: str,
        start_year: int,
        end_year: int,
        season: Season,
        measurement_type: MeasurementType,
    ) -> Dict[int, float]:
        start_month, end_month = Season(season).months
        return self.get_averages_for_month_range(
            station_id, start_year, end_year, start_month, end_month, measurement_type
        )

    def get_monthly_averages(
        self, station_id: str, year: int, measurement_type: MeasurementType
    ) -> Dict[int, float]:
        items = self._typed_interval(station_id, year, year, measurement_type)
        if not items:
            return {}
        return self.aggregator.monthly_averages(items, year, measurement_type.scaling)

    def get_daily_values(
        self, station_id: str, year: int, month: int, measurement_type: MeasurementType
    ) -> Dict[int, float]:
        _validate_month(month, "month")
        items = self._typed_interval(station_id, year, year, measurement_type)
        if not items:
            return {}
        return self.aggregator.daily_values(items, year, month, measurement_type.scaling)

    def has_measurements_for_year_range(
        self,
        station_id: str,
        start_year: int,
        end_year: int,
        measurement_type: MeasurementType,
    ) -> bool:
        """Whether the station recorded ``measurement_type`` across the whole range.

        Uses the inventory file when one is available, otherwise the station's
        own series.
        """
        if measurement_type is MeasurementType.UNKNOWN:
            return False
        stations = self.station_directory()
        if stations.has_inventory:
            return stations.covers(station_id, start_year, end_year, measurement_type)
        return bool(self._typed_interval(station_id, start_year, end_year, measurement_type))

    # Stations

    def station_directory(self) -> StationDirectory:
        """The parsed station list, read once per provider."""
        if self._stations is not None:
            return self._stations
        with self._stations_lock:
            if self._stations is not None:
                return self._stations

            path = self.directory.station_file_path
            try:
                with self.directory.open_text(path) as handle:
                    stations = read_stations(handle)
            except OSError as exc:
                logger.warning(
                    "Station file could not be read",
                    extra={"path": str(path), "reason": str(exc)},
                )
                return StationDirectory([])

            self._stations = StationDirectory(stations, inventory=self._read_inventory())
            logger.info(
                "Loaded station directory",
                extra={"path": str(path), "row_count": len(stations)},
            )
            return self._stations

    def _read_inventory(self) -> Optional[List[InventoryEntry]]:
        path = self.directory.inventory_file_path
        if path is None or not path.is_file():
            return None
        try:
            with self.directory.open_text(path) as handle:
                return read_inventory(handle)
        except (OSError, ValueError) as exc:
            # ValueError covers RecordParseError and UnicodeDecodeError.
            logger.warning(
                "Ignoring unreadable inventory file",
                extra={"path": str(path), "reason": str(exc)},
            )
            return None

    def get_station(self, station_id: str) -> Optional[Station]:
        return self.station_directory().get(station_id)

    def get_nearest_stations(
        self, latitude: float, longitude: float, radius_km: float
    ) -> List[NearbyStation]:
        """Stations within ``radius_km`` of the point as (id, distance) pairs, nearest first."""
        return self.station_directory().find_nearby(latitude, longitude, radius_km)


@lru_cache
def build_default_provider() -> DataProvider:
    """Factory that wires the provider from environment settings."""
    settings = get_settings()
    return DataProvider(
        directory=build_default_directory(),
        cache=build_default_cache(),
        aggregator=Aggregator(),
        malformed_lines=MalformedLinePolicy(settings.malformed_lines),
    )
