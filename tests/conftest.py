"""Shared fixtures that write small GHCN-Daily data directories to ``tmp_path``."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pytest

from datastore.measurement_cache import MeasurementCache
from services.aggregator import Aggregator
from services.parsing import MalformedLinePolicy
from services.provider import DataProvider
from storage.station_files import StationDataDirectory

STATION_ID = "GME00102380"
FUERTH = (49.47020, 10.99019)


def station_line(
    station_id: str,
    latitude: float,
    longitude: float,
    elevation: float,
    name: str,
    state: str = "",
    trailer: str = "",
) -> str:
    line = f"{station_id:<11} {latitude:>8.4f} {longitude:>9.4f} {elevation:>6.1f} {state:<2} {name:<30}"
    if trailer:
        line = f"{line} {trailer}"
    return line.rstrip()


FIRST_TEN_STATIONS = [
    station_line("ACW00011604", 17.1167, -61.7833, 10.1, "ST JOHNS COOLIDGE FLD"),
    station_line("ACW00011647", 17.1333, -61.7833, 19.2, "ST JOHNS"),
    station_line("AE000041196", 25.3330, 55.5170, 34.0, "SHARJAH INTER. AIRP", trailer="GSN     41196"),
    station_line("AEM00041194", 25.2550, 55.3640, 10.4, "DUBAI INTL", trailer="        41194"),
    station_line("AEM00041217", 24.4330, 54.6510, 26.8, "ABU DHABI INTL", trailer="        41217"),
    station_line("AEM00041218", 24.2620, 55.6090, 264.9, "AL AIN INTL", trailer="        41218"),
    station_line("AF000040930", 35.3170, 69.0170, 3366.0, "NORTH-SALANG", trailer="GSN     40930"),
    station_line("AFM00040938", 34.2100, 62.2280, 977.2, "HERAT", trailer="        40938"),
    station_line("AFM00040948", 34.5660, 69.2120, 1791.3, "KABUL INTL", trailer="        40948"),
    station_line("AFM00040990", 31.5000, 65.8500, 1010.0, "KANDAHAR AIRPORT", trailer="        40990"),
]

FRANCONIA_STATIONS = [
    station_line("GME00102380", 49.5000, 11.0500, 314.0, "NUERNBERG-NETZSTALL"),
    station_line("GME00122614", 49.4900, 10.99019, 295.0, "FUERTH-NORD"),
    station_line("GME00111111", 49.4500, 11.0800, 309.0, "NUERNBERG"),
    station_line("GME00122222", 49.6000, 11.1000, -999.9, "ERLANGEN"),
    station_line("GME00133333", 48.1400, 11.5800, 520.0, "MUENCHEN"),
]


def inventory_line(station_id: str, latitude: float, longitude: float, element: str, first: int, last: int) -> str:
    return f"{station_id:<11} {latitude:>8.4f} {longitude:>9.4f} {element:<4} {first:>4} {last:>4}"


def measurement_line(station_id: str, year: int, month: int, day: int, element: str, value: int) -> str:
    return f"{station_id},{year:04d}{month:02d}{day:02d},{element},{value},,,E,"


def tmax_raw(year: int, month: int, day: int) -> int:
    """Tenths of a degree: monthly mean is ``(year - 1999) * 10 + month + 0.2`` degrees."""
    return (year - 1999) * 100 + 10 * month + day


def station_csv_lines(station_id: str = STATION_ID, years: Iterable[int] = (1999, 2000, 2001)) -> List[str]:
    """Three days per month, each day carrying TMAX, TMIN, PRCP, and an unrecognized element."""
    lines: List[str] = []
    for year in years:
        for month in range(1, 13):
            for day in range(1, 4):
                value = tmax_raw(year, month, day)
                lines.append(measurement_line(station_id, year, month, day, "TMAX", value))
                lines.append(measurement_line(station_id, year, month, day, "TMIN", -value))
                lines.append(measurement_line(station_id, year, month, day, "PRCP", day * 5))
                lines.append(measurement_line(station_id, year, month, day, "WT01", 1))
    return lines


def write_lines(path: Path, lines: Iterable[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    root = tmp_path / "data"
    write_lines(root / "ghcnd-stations.txt", FRANCONIA_STATIONS)
    # Older snapshot with different content; the resolver must ignore it.
    write_lines(
        root / f"{STATION_ID}_2023-01-15.csv",
        [measurement_line(STATION_ID, 2000, 1, 1, "TMAX", 999)],
    )
    write_lines(root / f"{STATION_ID}_2024-05-31.csv", station_csv_lines())
    return root


def build_provider(
    root: Path,
    cache_size: int = 0,
    policy: MalformedLinePolicy = MalformedLinePolicy.skip,
    inventory_file: str | None = "ghcnd-inventory.txt",
) -> DataProvider:
    directory = StationDataDirectory(root_path=root, inventory_file=inventory_file)
    return DataProvider(
        directory=directory,
        cache=MeasurementCache(max_entries=cache_size),
        aggregator=Aggregator(),
        malformed_lines=policy,
    )


@pytest.fixture()
def provider(data_dir: Path) -> DataProvider:
    return build_provider(data_dir)
