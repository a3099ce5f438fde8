"""Parsers for GHCN-Daily station metadata, inventory, and per-station CSV files."""

from __future__ import annotations

import logging
import re
from enum import Enum
from itertools import islice
from typing import Iterable, Iterator, List, Optional

from models.records import InventoryEntry, Measurement, MeasurementType, Station

logger = logging.getLogger(__name__)

# Next run of non-comma characters; empty fields are skipped over.
_CSV_TOKEN = re.compile(r"[^,]+")

# Stand-in character for bytes that did not decode as UTF-8.
_UNDECODABLE = "\ufffd"


class MalformedLinePolicy(str, Enum):
    """What a whole-file reader does with a line it cannot decode."""

    skip = "skip"
    abort = "abort"


class RecordParseError(ValueError):
    """Raised when a station, inventory, or measurement line cannot be decoded."""

    def __init__(self, reason: str, line_number: Optional[int] = None) -> None:
        self.reason = reason
        self.line_number = line_number
        location = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{location}{reason}")


def _column(line: str, start: int, stop: int, field: str) -> str:
    value = line[start:stop].strip()
    if not value:
        raise RecordParseError(f"missing {field}")
    return value


def _float_column(line: str, start: int, stop: int, field: str) -> float:
    raw = _column(line, start, stop, field)
    try:
        return float(raw)
    except ValueError as exc:
        raise RecordParseError(f"invalid {field} {raw!r}") from exc


def _int_column(line: str, start: int, stop: int, field: str) -> int:
    raw = _column(line, start, stop, field)
    try:
        return int(raw)
    except ValueError as exc:
        raise RecordParseError(f"invalid {field} {raw!r}") from exc


def parse_station_line(line: str) -> Station:
    """Decode one fixed-width line of ``ghcnd-stations.txt``.

    Columns (0-indexed, end exclusive): id 0-11, latitude 12-20,
    longitude 21-30, elevation 31-37, name 41-71.
    """
    line = line.rstrip("\r\n")
    return Station(
        station_id=_column(line, 0, 11, "station id"),
        latitude=_float_column(line, 12, 20, "latitude"),
        longitude=_float_column(line, 21, 30, "longitude"),
        elevation=_float_column(line, 31, 37, "elevation"),
        name=line[41:71].rstrip(),
    )


def parse_inventory_line(line: str) -> InventoryEntry:
    """Decode one fixed-width line of ``ghcnd-inventory.txt``."""
    line = line.rstrip("\r\n")
    return InventoryEntry(
        station_id=_column(line, 0, 11, "station id"),
        latitude=_float_column(line, 12, 20, "latitude"),
        longitude=_float_column(line, 21, 30, "longitude"),
        type=MeasurementType.from_element(_column(line, 31, 35, "element")),
        first_year=_int_column(line, 36, 40, "first year"),
        last_year=_int_column(line, 41, 45, "last year"),
    )


def parse_measurement_line(line: str) -> Measurement:
    """Decode ``station,YYYYMMDD,ELEMENT,VALUE[,...]``.

    Only the first four tokens are read; anything after them is ignored.
    """
    if _UNDECODABLE in line:
        raise RecordParseError("line contains undecodable bytes")
    tokens = [match.group() for match in islice(_CSV_TOKEN.finditer(line.rstrip("\r\n")), 4)]
    if len(tokens) < 4:
        raise RecordParseError(f"expected 4 fields, found {len(tokens)}")

    _station, date, element, raw_value = tokens
    date = date.strip()
    if len(date) != 8 or not date.isdigit():
        raise RecordParseError(f"invalid date {date!r}")

    try:
        value = int(raw_value.strip())
    except ValueError as exc:
        raise RecordParseError(f"invalid numeric value {raw_value!r}") from exc

    return Measurement(
        year=int(date[0:4]),
        month=int(date[4:6]),
        day=int(date[6:8]),
        value=value,
        type=MeasurementType.from_element(element),
    )


def read_stations(lines: Iterable[str]) -> List[Station]:
    """Parse every non-blank line of a station file, preserving file order.

    Station metadata is expected to be well formed; the first bad line aborts.
    """
    stations: List[Station] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            stations.append(parse_station_line(line))
        except RecordParseError as exc:
            raise RecordParseError(exc.reason, line_number=line_number) from exc
    return stations


def read_inventory(lines: Iterable[str]) -> List[InventoryEntry]:
    entries: List[InventoryEntry] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            entries.append(parse_inventory_line(line))
        except RecordParseError as exc:
            raise RecordParseError(exc.reason, line_number=line_number) from exc
    return entries


def iter_measurements(
    lines: Iterable[str],
    policy: MalformedLinePolicy = MalformedLinePolicy.skip,
    station_id: Optional[str] = None,
) -> Iterator[Measurement]:
    """Yield measurements from CSV lines, applying ``policy`` to bad lines."""
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            yield parse_measurement_line(line)
        except RecordParseError as exc:
            if policy is MalformedLinePolicy.abort:
                raise RecordParseError(exc.reason, line_number=line_number) from exc
            logger.warning(
                "Skipping malformed measurement line",
                extra={
                    "station_id": station_id,
                    "line_number": line_number,
                    "reason": exc.reason,
                },
            )
