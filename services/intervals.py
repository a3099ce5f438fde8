"""Year-bounded windows over a chronologically ordered measurement series."""

from __future__ import annotations

from typing import Iterator, List, Sequence, overload

from models.records import Measurement, MeasurementType


class SeriesView(Sequence[Measurement]):
    """Read-only ``[start, stop)`` window over a series; nothing is copied."""

    __slots__ = ("_series", "start", "stop")

    def __init__(self, series: Sequence[Measurement], start: int = 0, stop: int = 0) -> None:
        self._series = series
        self.start = start
        self.stop = max(start, stop)

    @classmethod
    def empty(cls, series: Sequence[Measurement] = ()) -> "SeriesView":
        return cls(series, 0, 0)

    def __len__(self) -> int:
        return self.stop - self.start

    @overload
    def __getitem__(self, index: int) -> Measurement: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Measurement]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self))
            return [self._series[self.start + i] for i in range(start, stop, step)]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("SeriesView index out of range")
        return self._series[self.start + index]

    def __iter__(self) -> Iterator[Measurement]:
        for position in range(self.start, self.stop):
            yield self._series[position]

    def __repr__(self) -> str:
        return f"SeriesView(start={self.start}, stop={self.stop})"

    def of_type(self, measurement_type: MeasurementType) -> List[Measurement]:
        """Materialize the records of one type, keeping their order."""
        return [item for item in self if item.type is measurement_type]


def extract_year_range(series: Sequence[Measurement], start_year: int, end_year: int) -> SeriesView:
    """Return the window from the first ``start_year`` record to the last ``end_year`` record.

    Both years must occur in the series; if either is missing the view is
    empty, even when years between them are present.
    """
    start = next(
        (index for index, item in enumerate(series) if item.year == start_year),
        None,
    )
    if start is None:
        return SeriesView.empty(series)

    stop = None
    for index in range(len(series) - 1, -1, -1):
        if series[index].year == end_year:
            stop = index + 1
            break
    if stop is None or stop <= start:
        return SeriesView.empty(series)

    return SeriesView(series, start, stop)
