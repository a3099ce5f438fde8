"""Aggregation logic for type-filtered measurement runs."""

from __future__ import annotations

from itertools import groupby
from typing import Callable, Dict, Sequence

from models.records import Measurement


def _scaled_mean(values: Sequence[Measurement], scaling: float) -> float:
    # Scale the integer sum before dividing.
    return sum(item.value for item in values) * scaling / len(values)


def _find(
    items: Sequence[Measurement],
    start: int,
    predicate: Callable[[Measurement], bool],
) -> int:
    """Index of the first item at or after ``start`` matching ``predicate``, else ``len(items)``."""
    for index in range(start, len(items)):
        if predicate(items[index]):
            return index
    return len(items)


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation.

    Every method expects ``items`` to hold a single measurement type in
    chronological order and returns a dict whose keys ascend.
    """

    def yearly_averages(self, items: Sequence[Measurement], scaling: float) -> Dict[int, float]:
        averages: Dict[int, float] = {}
        for year, group in groupby(items, key=lambda item: item.year):
            averages[year] = _scaled_mean(list(group), scaling)
        return averages

    def month_range_averages(
        self,
        items: Sequence[Measurement],
        start_month: int,
        end_month: int,
        scaling: float,
    ) -> Dict[int, float]:
        """Average each year's ``start_month..end_month`` window.

        A window with ``start_month > end_month`` runs from ``start_month`` of
        one year into ``end_month`` of the next and is keyed by the later year.
        It is only formed when the next year directly follows in the data.
        A window is dropped unless the data reaches its end month.
        """
        averages: Dict[int, float] = {}
        wraps = start_month > end_month
        count = len(items)
        cursor = 0

        while cursor < count:
            year = items[cursor].year
            first = _find(items, cursor, lambda m: m.year == year and m.month == start_month)
            if first == count:
                cursor = _find(items, cursor, lambda m: m.year != year)
                continue

            key_year = year
            scan_from = first
            if wraps:
                scan_from = _find(items, first, lambda m: m.year != year)
                if scan_from == count or items[scan_from].year != year + 1:
                    cursor = _find(items, cursor, lambda m: m.year != year)
                    continue
                key_year = year + 1

            last = _find(
                items,
                scan_from,
                lambda m: m.year != key_year or m.month > end_month,
            )
            tail = items[-1]
            reaches_end_month = tail.year == key_year and tail.month == end_month
            if last == count and not reaches_end_month:
                cursor = _find(items, cursor, lambda m: m.year != year)
                continue

            if last > first:
                averages[key_year] = _scaled_mean(items[first:last], scaling)

            cursor = _find(items, last, lambda m: m.year != year)

        return averages

    def monthly_averages(
        self, items: Sequence[Measurement], year: int, scaling: float
    ) -> Dict[int, float]:
        averages: Dict[int, float] = {}
        in_year = (item for item in items if item.year == year)
        for month, group in groupby(in_year, key=lambda item: item.month):
            averages[month] = _scaled_mean(list(group), scaling)
        return averages

    def daily_values(
        self, items: Sequence[Measurement], year: int, month: int, scaling: float
    ) -> Dict[int, float]:
        start = _find(items, 0, lambda m: m.year == year and m.month == month)
        values: Dict[int, float] = {}
        for item in items[start:]:
            if item.year != year or item.month != month:
                break
            values[item.day] = item.value * scaling
        return values
