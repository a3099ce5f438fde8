from __future__ import annotations

import pytest

from models.records import Measurement, MeasurementType
from services.intervals import SeriesView, extract_year_range


def _series(*years: int) -> list[Measurement]:
    return [
        Measurement(year=year, month=1, day=index + 1, value=index, type=MeasurementType.TMAX)
        for index, year in enumerate(years)
    ]


def test_extract_covers_first_start_year_to_last_end_year() -> None:
    series = _series(1998, 1999, 1999, 2000, 2001, 2001, 2002)

    view = extract_year_range(series, 1999, 2001)

    assert (view.start, view.stop) == (1, 6)
    assert len(view) == 5
    assert [item.year for item in view] == [1999, 1999, 2000, 2001, 2001]
    assert view[0] is series[1]
    assert view[-1] is series[5]


def test_single_year_range() -> None:
    series = _series(1999, 2000, 2000, 2001)

    view = extract_year_range(series, 2000, 2000)

    assert [item.value for item in view] == [1, 2]


def test_missing_start_year_gives_empty_view() -> None:
    series = _series(1999, 2000, 2001)

    assert len(extract_year_range(series, 1998, 2001)) == 0


def test_missing_end_year_gives_empty_view_even_with_data_between() -> None:
    series = _series(1999, 2000, 2001)

    assert len(extract_year_range(series, 1999, 2003)) == 0


def test_reversed_range_is_empty() -> None:
    series = _series(1999, 2000, 2001)

    assert len(extract_year_range(series, 2001, 1999)) == 0


def test_empty_series() -> None:
    assert len(extract_year_range([], 2000, 2000)) == 0


def test_view_slicing_and_type_filter() -> None:
    series = _series(2000, 2000, 2000) + [
        Measurement(year=2000, month=1, day=9, value=7, type=MeasurementType.PRCP)
    ]
    view = SeriesView(series, 1, 4)

    assert [item.value for item in view[0:2]] == [1, 2]
    assert [item.value for item in view.of_type(MeasurementType.PRCP)] == [7]
    assert [item.value for item in view.of_type(MeasurementType.TMAX)] == [1, 2]
    with pytest.raises(IndexError):
        view[3]
