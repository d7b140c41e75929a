"""Tests for month grid generation and the date-keyed event index."""

from datetime import date

import pytest

from core.calendar_grid import (
    build_month_grid,
    date_key,
    days_in_month,
    decorate_grid,
    group_events_by_date,
    merge_event,
    month_bounds,
    normalize_date_key,
    parse_date_key,
    shift_month,
    weekday_index,
)


@pytest.mark.parametrize("year", [1999, 2000, 2023, 2024, 2100])
@pytest.mark.parametrize("month", range(1, 13))
def test_grid_rows_have_seven_cells_and_all_days_in_order(year, month):
    grid = build_month_grid(year, month)

    assert all(len(week) == 7 for week in grid)
    days = [day for week in grid for day in week if day is not None]
    assert days == list(range(1, days_in_month(year, month) + 1))


def test_month_starting_on_sunday_has_no_leading_padding():
    grid = build_month_grid(2023, 1)

    assert grid[0] == [1, 2, 3, 4, 5, 6, 7]


def test_leading_padding_matches_weekday_of_first_day():
    # March 2024 starts on a Friday
    grid = build_month_grid(2024, 3)

    assert grid[0] == [None, None, None, None, None, 1, 2]
    assert grid[-1] == [31, None, None, None, None, None, None]


def test_month_filling_exact_weeks_has_no_padding():
    # February 2015: 28 days starting on a Sunday
    grid = build_month_grid(2015, 2)

    assert len(grid) == 4
    assert None not in [day for week in grid for day in week]


def test_month_ending_on_saturday_has_no_trailing_padding():
    # 2023-09-30 is a Saturday
    grid = build_month_grid(2023, 9)

    assert grid[-1][-1] == 30


def test_leap_february():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(1900, 2) == 28


def test_weekday_index_is_sunday_based():
    assert weekday_index(2023, 1, 1) == 0  # Sunday
    assert weekday_index(2024, 3, 1) == 5  # Friday
    assert weekday_index(2024, 3, 2) == 6  # Saturday


def test_date_key_is_zero_padded():
    assert date_key(2024, 3, 5) == "2024-03-05"


def test_parse_date_key_rejects_unpadded_and_invalid_dates():
    assert parse_date_key("2024-02-29") == date(2024, 2, 29)
    with pytest.raises(ValueError):
        parse_date_key("2024-3-5")
    with pytest.raises(ValueError):
        parse_date_key("2023-02-29")
    with pytest.raises(ValueError):
        parse_date_key("15/03/2024")


def test_parse_date_key_accepts_years_before_1000():
    assert parse_date_key("0999-01-05") == date(999, 1, 5)
    assert parse_date_key(date_key(999, 12, 31)) == date(999, 12, 31)
    with pytest.raises(ValueError):
        parse_date_key("999-01-05")


def test_normalize_date_key_drops_time_suffix():
    assert normalize_date_key("2024-03-15T00:00:00.000Z") == "2024-03-15"
    assert normalize_date_key("2024-03-15") == "2024-03-15"


def test_month_bounds():
    assert month_bounds(2024, 2) == ("2024-02-01", "2024-02-29")
    assert month_bounds(2024, 12) == ("2024-12-01", "2024-12-31")


@pytest.mark.parametrize(
    "start, delta, expected",
    [
        ((2024, 1), -1, (2023, 12)),
        ((2023, 12), 1, (2024, 1)),
        ((2024, 6), 0, (2024, 6)),
        ((2024, 3), -15, (2022, 12)),
    ],
)
def test_shift_month(start, delta, expected):
    assert shift_month(*start, delta) == expected


def test_group_events_by_date_keeps_fetch_order(sample_events):
    index = group_events_by_date(sample_events)

    assert list(index) == ["2024-03-15", "2024-03-01", "2024-03-31"]
    assert [e["title"] for e in index["2024-03-15"]] == ["Meeting", "Retro"]


def test_group_events_by_date_normalizes_timestamps():
    index = group_events_by_date([{"id": "x", "title": "Old", "date": "2024-03-15T00:00:00Z"}])

    assert list(index) == ["2024-03-15"]


def test_merge_event_appends_without_mutating(sample_events):
    index = group_events_by_date(sample_events)
    new_event = {"id": "e5", "title": "Demo", "date": "2024-03-15"}

    merged = merge_event(index, new_event)

    assert [e["title"] for e in merged["2024-03-15"]] == ["Meeting", "Retro", "Demo"]
    assert len(index["2024-03-15"]) == 2


def test_merge_event_into_empty_day():
    merged = merge_event({}, {"id": "a", "title": "Solo", "date": "2024-04-02"})

    assert merged == {"2024-04-02": [{"id": "a", "title": "Solo", "date": "2024-04-02"}]}


def test_decorate_grid_marks_today_and_events(sample_events):
    grid = build_month_grid(2024, 3)
    index = group_events_by_date(sample_events)

    weeks = decorate_grid(grid, 2024, 3, date(2024, 3, 15), index)
    cells = {cell["day"]: cell for week in weeks for cell in week if cell["day"]}

    assert cells[15]["is_today"] and cells[15]["has_events"]
    assert cells[15]["date_key"] == "2024-03-15"
    assert cells[1]["has_events"] and not cells[1]["is_today"]
    assert not cells[2]["has_events"]
    assert weeks[0][0] == {"day": None, "date_key": None, "is_today": False, "has_events": False}


def test_decorate_grid_today_requires_matching_year():
    grid = build_month_grid(2024, 3)

    weeks = decorate_grid(grid, 2024, 3, date(2023, 3, 15), {})

    assert not any(cell["is_today"] for week in weeks for cell in week)
