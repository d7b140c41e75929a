"""Tests for calendar UI state transitions."""

from datetime import date

import pytest

from ui.state import (
    VIEW_ADD,
    VIEW_EVENTS,
    VIEW_GRID,
    Action,
    add_failed,
    close,
    event_added,
    events_loaded,
    fetch_failed,
    fetch_started,
    initial_state,
    navigate,
    navigate_to,
    reduce,
    select_day,
    set_draft,
)


@pytest.fixture
def march_state(sample_events):
    """March 2024 with its events loaded."""
    state = initial_state(date(2024, 3, 10))
    state = reduce(state, fetch_started())
    return reduce(state, events_loaded(state.fetch_seq, 2024, 3, sample_events))


def test_initial_state_shows_todays_month():
    state = initial_state(date(2024, 3, 10))

    assert (state.year, state.month) == (2024, 3)
    assert state.view == VIEW_GRID
    assert state.events == {}


def test_events_loaded_replaces_index(march_state):
    assert set(march_state.events) == {"2024-03-01", "2024-03-15", "2024-03-31"}
    assert not march_state.loading


def test_navigate_wraps_years_and_clears_index(march_state):
    state = reduce(march_state, navigate(-3))

    assert (state.year, state.month) == (2023, 12)
    assert state.events == {}

    state = reduce(state, navigate_to(2025, 1))
    assert (state.year, state.month) == (2025, 1)


def test_stale_response_is_discarded(sample_events):
    state = initial_state(date(2024, 3, 10))
    state = reduce(state, fetch_started())
    march_seq = state.fetch_seq

    state = reduce(state, navigate(1))
    state = reduce(state, fetch_started())
    april_seq = state.fetch_seq

    # April answers first, then the slow March response arrives
    state = reduce(state, events_loaded(april_seq, 2024, 4, []))
    state = reduce(state, events_loaded(march_seq, 2024, 3, sample_events))

    assert (state.year, state.month) == (2024, 4)
    assert state.events == {}


def test_response_for_other_month_is_discarded(sample_events):
    state = reduce(initial_state(date(2024, 3, 10)), fetch_started())

    state = reduce(state, events_loaded(state.fetch_seq, 2024, 2, sample_events))

    assert state.events == {}
    assert state.loading


def test_fetch_failed_sets_error_unless_stale():
    state = reduce(initial_state(date(2024, 3, 10)), fetch_started())
    stale_seq = state.fetch_seq
    state = reduce(state, fetch_started())

    assert reduce(state, fetch_failed(stale_seq, "boom")).error is None

    failed = reduce(state, fetch_failed(state.fetch_seq, "boom"))
    assert failed.error == "boom"
    assert not failed.loading


def test_select_day_with_events_opens_list(march_state):
    state = reduce(march_state, select_day(15))

    assert state.selected_date == "2024-03-15"
    assert state.view == VIEW_EVENTS
    assert [e["title"] for e in state.selected_events] == ["Meeting", "Retro"]


def test_select_day_without_events_opens_form(march_state):
    state = reduce(march_state, select_day(16))

    assert state.selected_date == "2024-03-16"
    assert state.view == VIEW_ADD
    assert state.selected_events == []


def test_select_padding_is_noop(march_state):
    assert reduce(march_state, select_day(None)) == march_state
    assert reduce(march_state, select_day(32)) == march_state


def test_event_added_merges_and_closes_form(march_state):
    state = reduce(march_state, select_day(16))
    state = reduce(state, set_draft("Dentist"))

    state = reduce(state, event_added({"id": "n1", "title": "Dentist", "date": "2024-03-16"}))

    assert state.view == VIEW_GRID
    assert state.selected_date is None
    assert state.draft_title == ""
    assert [e["title"] for e in state.events["2024-03-16"]] == ["Dentist"]
    assert len(state.events["2024-03-15"]) == 2


def test_add_failed_keeps_form_and_draft(march_state):
    state = reduce(march_state, select_day(16))
    state = reduce(state, set_draft("Dentist"))

    state = reduce(state, add_failed("Could not add event"))

    assert state.view == VIEW_ADD
    assert state.draft_title == "Dentist"
    assert state.error == "Could not add event"


def test_close_returns_to_grid(march_state):
    state = reduce(march_state, select_day(15))

    state = reduce(state, close())

    assert state.view == VIEW_GRID
    assert state.selected_date is None
    assert state.events == march_state.events


def test_reduce_does_not_mutate_previous_state(march_state):
    before = march_state.events
    reduce(march_state, event_added({"id": "n1", "title": "X", "date": "2024-03-15"}))

    assert len(before["2024-03-15"]) == 2


def test_unknown_action_type():
    with pytest.raises(ValueError, match="Unknown action type"):
        reduce(initial_state(date(2024, 3, 10)), Action("EXPLODE"))
