"""Tests for the in-memory visit tracker."""

from datetime import datetime, timedelta, timezone

import pytest

from waymark.config import Config
from waymark.schemas import GameState, Location
from waymark.visits import InMemoryVisitTracker, VisitHistoryTracker


class SteppingClock:
    """Returns a new day on every call."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(days=1)
        return value


def _state() -> tuple[GameState, Location]:
    mill = Location(id="mill", name="Old Mill", description="The wheel creaks in the stream.", type="building")
    return GameState(locations={"mill": mill}), mill


def test_tracker_satisfies_protocol():
    tracker: VisitHistoryTracker = InMemoryVisitTracker()
    state, mill = _state()

    assert tracker.record_visit(mill, state) is True
    assert tracker.visit_count("mill") == 1


def test_visit_counts_survive_window_trimming():
    clock = SteppingClock(datetime(2024, 5, 1, tzinfo=timezone.utc))
    tracker = InMemoryVisitTracker(max_visits_per_location=2, clock=clock)
    state, mill = _state()

    for _ in range(4):
        tracker.record_visit(mill, state)

    assert tracker.visit_count("mill") == 4
    assert len(tracker.visits("mill")) == 2
    assert tracker.last_visit("mill") == datetime(2024, 5, 4, tzinfo=timezone.utc)
    assert tracker.current_location_id == "mill"
    assert tracker.has_visited("mill")
    assert not tracker.has_visited("forge")
    assert tracker.last_visit("forge") is None


def test_details_require_a_visit_and_respect_limit():
    tracker = InMemoryVisitTracker(max_details_per_visit=1)
    state, mill = _state()

    assert tracker.add_detail("mill", "Flour dust everywhere") is False
    assert tracker.add_player_action("mill", "Knocked") is False
    assert tracker.add_discovery("mill", "A loose floorboard") is False

    tracker.record_visit(mill, state)

    assert tracker.add_detail("mill", "Flour dust everywhere") is True
    assert tracker.add_detail("mill", "A cat on the sacks") is False
    assert tracker.add_player_action("mill", "Knocked") is True
    assert tracker.add_discovery("mill", "A loose floorboard") is True


def test_context_summary_for_first_visit():
    tracker = InMemoryVisitTracker()
    state, _ = _state()

    summary = tracker.build_context_summary("mill", state)

    assert summary == (
        "## Location Information\n"
        "Name: Old Mill\n"
        "Description: The wheel creaks in the stream.\n"
        "Type: building\n"
        "\n"
        "## Visit History\n"
        "This is the first visit to this location."
    )


def test_context_summary_with_history():
    clock = SteppingClock(datetime(2024, 5, 1, tzinfo=timezone.utc))
    tracker = InMemoryVisitTracker(clock=clock)
    state, mill = _state()

    tracker.record_visit(mill, state)
    tracker.add_player_action("mill", "Talked to the miller")
    tracker.record_visit(mill, state)
    tracker.add_detail("mill", "The wheel has stopped")
    tracker.add_discovery("mill", "A trapdoor under the grain")

    summary = tracker.build_context_summary("mill", state)

    assert "Visits: 2" in summary
    assert "Key Details:\n- The wheel has stopped" in summary
    assert "Discoveries:\n- A trapdoor under the grain" in summary
    assert "Prior Visits:\n- Visit on 2024-05-01: Talked to the miller" in summary


def test_context_summary_for_unknown_location():
    tracker = InMemoryVisitTracker()

    assert tracker.build_context_summary("forge", GameState()) == (
        "Location Context: No information found for location ID forge."
    )


def test_clearing_history():
    tracker = InMemoryVisitTracker()
    state, mill = _state()
    tracker.record_visit(mill, state)

    tracker.clear_location_history("mill")
    assert tracker.visit_count("mill") == 0

    tracker.record_visit(mill, state)
    tracker.clear_all_history()
    assert tracker.visit_count("mill") == 0
    assert tracker.current_location_id is None


def test_visit_limit_defaults_to_config(monkeypatch):
    monkeypatch.setattr(Config, "MAX_VISITS_PER_LOCATION", 3)

    assert InMemoryVisitTracker().max_visits_per_location == 3
    assert InMemoryVisitTracker(max_visits_per_location=1).max_visits_per_location == 1


@pytest.mark.parametrize("limit", [0, -2])
def test_visit_limit_must_be_positive(limit):
    with pytest.raises(ValueError, match="max_visits_per_location"):
        InMemoryVisitTracker(max_visits_per_location=limit)
