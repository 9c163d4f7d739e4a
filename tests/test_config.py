"""Tests for environment-driven configuration and option factories."""

import pytest

from waymark.config import Config
from waymark.location_system import LocationSystemOptions
from waymark.relationships import RelationshipStoreOptions


def test_defaults_validate():
    Config.validate()


@pytest.mark.parametrize(
    "attribute, env_name",
    [
        ("TRAVEL_HISTORY_LIMIT", "WAYMARK_TRAVEL_HISTORY_LIMIT"),
        ("MAX_TRAVEL_DISTANCE", "WAYMARK_MAX_TRAVEL_DISTANCE"),
        ("MAX_VISITS_PER_LOCATION", "WAYMARK_MAX_VISITS_PER_LOCATION"),
    ],
)
def test_validate_rejects_non_positive_limits(monkeypatch, attribute, env_name):
    monkeypatch.setattr(Config, attribute, 0)

    with pytest.raises(ValueError, match=env_name):
        Config.validate()


def test_display_lists_settings():
    text = Config.display()

    assert text.startswith("Waymark Configuration:")
    assert "Track Discovery:" in text
    assert f"Max Travel Distance: {Config.MAX_TRAVEL_DISTANCE} hops" in text


def test_options_from_config(monkeypatch):
    monkeypatch.setattr(Config, "TRACK_DISCOVERY", False)
    monkeypatch.setattr(Config, "LOG_CHANGES", True)
    monkeypatch.setattr(Config, "EVALUATE_ALL_PARALLEL_EDGES", False)
    monkeypatch.setattr(Config, "TRAVEL_HISTORY_LIMIT", 7)
    monkeypatch.setattr(Config, "MAX_TRAVEL_DISTANCE", 3)
    monkeypatch.setattr(Config, "DISCOVER_NEARBY_ON_VISIT", False)

    store_options = RelationshipStoreOptions.from_config()
    system_options = LocationSystemOptions.from_config()

    assert store_options.track_discovery is False
    assert store_options.log_changes is True
    assert store_options.evaluate_all_parallel_edges is False
    assert store_options.enforce_consistency is Config.ENFORCE_CONSISTENCY
    assert system_options.travel_history_limit == 7
    assert system_options.max_travel_distance == 3
    assert system_options.discover_nearby_on_visit is False


def test_explicit_options_ignore_config(monkeypatch):
    monkeypatch.setattr(Config, "TRACK_DISCOVERY", False)

    assert RelationshipStoreOptions().track_discovery is True
