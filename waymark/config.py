"""
Waymark Configuration

Loads configuration from environment variables with sensible defaults.

The store and location system never read this class on their own. Callers that
want environment-driven behavior build their options explicitly:

    store = RelationshipStore(RelationshipStoreOptions.from_config())
"""

import os

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Library configuration loaded from environment variables."""

    # Relationship store
    ENFORCE_CONSISTENCY: bool = _env_flag("WAYMARK_ENFORCE_CONSISTENCY", "true")
    TRACK_DISCOVERY: bool = _env_flag("WAYMARK_TRACK_DISCOVERY", "true")
    LOG_CHANGES: bool = _env_flag("WAYMARK_LOG_CHANGES", "false")
    EVALUATE_ALL_PARALLEL_EDGES: bool = _env_flag("WAYMARK_EVALUATE_ALL_PARALLEL_EDGES", "true")

    # Location system
    TRAVEL_HISTORY_LIMIT: int = int(os.getenv("WAYMARK_TRAVEL_HISTORY_LIMIT", "100"))
    DISCOVER_NEARBY_ON_VISIT: bool = _env_flag("WAYMARK_DISCOVER_NEARBY_ON_VISIT", "true")
    MAX_TRAVEL_DISTANCE: int = int(os.getenv("WAYMARK_MAX_TRAVEL_DISTANCE", "5"))

    # Visit tracker
    MAX_VISITS_PER_LOCATION: int = int(os.getenv("WAYMARK_MAX_VISITS_PER_LOCATION", "5"))

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are out of range."""
        if cls.TRAVEL_HISTORY_LIMIT < 1:
            raise ValueError(
                "WAYMARK_TRAVEL_HISTORY_LIMIT must be at least 1 "
                f"(got {cls.TRAVEL_HISTORY_LIMIT})"
            )

        if cls.MAX_TRAVEL_DISTANCE < 1:
            raise ValueError(
                "WAYMARK_MAX_TRAVEL_DISTANCE must be at least 1 "
                f"(got {cls.MAX_TRAVEL_DISTANCE})"
            )

        if cls.MAX_VISITS_PER_LOCATION < 1:
            raise ValueError(
                "WAYMARK_MAX_VISITS_PER_LOCATION must be at least 1 "
                f"(got {cls.MAX_VISITS_PER_LOCATION})"
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Waymark Configuration:",
            f"  Enforce Consistency: {cls.ENFORCE_CONSISTENCY}",
            f"  Track Discovery: {cls.TRACK_DISCOVERY}",
            f"  Log Changes: {cls.LOG_CHANGES}",
            f"  Evaluate All Parallel Edges: {cls.EVALUATE_ALL_PARALLEL_EDGES}",
            f"  Travel History Limit: {cls.TRAVEL_HISTORY_LIMIT}",
            f"  Discover Nearby On Visit: {cls.DISCOVER_NEARBY_ON_VISIT}",
            f"  Max Travel Distance: {cls.MAX_TRAVEL_DISTANCE} hops",
            f"  Max Visits Per Location: {cls.MAX_VISITS_PER_LOCATION}",
        ]
        return "\n".join(lines)
