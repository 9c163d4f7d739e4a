"""
Visit history tracking.

``LocationSystem`` consumes visit history through the narrow
``VisitHistoryTracker`` protocol so games can plug in their own context manager.
``InMemoryVisitTracker`` is the reference implementation: it keeps the most recent
visits per location and renders a markdown-style context block that a narrator
can consume.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from waymark.config import Config
from waymark.schemas import GameState, Location


class VisitHistoryTracker(Protocol):
    """Protocol for per-player visit history."""

    def record_visit(self, location: Location, game_state: GameState) -> bool:
        """Record that the player entered ``location``. Returns True if stored."""
        ...

    def visit_count(self, location_id: str) -> int:
        ...

    def last_visit(self, location_id: str) -> Optional[datetime]:
        ...

    def build_context_summary(self, location_id: str, game_state: GameState) -> str:
        """Render what the player knows about a location as prompt-ready text."""
        ...


class LocationVisit(BaseModel):
    timestamp: datetime
    details: List[str] = Field(default_factory=list)
    player_actions: List[str] = Field(default_factory=list)
    discoveries: List[str] = Field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryVisitTracker:
    """Dict-backed visit history, most recent visits kept per location.

    Good for:
    - Tests and prototypes
    - Single-session games that snapshot state elsewhere

    Limitations:
    - History is lost when the process exits
    - Only the last ``max_visits_per_location`` visits are kept per location
    """

    def __init__(
        self,
        *,
        max_visits_per_location: Optional[int] = None,
        max_details_per_visit: int = 10,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if max_visits_per_location is None:
            max_visits_per_location = Config.MAX_VISITS_PER_LOCATION
        if max_visits_per_location < 1:
            raise ValueError(
                f"max_visits_per_location must be at least 1 (got {max_visits_per_location})"
            )
        self.max_visits_per_location = max_visits_per_location
        self.max_details_per_visit = max_details_per_visit
        self._clock = clock or _utcnow
        self._visits: Dict[str, List[LocationVisit]] = {}
        # Visits beyond the retained window still count toward visit_count
        self._totals: Dict[str, int] = {}
        self.current_location_id: Optional[str] = None

    def record_visit(self, location: Location, game_state: GameState) -> bool:
        visits = self._visits.setdefault(location.id, [])
        visits.append(LocationVisit(timestamp=self._clock()))
        if len(visits) > self.max_visits_per_location:
            del visits[: len(visits) - self.max_visits_per_location]
        self._totals[location.id] = self._totals.get(location.id, 0) + 1
        self.current_location_id = location.id
        return True

    def visit_count(self, location_id: str) -> int:
        return self._totals.get(location_id, 0)

    def has_visited(self, location_id: str) -> bool:
        return self.visit_count(location_id) > 0

    def last_visit(self, location_id: str) -> Optional[datetime]:
        visits = self._visits.get(location_id)
        if not visits:
            return None
        return visits[-1].timestamp

    def visits(self, location_id: str) -> List[LocationVisit]:
        return list(self._visits.get(location_id, []))

    def _current_visit(self, location_id: str) -> Optional[LocationVisit]:
        visits = self._visits.get(location_id)
        return visits[-1] if visits else None

    def add_detail(self, location_id: str, detail: str) -> bool:
        """Attach a noticed detail to the latest visit. False if never visited or full."""
        visit = self._current_visit(location_id)
        if visit is None or len(visit.details) >= self.max_details_per_visit:
            return False
        visit.details.append(detail)
        return True

    def add_player_action(self, location_id: str, action: str) -> bool:
        visit = self._current_visit(location_id)
        if visit is None:
            return False
        visit.player_actions.append(action)
        return True

    def add_discovery(self, location_id: str, discovery: str) -> bool:
        visit = self._current_visit(location_id)
        if visit is None:
            return False
        visit.discoveries.append(discovery)
        return True

    def clear_location_history(self, location_id: str) -> None:
        self._visits.pop(location_id, None)
        self._totals.pop(location_id, None)

    def clear_all_history(self) -> None:
        self._visits.clear()
        self._totals.clear()
        self.current_location_id = None

    def build_context_summary(self, location_id: str, game_state: GameState) -> str:
        location = game_state.find_location(location_id)
        if location is None:
            return f"Location Context: No information found for location ID {location_id}."

        lines: List[str] = ["## Location Information", f"Name: {location.name}"]
        if location.description:
            lines.append(f"Description: {location.description}")
        if location.type:
            lines.append(f"Type: {location.type}")

        visits = self._visits.get(location_id, [])
        if not visits:
            lines.extend(["", "## Visit History", "This is the first visit to this location."])
            return "\n".join(lines)

        lines.extend(["", "## Visit History", f"Visits: {self.visit_count(location_id)}"])
        recent = visits[-1]
        for heading, entries in (
            ("Key Details", recent.details),
            ("Discoveries", recent.discoveries),
        ):
            if entries:
                lines.append(f"\n{heading}:")
                lines.extend(f"- {entry}" for entry in entries)

        if len(visits) > 1:
            lines.append("\nPrior Visits:")
            for visit in reversed(visits[:-1]):
                day = visit.timestamp.date().isoformat()
                if visit.player_actions:
                    lines.append(f"- Visit on {day}: {', '.join(visit.player_actions)}")
                else:
                    lines.append(f"- Visited on {day}")

        return "\n".join(lines)
