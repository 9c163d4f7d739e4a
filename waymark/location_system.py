"""
Location system: the relationship graph fused with per-player visit history.

``LocationSystem`` is the single entry point a game loop uses to move a character.
It composes:

1. A ``RelationshipStore`` (the world graph, owned by the caller)
2. A ``VisitHistoryTracker`` (injected; ``InMemoryVisitTracker`` by default in tests)
3. A bounded travel history of ``TravelHistoryEntry`` records

``handle_travel`` is atomic: every check (requirements on each hop, destination
lookup) happens before the first mutation, so a blocked attempt leaves discovery
state, visit history and travel history exactly as they were.

The system never generates prose with a model. Narratives here are assembled from
authored edge descriptions; callers that want richer narration feed the returned
structures to their own narrator.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, Field

from .config import Config
from .logging_utils import log_warning
from .relationships.helpers import format_travel_time
from .relationships.schemas import (
    HierarchyNode,
    LocationRelationship,
    RelationshipDraft,
    RelationshipType,
    TravelPossibilityResult,
)
from .relationships.store import RelationshipStore
from .schemas import (
    Character,
    EnhancedLocationInfo,
    GameState,
    Location,
    TravelHistoryEntry,
    TravelOutcome,
)
from .travel.ranking import difficulty_value, rank_relationships
from .visits import VisitHistoryTracker


# Relationship types revealed just by standing in a location
_ALWAYS_DISCOVERED_ON_ARRIVAL = {
    RelationshipType.CONTAINS,
    RelationshipType.WITHIN,
    RelationshipType.CONNECTS,
    RelationshipType.VISIBLE_FROM,
}

_EXIT_TYPES = {RelationshipType.CONNECTS, RelationshipType.NEARBY}


class LocationSystemOptions(BaseModel):
    """Behavior switches for ``LocationSystem``."""

    track_travel_history: bool = True
    generate_travel_narration: bool = True
    automatic_relationship_discovery: bool = True
    discover_nearby_on_visit: bool = True
    travel_history_limit: int = Field(100, ge=1, description="Most recent entries kept")
    max_travel_distance: int = Field(
        5, ge=1, description="Most hops handle_travel will cover in one call",
    )

    @classmethod
    def from_config(cls) -> "LocationSystemOptions":
        return cls(
            discover_nearby_on_visit=Config.DISCOVER_NEARBY_ON_VISIT,
            travel_history_limit=Config.TRAVEL_HISTORY_LIMIT,
            max_travel_distance=Config.MAX_TRAVEL_DISTANCE,
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocationSystem:
    """Integration facade over the relationship store and visit history."""

    def __init__(
        self,
        store: RelationshipStore,
        tracker: VisitHistoryTracker,
        options: Optional[LocationSystemOptions] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.tracker = tracker
        self.options = options or LocationSystemOptions()
        self._clock = clock or _utcnow
        self._travel_history: List[TravelHistoryEntry] = []

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    def get_enhanced_location_info(
        self,
        location_id: str,
        game_state: GameState,
        discovered_only: bool = True,
    ) -> Optional[EnhancedLocationInfo]:
        """Merge a location's edges, visit stats and travel history.

        Returns None when the location is not part of ``game_state``.
        """

        location = game_state.find_location(location_id)
        if location is None:
            return None

        outgoing = self.store.get_outgoing_relationships(location_id, discovered_only)

        return EnhancedLocationInfo(
            location=location,
            known_exits=[rel for rel in outgoing if rel.type in _EXIT_TYPES],
            visit_count=self.tracker.visit_count(location_id),
            last_visited=self.tracker.last_visit(location_id),
            contained_locations=[
                rel.to_id for rel in outgoing if rel.type == RelationshipType.CONTAINS
            ],
            visible_locations=[
                rel.to_id for rel in outgoing if rel.type == RelationshipType.VISIBLE_FROM
            ],
            connected_locations=[
                rel.to_id for rel in outgoing if rel.type != RelationshipType.VISIBLE_FROM
            ],
            description=location.description,
            travel_history=[
                entry for entry in self._travel_history
                if entry.from_id == location_id or entry.to_id == location_id
            ],
        )

    def generate_enhanced_description(
        self,
        location_id: str,
        game_state: GameState,
        include_exits: bool = True,
        include_history: bool = True,
    ) -> str:
        """Base description plus known exits, visit history and tracker context."""

        info = self.get_enhanced_location_info(location_id, game_state)
        if info is None:
            return "Location not found."

        description = info.location.description

        if include_exits and info.known_exits:
            description += "\n\nExits:"
            for exit_ in info.known_exits:
                target = game_state.find_location(exit_.to_id)
                exit_name = exit_.name or (target.name if target else exit_.to_id)
                description += f"\n- {exit_name}: {exit_.description}"
                if exit_.difficulty is not None:
                    description += f" ({exit_.difficulty.value} difficulty)"

        if include_history and info.visit_count > 0:
            plural = "s" if info.visit_count != 1 else ""
            description += f"\n\nYou have visited this location {info.visit_count} time{plural}."
            if info.last_visited is not None:
                days = abs(self._clock() - info.last_visited).days
                if days == 0:
                    description += " You were here earlier today."
                elif days == 1:
                    description += " You were here yesterday."
                else:
                    description += f" Your last visit was {days} days ago."

        description += "\n\n" + self.tracker.build_context_summary(location_id, game_state)
        return description

    def build_location_hierarchy(self, root_id: str, discovered_only: bool = False) -> List[HierarchyNode]:
        return self.store.build_location_hierarchy(root_id, discovered_only)

    def generate_path_description(
        self, from_id: str, to_id: str, discovered_only: bool = False
    ) -> Optional[str]:
        return self.store.generate_path_description(from_id, to_id, discovered_only)

    def generate_travel_narrative(
        self,
        from_id: str,
        to_id: str,
        game_state: GameState,
        discovered_only: bool = True,
    ) -> Optional[str]:
        """Narrate the fewest-hop route, or None when there is none."""

        path = self.store.find_path(from_id, to_id, discovered_only)
        if path is None:
            return None
        if not path:
            return "You're already at your destination."
        return self._narrate(path, game_state)

    def _narrate(self, path: List[LocationRelationship], game_state: GameState) -> str:
        parts: List[str] = []
        total_time = 0
        for index, relationship in enumerate(path):
            total_time += relationship.travel_time or 0
            if index > 0:
                parts.append(" and finally " if index == len(path) - 1 else ", then ")

            source = game_state.find_location(relationship.from_id)
            destination = game_state.find_location(relationship.to_id)
            if source is not None and destination is not None:
                segment = f"from {source.name} to {destination.name}"
                if relationship.description:
                    segment += f" {relationship.description}"
                parts.append(segment)
            else:
                parts.append(relationship.description)

        narrative = "You travel " + "".join(parts)
        if total_time > 0:
            narrative += f". The journey takes {format_travel_time(total_time)}"
        return narrative + "."

    # ------------------------------------------------------------------
    # Travel checks
    # ------------------------------------------------------------------

    def check_travel_possibility(
        self,
        from_id: str,
        to_id: str,
        character: Character,
        game_state: GameState,
    ) -> TravelPossibilityResult:
        return self.store.check_travel_possibility(from_id, to_id, character, game_state)

    def check_route_possibility(
        self,
        from_id: str,
        to_id: str,
        character: Character,
        game_state: GameState,
    ) -> TravelPossibilityResult:
        """Check a direct edge, or every hop of the shortest route when none exists.

        Routes are found over all edges (discovered or not) and limited to
        ``max_travel_distance`` hops. Each hop is checked like a direct move, so the
        easiest passable parallel edge is used per hop.
        """

        if from_id == to_id:
            return TravelPossibilityResult(
                can_travel=False,
                description=f"You are already at {to_id}.",
            )

        if self.store.has_relationship(from_id, to_id):
            return self.store.check_travel_possibility(from_id, to_id, character, game_state)

        path = self.store.find_path(from_id, to_id, max_hops=self.options.max_travel_distance)
        if not path:
            return TravelPossibilityResult(
                can_travel=False,
                description=f"There is no known path from {from_id} to {to_id}.",
            )

        route: List[str] = []
        total_time = 0
        timed = False
        hardest: Optional[LocationRelationship] = None
        hop_descriptions: List[str] = []

        for hop in path:
            result = self.store.check_travel_possibility(hop.from_id, hop.to_id, character, game_state)
            if result.relationship_id is not None:
                route.append(result.relationship_id)
            if not result.can_travel:
                return result.model_copy(update={"route": route})

            used = self.store.get_relationship(result.relationship_id)
            if used is None:  # pragma: no cover - result ids always come from the store
                continue
            if used.travel_time is not None:
                total_time += used.travel_time
                timed = True
            if hardest is None or difficulty_value(used.difficulty) > difficulty_value(hardest.difficulty):
                hardest = used
            hop_descriptions.append(used.description)

        return TravelPossibilityResult(
            can_travel=True,
            difficulty=hardest.difficulty if hardest is not None else None,
            estimated_time=total_time if timed else None,
            description="Travel is possible via " + ", then ".join(hop_descriptions),
            relationship_id=route[-1],
            route=route,
        )

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def handle_travel(
        self,
        from_id: str,
        to_id: str,
        character: Character,
        game_state: GameState,
    ) -> TravelOutcome:
        """Move a character, or explain why they cannot move.

        On success the traversed edges are discovered, the destination visit is
        recorded, arrival discovery runs and exactly one travel history entry is
        appended. On failure nothing changes.
        """

        check = self.check_route_possibility(from_id, to_id, character, game_state)
        if not check.can_travel:
            return TravelOutcome(success=False, narrative=check.description)

        destination = game_state.find_location(to_id)
        if destination is None:
            return TravelOutcome(
                success=False,
                narrative="The destination location could not be found.",
            )

        route_edges = [
            rel for rel in (self.store.get_relationship(rel_id) for rel_id in check.route)
            if rel is not None
        ]

        if self.options.generate_travel_narration:
            narrative = self._narrate(route_edges, game_state)
        else:
            narrative = f"You travel to {destination.name}."

        # Checks are done; everything below mutates state
        for relationship in route_edges:
            self.store.discover_relationship(relationship.id)

        self.tracker.record_visit(destination, game_state)
        discoveries = self._discover_on_arrival(to_id)

        entry: Optional[TravelHistoryEntry] = None
        if self.options.track_travel_history:
            entry = TravelHistoryEntry(
                from_id=from_id,
                to_id=to_id,
                timestamp=self._clock(),
                relationship_id=check.route[-1],
                travel_time=sum(rel.travel_time or 0 for rel in route_edges),
                narrative=narrative,
                discoveries=discoveries,
                route=list(check.route),
            )
            self._append_history(entry)

        return TravelOutcome(success=True, narrative=narrative, entry=entry)

    def record_location_visit(
        self,
        location: Location,
        game_state: GameState,
        from_id: Optional[str] = None,
    ) -> bool:
        """Record a visit that happened outside ``handle_travel`` (teleports, scripted moves).

        With ``from_id`` the move is logged against the easiest direct edge, which is
        also marked discovered. Returns what the tracker returned.
        """

        recorded = self.tracker.record_visit(location, game_state)
        discoveries = self._discover_on_arrival(location.id)

        if from_id is not None and self.options.track_travel_history:
            self._record_direct_travel(from_id, location.id, discoveries=discoveries)

        return recorded

    def _discover_on_arrival(self, location_id: str) -> List[str]:
        """Reveal the outgoing edges anyone standing here would notice."""

        if not self.options.automatic_relationship_discovery:
            return []

        revealed: List[str] = []
        for relationship in self.store.get_outgoing_relationships(location_id):
            if relationship.discovered:
                continue
            if relationship.type in _ALWAYS_DISCOVERED_ON_ARRIVAL or (
                relationship.type == RelationshipType.NEARBY and self.options.discover_nearby_on_visit
            ):
                self.store.discover_relationship(relationship.id)
                revealed.append(relationship.id)
        return revealed

    def _record_direct_travel(
        self,
        from_id: str,
        to_id: str,
        *,
        narrative: str = "",
        discoveries: Optional[List[str]] = None,
    ) -> Optional[TravelHistoryEntry]:
        candidates = rank_relationships(self.store.get_direct_relationships(from_id, to_id))
        if not candidates:
            log_warning(f"No relationship found for travel from {from_id} to {to_id}")
            return None

        relationship = candidates[0]
        self.store.discover_relationship(relationship.id)

        entry = TravelHistoryEntry(
            from_id=from_id,
            to_id=to_id,
            timestamp=self._clock(),
            relationship_id=relationship.id,
            travel_time=relationship.travel_time or 0,
            narrative=narrative or f"Traveled from {from_id} to {to_id} via {relationship.description}",
            discoveries=list(discoveries or []),
            route=[relationship.id],
        )
        self._append_history(entry)
        return entry

    def _append_history(self, entry: TravelHistoryEntry) -> None:
        self._travel_history.append(entry)
        overflow = len(self._travel_history) - self.options.travel_history_limit
        if overflow > 0:
            del self._travel_history[:overflow]

    # ------------------------------------------------------------------
    # Authoring and history access
    # ------------------------------------------------------------------

    def create_connection(
        self,
        from_id: str,
        to_id: str,
        relationship_type: RelationshipType,
        description: str,
        bidirectional: bool = True,
        **fields: Any,
    ) -> LocationRelationship:
        """Shorthand for ``store.add_relationship`` with bidirectional edges by default."""
        draft = RelationshipDraft(
            from_id=from_id,
            to_id=to_id,
            type=relationship_type,
            description=description,
            bidirectional=bidirectional,
            **fields,
        )
        return self.store.add_relationship(draft)

    def get_travel_history(self) -> List[TravelHistoryEntry]:
        return list(self._travel_history)

    def clear_travel_history(self) -> None:
        self._travel_history.clear()
