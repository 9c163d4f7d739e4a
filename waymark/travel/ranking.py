"""Rank parallel edges by difficulty and decide whether a hop can be traveled."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from waymark.relationships.schemas import (
    LocationRelationship,
    TravelDifficulty,
    TravelPossibilityResult,
)

from .requirements import check_requirements

if TYPE_CHECKING:
    from waymark.schemas import Character, GameState


def difficulty_value(difficulty: Optional[TravelDifficulty]) -> int:
    """Numeric rank of a difficulty tier; edges without one rank as trivial."""
    if difficulty is None:
        return 0
    return TravelDifficulty(difficulty).rank


def rank_relationships(relationships: Sequence[LocationRelationship]) -> List[LocationRelationship]:
    """Order edges easiest first: by difficulty tier, then by travel time.

    The sort is stable, so edges that tie keep their insertion order.
    """
    return sorted(
        relationships,
        key=lambda rel: (difficulty_value(rel.difficulty), rel.travel_time or 0),
    )


def evaluate_direct_edges(
    from_id: str,
    to_id: str,
    relationships: Sequence[LocationRelationship],
    character: "Character",
    game_state: "GameState",
    *,
    evaluate_all: bool = True,
) -> TravelPossibilityResult:
    """Decide whether any of the direct edges from ``from_id`` to ``to_id`` is usable.

    Edges are tried easiest first. With ``evaluate_all`` the first passable edge
    wins even when an easier one is blocked; without it only the easiest edge is
    checked. When nothing passes, the blockers of the easiest edge are reported.
    """

    if not relationships:
        return TravelPossibilityResult(
            can_travel=False,
            description=f"There is no known direct path from {from_id} to {to_id}.",
        )

    ranked = rank_relationships(relationships)
    candidates = ranked if evaluate_all else ranked[:1]

    for relationship in candidates:
        if not check_requirements(relationship.requirements, character, game_state):
            return TravelPossibilityResult(
                can_travel=True,
                difficulty=relationship.difficulty,
                estimated_time=relationship.travel_time,
                description=f"Travel is possible via {relationship.description}",
                relationship_id=relationship.id,
                route=[relationship.id],
            )

    easiest = ranked[0]
    blocked_by = check_requirements(easiest.requirements, character, game_state)
    return TravelPossibilityResult(
        can_travel=False,
        blocked_by=blocked_by,
        difficulty=easiest.difficulty,
        estimated_time=easiest.travel_time,
        description="Travel is blocked because: " + ", ".join(req.description for req in blocked_by),
        relationship_id=easiest.id,
        route=[easiest.id],
    )
