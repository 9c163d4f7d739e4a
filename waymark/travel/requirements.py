"""Evaluate travel requirements against a character and game state snapshot.

Each requirement kind has one checker. Checkers never raise: a requirement whose
payload could not be decoded (empty typed fields) is simply not met.

Skill requirements are advisory. They describe a check the caller rolls at the
moment of travel, so they never block. Spell, time and other requirements depend
on mechanics that live outside this library and always block here; callers that
support them should resolve them before asking whether travel is possible.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping

from pydantic import BaseModel

from waymark.relationships.schemas import (
    AbilityRequirement,
    ItemRequirement,
    QuestRequirement,
    StateRequirement,
    TravelRequirement,
)

if TYPE_CHECKING:
    from waymark.schemas import Character, GameState


def _item_met(requirement: ItemRequirement, character: "Character", game_state: "GameState") -> bool:
    if not requirement.item_id:
        return False
    return character.has_item(requirement.item_id)


def _ability_met(requirement: AbilityRequirement, character: "Character", game_state: "GameState") -> bool:
    if requirement.ability is None or requirement.min_score is None:
        return False
    score = character.abilities.get(requirement.ability)
    if score is None:
        return False
    return score >= requirement.min_score


def _quest_met(requirement: QuestRequirement, character: "Character", game_state: "GameState") -> bool:
    if not requirement.quest_id:
        return False
    return requirement.quest_id in game_state.completed_quest_ids()


def _state_met(requirement: StateRequirement, character: "Character", game_state: "GameState") -> bool:
    if not requirement.path or requirement.expected is None:
        return False
    found, current = lookup_state_path(game_state, requirement.path)
    if not found or current is None:
        return False
    return _as_comparable_string(current) == requirement.expected


def _never_blocks(requirement: TravelRequirement, character: "Character", game_state: "GameState") -> bool:
    return True


def _always_blocks(requirement: TravelRequirement, character: "Character", game_state: "GameState") -> bool:
    return False


_CHECKERS: Dict[str, Callable[[Any, "Character", "GameState"], bool]] = {
    "item": _item_met,
    "ability": _ability_met,
    "skill": _never_blocks,
    "quest": _quest_met,
    "state": _state_met,
    "spell": _always_blocks,
    "time": _always_blocks,
    "other": _always_blocks,
}


def requirement_met(requirement: TravelRequirement, character: "Character", game_state: "GameState") -> bool:
    """Return True if ``requirement`` does not stand in the character's way."""
    checker = _CHECKERS.get(requirement.kind, _always_blocks)
    return checker(requirement, character, game_state)


def check_requirements(
    requirements: Iterable[TravelRequirement],
    character: "Character",
    game_state: "GameState",
) -> List[TravelRequirement]:
    """Return the requirements that block travel, in authored order."""
    return [req for req in requirements if not requirement_met(req, character, game_state)]


def lookup_state_path(data: Any, path: str) -> tuple[bool, Any]:
    """Follow a dot-path through models, mappings and sequences.

    Model fields and extra fields are read in place, so the state is never
    serialized. Numeric segments index into lists (``"party.0.name"``).
    Returns ``(found, value)``.
    """

    current = data
    for part in path.split("."):
        if current is None:
            return False, None
        if isinstance(current, BaseModel):
            extra = current.model_extra or {}
            if part in type(current).model_fields:
                current = getattr(current, part)
            elif part in extra:
                current = extra[part]
            else:
                return False, None
        elif isinstance(current, Mapping):
            if part not in current:
                return False, None
            current = current[part]
        elif isinstance(current, (list, tuple)) and part.isdigit():
            index = int(part)
            if index >= len(current):
                return False, None
            current = current[index]
        else:
            return False, None
    return True, current


def _as_comparable_string(value: Any) -> str:
    # Authored payloads spell booleans the JSON way ("gate_open:true")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
