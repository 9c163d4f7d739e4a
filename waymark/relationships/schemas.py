"""Pydantic schemas for location relationships.

Relationships are typed, directed edges between location ids. Records are frozen:
the ``RelationshipStore`` is the only thing that produces new versions of them,
which keeps the primary map and the endpoint index in step.

Travel requirements form a tagged union keyed on ``kind``. Legacy payloads such as
``{"kind": "ability", "value": "strength:14"}`` are decoded once, when the
requirement is created, into typed fields (``ability="strength"``,
``min_score=14``). A payload that cannot be decoded leaves the typed fields empty,
and an empty requirement is never satisfied.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from waymark.config import Config


class RelationshipType(str, Enum):
    """Kinds of connection between two locations."""

    # Hierarchical
    CONTAINS = "contains"          # tavern contains its rooms
    WITHIN = "within"              # room is within the tavern
    # Physical
    CONNECTS = "connects"          # door, path, road
    NEARBY = "nearby"              # neighboring buildings
    # Perceptual
    VISIBLE_FROM = "visibleFrom"   # mountain seen from the valley
    # Special
    SECRET = "secret"              # hidden door, concealed path
    MAGICAL = "magical"            # portal, teleportation circle
    TEMPORARY = "temporary"        # drawbridge, seasonal ford


class TravelDifficulty(str, Enum):
    """Difficulty tiers for traversing a relationship, easiest first."""

    TRIVIAL = "trivial"
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"
    HARD = "hard"
    EXTREME = "extreme"
    IMPOSSIBLE = "impossible"

    @property
    def rank(self) -> int:
        """Numeric position used when ordering parallel edges (trivial=0 ... impossible=6)."""
        return _DIFFICULTY_RANKS[self]


_DIFFICULTY_RANKS: Dict[TravelDifficulty, int] = {
    difficulty: index for index, difficulty in enumerate(TravelDifficulty)
}


# ============================================================================
# Travel requirements
# ============================================================================

RequirementValue = Union[int, str]


def _split_pair(value: Any) -> tuple[Optional[str], Optional[str]]:
    """Split ``"key:rest"`` payloads on the first colon."""

    if not isinstance(value, str) or ":" not in value:
        return None, None
    key, _, rest = value.partition(":")
    key = key.strip()
    return (key or None), rest.strip()


class BaseRequirement(BaseModel):
    """Fields shared by every requirement kind."""

    description: str = Field(..., description="Player-facing explanation of the requirement")
    value: Optional[RequirementValue] = Field(
        None, description="Raw payload as authored (item id, 'ability:score', ...)",
    )
    check_type: Optional[Literal["possession", "check", "consumption"]] = None
    difficulty: Optional[int] = Field(None, description="DC for skill checks")


class ItemRequirement(BaseRequirement):
    """The character must carry an item with this id."""

    kind: Literal["item"] = "item"
    item_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("item_id") is None and data.get("value") is not None:
            data = {**data, "item_id": str(data["value"])}
        return data


class AbilityRequirement(BaseRequirement):
    """An ability score must reach ``min_score``."""

    kind: Literal["ability"] = "ability"
    ability: Optional[str] = None
    min_score: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_value(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("ability") is not None:
            return data
        ability, score = _split_pair(data.get("value"))
        try:
            min_score = int(score) if score is not None else None
        except ValueError:
            min_score = None
        return {**data, "ability": ability, "min_score": min_score}


class SkillRequirement(BaseRequirement):
    """Advisory skill check, resolved by the caller at the moment of travel."""

    kind: Literal["skill"] = "skill"
    skill: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("skill") is None and isinstance(data.get("value"), str):
            data = {**data, "skill": data["value"]}
        return data


class SpellRequirement(BaseRequirement):
    kind: Literal["spell"] = "spell"
    spell: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("spell") is None and isinstance(data.get("value"), str):
            data = {**data, "spell": data["value"]}
        return data


class TimeRequirement(BaseRequirement):
    kind: Literal["time"] = "time"
    window: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("window") is None and data.get("value") is not None:
            data = {**data, "window": str(data["value"])}
        return data


class QuestRequirement(BaseRequirement):
    """A quest with this id must be completed."""

    kind: Literal["quest"] = "quest"
    quest_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("quest_id") is None and data.get("value") is not None:
            data = {**data, "quest_id": str(data["value"])}
        return data


class StateRequirement(BaseRequirement):
    """A dot-path into the game state must equal ``expected`` (compared as strings)."""

    kind: Literal["state"] = "state"
    path: Optional[str] = None
    expected: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_value(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("path") is not None:
            return data
        path, expected = _split_pair(data.get("value"))
        return {**data, "path": path, "expected": expected}


class OtherRequirement(BaseRequirement):
    kind: Literal["other"] = "other"


TravelRequirement = Annotated[
    Union[
        ItemRequirement,
        AbilityRequirement,
        SkillRequirement,
        SpellRequirement,
        TimeRequirement,
        QuestRequirement,
        StateRequirement,
        OtherRequirement,
    ],
    Field(discriminator="kind"),
]


# ============================================================================
# Relationships
# ============================================================================


class RelationshipDraft(BaseModel):
    """A relationship as authored, before the store assigns it an id."""

    from_id: str = Field(..., description="Source location id")
    to_id: str = Field(..., description="Destination location id")
    type: RelationshipType
    bidirectional: bool = Field(False, description="Whether a reciprocal edge should exist")
    description: str = ""
    travel_time: Optional[int] = Field(None, description="Minutes needed to traverse", ge=0)
    difficulty: Optional[TravelDifficulty] = None
    requirements: List[TravelRequirement] = Field(default_factory=list)
    # None means "let the store decide" (undiscovered while discovery is tracked)
    discovered: Optional[bool] = None
    name: Optional[str] = Field(None, description="Optional label, e.g. 'North Door'")
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class LocationRelationship(BaseModel):
    """A stored, typed, directed edge between two locations."""

    model_config = ConfigDict(frozen=True)

    id: str
    from_id: str
    to_id: str
    type: RelationshipType
    bidirectional: bool = False
    description: str = ""
    travel_time: Optional[int] = None
    difficulty: Optional[TravelDifficulty] = None
    requirements: List[TravelRequirement] = Field(default_factory=list)
    discovered: bool = False
    name: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    # Id of the paired reverse edge when the store created or matched one
    reciprocal_id: Optional[str] = None


class RelationshipPatch(BaseModel):
    """Fields that may change after creation.

    Id, endpoints, type and direction are structural and fixed; discovery only
    moves forward through ``RelationshipStore.discover_relationship``.
    """

    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None
    travel_time: Optional[int] = Field(None, ge=0)
    difficulty: Optional[TravelDifficulty] = None
    requirements: Optional[List[TravelRequirement]] = None
    name: Optional[str] = None
    tags: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None


class RelationshipStoreOptions(BaseModel):
    """Behavior switches for a ``RelationshipStore``."""

    enforce_consistency: bool = Field(
        True, description="Create reciprocal edges for bidirectional relationships",
    )
    track_discovery: bool = Field(
        True, description="New edges start undiscovered; when off every edge is discovered",
    )
    log_changes: bool = Field(False, description="Print every mutation to the console")
    evaluate_all_parallel_edges: bool = Field(
        True,
        description=(
            "When the easiest direct edge is blocked, try the harder ones before "
            "reporting travel as blocked"
        ),
    )

    @classmethod
    def from_config(cls) -> "RelationshipStoreOptions":
        return cls(
            enforce_consistency=Config.ENFORCE_CONSISTENCY,
            track_discovery=Config.TRACK_DISCOVERY,
            log_changes=Config.LOG_CHANGES,
            evaluate_all_parallel_edges=Config.EVALUATE_ALL_PARALLEL_EDGES,
        )


class TravelPossibilityResult(BaseModel):
    """Outcome of checking whether a character may move between two locations."""

    can_travel: bool
    blocked_by: List[TravelRequirement] = Field(default_factory=list)
    difficulty: Optional[TravelDifficulty] = None
    estimated_time: Optional[int] = Field(None, description="Minutes")
    description: str
    relationship_id: Optional[str] = Field(
        None, description="Edge that was selected (the final hop for routes)",
    )
    route: List[str] = Field(
        default_factory=list, description="Ids of every edge the check covered, in order",
    )


class HierarchyNode(BaseModel):
    """One location in a containment tree."""

    id: str
    relationship: LocationRelationship
    children: List["HierarchyNode"] = Field(default_factory=list)
