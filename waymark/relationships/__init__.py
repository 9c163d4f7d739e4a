"""Typed, directional relationships between locations."""

from .schemas import (
    AbilityRequirement,
    BaseRequirement,
    HierarchyNode,
    ItemRequirement,
    LocationRelationship,
    OtherRequirement,
    QuestRequirement,
    RelationshipDraft,
    RelationshipPatch,
    RelationshipStoreOptions,
    RelationshipType,
    SkillRequirement,
    SpellRequirement,
    StateRequirement,
    TimeRequirement,
    TravelDifficulty,
    TravelPossibilityResult,
    TravelRequirement,
)
from .algebra import inverse_type, reciprocal_description, reciprocal_name
from .helpers import build_location_hierarchy, describe_path, find_path, format_travel_time
from .store import RelationshipStore

__all__ = [
    "AbilityRequirement",
    "BaseRequirement",
    "HierarchyNode",
    "ItemRequirement",
    "LocationRelationship",
    "OtherRequirement",
    "QuestRequirement",
    "RelationshipDraft",
    "RelationshipPatch",
    "RelationshipStoreOptions",
    "RelationshipType",
    "SkillRequirement",
    "SpellRequirement",
    "StateRequirement",
    "TimeRequirement",
    "TravelDifficulty",
    "TravelPossibilityResult",
    "TravelRequirement",
    "inverse_type",
    "reciprocal_description",
    "reciprocal_name",
    "build_location_hierarchy",
    "describe_path",
    "find_path",
    "format_travel_time",
    "RelationshipStore",
]
