"""
Waymark - location relationship graphs and travel resolution for games.

Model a world as locations joined by typed, directional relationships, then ask
whether and how a character can get from one place to another.

Synchronous and in-memory. No global registry, no file I/O, no text generation.
All dependencies are constructed and injected by the caller.
"""

__version__ = "0.1.0"

# Relationship graph (imported first: the rest of the package builds on it)
from .relationships import (
    AbilityRequirement,
    HierarchyNode,
    ItemRequirement,
    LocationRelationship,
    OtherRequirement,
    QuestRequirement,
    RelationshipDraft,
    RelationshipPatch,
    RelationshipStore,
    RelationshipStoreOptions,
    RelationshipType,
    SkillRequirement,
    SpellRequirement,
    StateRequirement,
    TimeRequirement,
    TravelDifficulty,
    TravelPossibilityResult,
    TravelRequirement,
    find_path,
    inverse_type,
)

# Travel evaluation
from .travel import check_requirements, difficulty_value, rank_relationships

# Host game records and travel records
from .schemas import (
    Character,
    EnhancedLocationInfo,
    GameState,
    InventoryItem,
    Location,
    QuestState,
    TravelHistoryEntry,
    TravelOutcome,
)

# Visit history and the integration facade
from .visits import InMemoryVisitTracker, LocationVisit, VisitHistoryTracker
from .location_system import LocationSystem, LocationSystemOptions

from .config import Config

__all__ = [
    # Relationship graph
    "AbilityRequirement",
    "HierarchyNode",
    "ItemRequirement",
    "LocationRelationship",
    "OtherRequirement",
    "QuestRequirement",
    "RelationshipDraft",
    "RelationshipPatch",
    "RelationshipStore",
    "RelationshipStoreOptions",
    "RelationshipType",
    "SkillRequirement",
    "SpellRequirement",
    "StateRequirement",
    "TimeRequirement",
    "TravelDifficulty",
    "TravelPossibilityResult",
    "TravelRequirement",
    "find_path",
    "inverse_type",
    # Travel evaluation
    "check_requirements",
    "difficulty_value",
    "rank_relationships",
    # Records
    "Character",
    "EnhancedLocationInfo",
    "GameState",
    "InventoryItem",
    "Location",
    "QuestState",
    "TravelHistoryEntry",
    "TravelOutcome",
    # Integration
    "InMemoryVisitTracker",
    "LocationVisit",
    "VisitHistoryTracker",
    "LocationSystem",
    "LocationSystemOptions",
    # Configuration
    "Config",
]
