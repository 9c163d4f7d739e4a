"""
Pydantic schemas for the records Waymark reads and produces.

Locations, characters and game state belong to the host game; Waymark only reads
the fields it needs to evaluate travel and describe places. ``GameState`` accepts
extra fields so state requirements can reach arbitrary nested data
(``"flags.gate_open:true"``).

Travel history entries, enhanced location views and travel outcomes are produced
here and handed back to the caller as plain models.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from waymark.relationships.schemas import LocationRelationship


# ============================================================================
# Host game records
# ============================================================================


class Location(BaseModel):
    """A place in the world. Waymark refers to locations by id only."""

    id: str = Field(..., description="Unique location identifier")
    name: str = Field(..., description="Display name")
    description: str = Field("", description="Base prose description")
    type: Optional[str] = Field(None, description="Free-form type tag (tavern, forest, ...)")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class InventoryItem(BaseModel):
    id: str
    name: Optional[str] = None
    quantity: int = 1


class Character(BaseModel):
    """The traveler whose abilities and inventory gate requirements."""

    character_id: str = Field(..., description="Unique character identifier")
    name: Optional[str] = None
    # Ability scores keyed by name ("strength": 14)
    abilities: Dict[str, int] = Field(default_factory=dict)
    inventory: List[InventoryItem] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def has_item(self, item_id: str) -> bool:
        return any(item.id == item_id and item.quantity > 0 for item in self.inventory)


class QuestState(BaseModel):
    id: str
    status: str = Field("active", description="active, completed, failed, ...")


class GameState(BaseModel):
    """Snapshot of the host game's state.

    Unknown fields are kept so state requirements can address them by dot-path.
    """

    model_config = ConfigDict(extra="allow")

    current_location_id: Optional[str] = None
    locations: Dict[str, Location] = Field(
        default_factory=dict, description="Map of location_id → location",
    )
    quests: List[QuestState] = Field(default_factory=list)

    def find_location(self, location_id: str) -> Optional[Location]:
        return self.locations.get(location_id)

    def completed_quest_ids(self) -> Set[str]:
        return {quest.id for quest in self.quests if quest.status == "completed"}


# ============================================================================
# Travel records
# ============================================================================


class TravelHistoryEntry(BaseModel):
    """Audit record of one completed travel action. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    timestamp: datetime
    relationship_id: str = Field(..., description="Edge that delivered the traveler to to_id")
    travel_time: int = Field(0, description="Total minutes spent")
    narrative: str = ""
    discoveries: List[str] = Field(
        default_factory=list, description="Relationship ids revealed on arrival",
    )
    route: List[str] = Field(
        default_factory=list, description="Every relationship id traversed, in order",
    )


class EnhancedLocationInfo(BaseModel):
    """Read model combining a location, its known edges and its visit stats."""

    location: Location
    known_exits: List[LocationRelationship] = Field(default_factory=list)
    visit_count: int = 0
    last_visited: Optional[datetime] = None
    contained_locations: List[str] = Field(default_factory=list)
    visible_locations: List[str] = Field(default_factory=list)
    connected_locations: List[str] = Field(default_factory=list)
    description: str = ""
    travel_history: List[TravelHistoryEntry] = Field(default_factory=list)


class TravelOutcome(BaseModel):
    """Result of ``LocationSystem.handle_travel``."""

    success: bool
    narrative: str
    entry: Optional[TravelHistoryEntry] = Field(
        None, description="History entry appended for this travel, if any",
    )
