"""
Tavern Walkthrough - Locked Rooms and Discovery
================================================

WHAT THIS SHOWS:
- Authoring a small world with bidirectional connections
- A locked guest room that needs a key
- Multi-hop travel that is refused, then allowed once the key is picked up
- Arrival discovery (nearby edges revealed, secret ones kept hidden)
- Enhanced location descriptions built from visit history

RUN:
    python examples/tavern/run.py
"""

from waymark import (
    Character,
    Config,
    GameState,
    InMemoryVisitTracker,
    InventoryItem,
    ItemRequirement,
    Location,
    LocationSystem,
    LocationSystemOptions,
    RelationshipStore,
    RelationshipStoreOptions,
    RelationshipType,
    TravelDifficulty,
)
from waymark.logging_utils import log_info, log_success, log_warning


# ============================================================================
# STEP 1: Describe the places (owned by the game, not by Waymark)
# ============================================================================

def build_game_state() -> GameState:
    locations = [
        Location(id="town-square", name="Town Square", description="Market stalls crowd a cobbled square.", type="plaza"),
        Location(id="tavern", name="The Prancing Pony", description="A smoky common room full of travelers.", type="tavern"),
        Location(id="tavern-room", name="Guest Room", description="A narrow bed under a shuttered window.", type="room"),
        Location(id="balcony", name="Balcony", description="A rickety balcony over the square.", type="balcony"),
        Location(id="attic", name="Attic", description="Dusty rafters and forgotten crates.", type="attic"),
    ]
    return GameState(
        current_location_id="town-square",
        locations={location.id: location for location in locations},
    )


# ============================================================================
# STEP 2: Connect them
# ============================================================================

def build_world(system: LocationSystem) -> None:
    # Bidirectional by default: the way back is created for us
    system.create_connection(
        "town-square", "tavern", RelationshipType.CONNECTS,
        "A worn path leads to the tavern door",
        travel_time=5, difficulty=TravelDifficulty.EASY,
    )
    system.create_connection(
        "tavern", "tavern-room", RelationshipType.CONTAINS,
        "Up the creaky stairs",
        travel_time=2,
        requirements=[ItemRequirement(description="The door is locked; you need the room key", item_id="room-key")],
    )
    system.create_connection(
        "tavern-room", "balcony", RelationshipType.NEARBY,
        "Through the shutters", bidirectional=False,
    )
    system.create_connection(
        "tavern-room", "attic", RelationshipType.SECRET,
        "A hatch hides behind the wardrobe", bidirectional=False,
    )


# ============================================================================
# STEP 3: Play
# ============================================================================

def main() -> None:
    Config.validate()
    print(Config.display())
    print()

    store = RelationshipStore(RelationshipStoreOptions.from_config())
    tracker = InMemoryVisitTracker()
    system = LocationSystem(store, tracker, LocationSystemOptions.from_config())

    state = build_game_state()
    build_world(system)

    hero = Character(character_id="hero", name="Ayla", abilities={"strength": 12})

    log_info("Trying to reach the guest room without a key...")
    outcome = system.handle_travel("town-square", "tavern-room", hero, state)
    log_warning(outcome.narrative)

    log_info("The barkeep hands over a key.")
    hero.inventory.append(InventoryItem(id="room-key", name="Room Key"))

    outcome = system.handle_travel("town-square", "tavern-room", hero, state)
    if outcome.success:
        log_success(outcome.narrative)
        state.current_location_id = "tavern-room"

    print()
    print(system.generate_enhanced_description("tavern-room", state))
    print()

    info = system.get_enhanced_location_info("tavern-room", state)
    if info is not None:
        log_info(f"Known exits from the room: {[rel.to_id for rel in info.known_exits]}")
        log_info(f"Everything connected: {info.connected_locations}")

    for entry in system.get_travel_history():
        log_info(f"{entry.from_id} -> {entry.to_id} in {entry.travel_time} minutes via {entry.route}")


if __name__ == "__main__":
    main()
