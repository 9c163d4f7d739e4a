"""Tests for BFS pathfinding, path descriptions, and containment hierarchies."""

from waymark.relationships import (
    RelationshipDraft,
    RelationshipStore,
    RelationshipType,
    describe_path,
    find_path,
    format_travel_time,
)


def add(store: RelationshipStore, from_id: str, to_id: str, description: str = "", **fields):
    fields.setdefault("type", RelationshipType.CONNECTS)
    return store.add_relationship(
        RelationshipDraft(from_id=from_id, to_id=to_id, description=description or f"to {to_id}", **fields)
    )


def test_path_to_self_is_empty():
    store = RelationshipStore()
    assert store.find_path("town-square", "town-square") == []


def test_direct_path():
    store = RelationshipStore()
    add(store, "town-square", "tavern")

    path = store.find_path("town-square", "tavern")

    assert path is not None
    assert [(rel.from_id, rel.to_id) for rel in path] == [("town-square", "tavern")]


def test_multi_step_path():
    store = RelationshipStore()
    add(store, "town-square", "tavern")
    add(store, "tavern", "forest-path")
    add(store, "forest-path", "mountain-pass")

    path = store.find_path("town-square", "mountain-pass")

    assert [(rel.from_id, rel.to_id) for rel in path] == [
        ("town-square", "tavern"),
        ("tavern", "forest-path"),
        ("forest-path", "mountain-pass"),
    ]


def test_unreachable_returns_none():
    store = RelationshipStore()
    add(store, "town-square", "tavern")
    add(store, "cave", "grotto")

    assert store.find_path("town-square", "grotto") is None
    assert store.find_path("nowhere", "tavern") is None


def test_path_follows_edge_direction():
    store = RelationshipStore()
    add(store, "cliff-top", "beach")

    assert store.find_path("beach", "cliff-top") is None


def test_shortcut_wins_over_longer_chain():
    store = RelationshipStore()
    add(store, "a", "b")
    add(store, "b", "c")
    add(store, "c", "d")
    assert len(store.find_path("a", "d")) == 3

    shortcut = add(store, "a", "d")

    path = store.find_path("a", "d")
    assert [rel.id for rel in path] == [shortcut.id]


def test_ties_broken_by_insertion_order():
    store = RelationshipStore()
    # Two equal-length routes; the one whose first edge was added first wins even
    # though the other is much faster.
    add(store, "a", "slow", travel_time=120)
    add(store, "a", "fast", travel_time=1)
    add(store, "fast", "goal", travel_time=1)
    add(store, "slow", "goal", travel_time=120)

    path = store.find_path("a", "goal")

    assert [rel.to_id for rel in path] == ["slow", "goal"]


def test_discovered_only_ignores_hidden_edges():
    store = RelationshipStore()
    add(store, "a", "b", discovered=True)
    hidden = add(store, "b", "c")

    assert store.find_path("a", "c", discovered_only=True) is None
    assert store.find_path("a", "c") is not None

    store.discover_relationship(hidden.id)
    assert store.find_path("a", "c", discovered_only=True) is not None


def test_max_hops_bounds_search():
    store = RelationshipStore()
    add(store, "a", "b")
    add(store, "b", "c")
    add(store, "c", "d")

    assert find_path(store, "a", "d", max_hops=2) is None
    assert len(find_path(store, "a", "d", max_hops=3)) == 3
    assert find_path(store, "a", "b", max_hops=0) is None


def test_cycles_do_not_loop_forever():
    store = RelationshipStore()
    add(store, "a", "b", bidirectional=True)
    add(store, "b", "c", bidirectional=True)
    add(store, "c", "a", bidirectional=True)

    assert store.find_path("a", "unknown") is None
    assert len(store.find_path("a", "c")) == 1


def test_path_descriptions():
    store = RelationshipStore()
    add(store, "town-square", "tavern", "through the main street")
    add(store, "tavern", "kitchen", "through the back door")
    add(store, "kitchen", "cellar", "down a rickety ladder")

    assert store.generate_path_description("tavern", "tavern") == "You're already there."
    assert store.generate_path_description("town-square", "tavern") == "through the main street"
    assert store.generate_path_description("town-square", "kitchen") == (
        "The path leads you through the main street and finally through the back door"
    )
    assert store.generate_path_description("town-square", "cellar") == (
        "The path leads you through the main street, then through the back door"
        " and finally down a rickety ladder"
    )
    assert store.generate_path_description("cellar", "town-square") is None


def test_describe_path_of_nothing():
    assert describe_path([]) == "You're already there."


def test_format_travel_time():
    assert format_travel_time(0) == "0 minutes"
    assert format_travel_time(1) == "1 minute"
    assert format_travel_time(45) == "45 minutes"
    assert format_travel_time(60) == "1 hour"
    assert format_travel_time(61) == "1 hour and 1 minute"
    assert format_travel_time(125) == "2 hours and 5 minutes"


def test_location_hierarchy():
    store = RelationshipStore()
    add(store, "town", "tavern", type=RelationshipType.CONTAINS, bidirectional=True)
    add(store, "tavern", "tavern-room", type=RelationshipType.CONTAINS, bidirectional=True)
    add(store, "tavern", "cellar", type=RelationshipType.CONTAINS)
    add(store, "town", "square", type=RelationshipType.CONNECTS)

    hierarchy = store.build_location_hierarchy("town")

    assert [node.id for node in hierarchy] == ["tavern"]
    tavern = hierarchy[0]
    assert tavern.relationship.type is RelationshipType.CONTAINS
    assert [child.id for child in tavern.children] == ["tavern-room", "cellar"]
    assert all(child.children == [] for child in tavern.children)

    # Within edges point upward and never become children
    assert store.build_location_hierarchy("tavern-room") == []


def test_location_hierarchy_respects_discovery():
    store = RelationshipStore()
    add(store, "keep", "hall", type=RelationshipType.CONTAINS, discovered=True)
    add(store, "keep", "vault", type=RelationshipType.CONTAINS)

    hierarchy = store.build_location_hierarchy("keep", discovered_only=True)

    assert [node.id for node in hierarchy] == ["hall"]


def test_location_hierarchy_survives_containment_cycle():
    store = RelationshipStore()
    add(store, "a", "b", type=RelationshipType.CONTAINS)
    add(store, "b", "c", type=RelationshipType.CONTAINS)
    add(store, "c", "a", type=RelationshipType.CONTAINS)
    add(store, "c", "c", type=RelationshipType.CONTAINS)

    hierarchy = store.build_location_hierarchy("a")

    assert [node.id for node in hierarchy] == ["b"]
    assert [node.id for node in hierarchy[0].children] == ["c"]
    assert hierarchy[0].children[0].children == []
