"""
Relationship store: the in-memory graph of location relationships.

The store owns two structures that must always agree:

- ``_relationships``: relationship id -> frozen ``LocationRelationship``
- ``_index``: location id -> ids of every edge touching that location

Every public mutation updates both inside a single call, so there are no ghost
entries as long as callers go through this API. The store is single-writer: a
turn-based game loop calls it synchronously and nothing here blocks or does I/O.

Usage:
    store = RelationshipStore()
    store.add_relationship(
        RelationshipDraft(
            from_id="tavern",
            to_id="room",
            type=RelationshipType.CONTAINS,
            bidirectional=True,
            description="A narrow stair climbs to the guest room",
        )
    )
    store.find_path("square", "room")
"""

from __future__ import annotations

from itertools import count
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Union

from waymark.logging_utils import log_change
from waymark.travel.ranking import evaluate_direct_edges

from .algebra import inverse_type, reciprocal_description, reciprocal_name
from .helpers import build_location_hierarchy, describe_path, find_path
from .schemas import (
    HierarchyNode,
    LocationRelationship,
    RelationshipDraft,
    RelationshipPatch,
    RelationshipStoreOptions,
    RelationshipType,
    TravelPossibilityResult,
)

if TYPE_CHECKING:
    from waymark.schemas import Character, GameState


# Patch fields where None means "remove the value"
_CLEARABLE_FIELDS = frozenset({"name", "travel_time", "difficulty"})


class RelationshipStore:
    """Holds relationship records and the location -> relationship index.

    Construct one per world and pass it to whoever needs it; there is no shared
    default instance.
    """

    def __init__(self, options: Optional[RelationshipStoreOptions] = None):
        self.options = options or RelationshipStoreOptions()
        self._relationships: Dict[str, LocationRelationship] = {}
        # Dict keys double as an insertion-ordered set, which keeps BFS tie-breaking
        # deterministic (earlier edges win).
        self._index: Dict[str, Dict[str, None]] = {}
        self._counter = count(1)

    # ------------------------------------------------------------------
    # Index maintenance
    # ------------------------------------------------------------------

    def _next_id(self, from_id: str, to_id: str) -> str:
        while True:
            candidate = f"rel_{from_id}_{to_id}_{next(self._counter)}"
            if candidate not in self._relationships:
                return candidate

    def _insert(self, relationship: LocationRelationship) -> None:
        self._relationships[relationship.id] = relationship
        self._index.setdefault(relationship.from_id, {})[relationship.id] = None
        self._index.setdefault(relationship.to_id, {})[relationship.id] = None

    def _unindex(self, location_id: str, relationship_id: str) -> None:
        bucket = self._index.get(location_id)
        if bucket is None:
            return
        bucket.pop(relationship_id, None)
        # Drop empty buckets so unknown and emptied locations look the same
        if not bucket:
            del self._index[location_id]

    def _replace(self, relationship: LocationRelationship, **changes: Any) -> LocationRelationship:
        updated = relationship.model_copy(update=changes)
        self._relationships[relationship.id] = updated
        return updated

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def add_relationship(
        self, draft: Union[RelationshipDraft, Mapping[str, Any]]
    ) -> LocationRelationship:
        """Add a relationship and, for bidirectional ones, its reciprocal.

        The reciprocal is only synthesized when consistency enforcement is on and
        no edge ``to_id -> from_id`` of the inverse type exists yet. An existing
        match is linked to the new edge instead of duplicated.

        Returns:
            The stored relationship (with its assigned id).
        """

        if not isinstance(draft, RelationshipDraft):
            draft = RelationshipDraft.model_validate(draft)

        if not self.options.track_discovery:
            discovered = True
        else:
            discovered = bool(draft.discovered)

        relationship = LocationRelationship(
            id=self._next_id(draft.from_id, draft.to_id),
            from_id=draft.from_id,
            to_id=draft.to_id,
            type=draft.type,
            bidirectional=draft.bidirectional,
            description=draft.description,
            travel_time=draft.travel_time,
            difficulty=draft.difficulty,
            requirements=list(draft.requirements),
            discovered=discovered,
            name=draft.name,
            tags=list(draft.tags),
            metadata=dict(draft.metadata),
        )
        self._insert(relationship)

        if self.options.log_changes:
            log_change(
                f"Added relationship: {relationship.from_id} {relationship.type.value} {relationship.to_id}"
            )

        if self.options.enforce_consistency and relationship.bidirectional:
            relationship = self._ensure_reciprocal(relationship)

        return relationship

    def _ensure_reciprocal(self, relationship: LocationRelationship) -> LocationRelationship:
        """Create or link the reverse edge; returns the (possibly relinked) original."""

        expected_type = inverse_type(relationship.type)
        existing = self._find_reverse(relationship.to_id, relationship.from_id, expected_type)

        if existing is not None:
            if existing.id == relationship.id:
                # Self-loop of a self-inverse type is its own reciprocal
                return relationship
            if existing.reciprocal_id is None or existing.reciprocal_id not in self._relationships:
                self._replace(existing, reciprocal_id=relationship.id)
                return self._replace(relationship, reciprocal_id=existing.id)
            return relationship

        reciprocal = LocationRelationship(
            id=self._next_id(relationship.to_id, relationship.from_id),
            from_id=relationship.to_id,
            to_id=relationship.from_id,
            type=expected_type,
            bidirectional=relationship.bidirectional,
            description=reciprocal_description(relationship.description, relationship.type),
            travel_time=relationship.travel_time,
            difficulty=relationship.difficulty,
            requirements=list(relationship.requirements),
            discovered=relationship.discovered,
            name=reciprocal_name(relationship.name),
            tags=list(relationship.tags),
            reciprocal_id=relationship.id,
        )
        self._insert(reciprocal)

        if self.options.log_changes:
            log_change(
                f"Added reciprocal relationship: {reciprocal.from_id} {reciprocal.type.value} {reciprocal.to_id}"
            )

        return self._replace(relationship, reciprocal_id=reciprocal.id)

    def _find_reverse(
        self, from_id: str, to_id: str, relationship_type: RelationshipType
    ) -> Optional[LocationRelationship]:
        for candidate in self.get_outgoing_relationships(from_id):
            if candidate.to_id == to_id and candidate.type == relationship_type:
                return candidate
        return None

    def update_relationship(
        self, relationship_id: str, patch: Union[RelationshipPatch, Mapping[str, Any]]
    ) -> Optional[LocationRelationship]:
        """Merge ``patch`` into a relationship. Returns None if the id is unknown."""

        relationship = self._relationships.get(relationship_id)
        if relationship is None:
            return None

        if not isinstance(patch, RelationshipPatch):
            patch = RelationshipPatch.model_validate(patch)
        # Only fields the caller actually set. None clears optional fields and is
        # ignored for fields that always carry a value.
        changes = {
            name: getattr(patch, name)
            for name in patch.model_fields_set
            if getattr(patch, name) is not None or name in _CLEARABLE_FIELDS
        }
        updated = LocationRelationship.model_validate({**relationship.model_dump(), **changes})
        self._relationships[relationship_id] = updated

        if self.options.log_changes:
            log_change(f"Updated relationship: {relationship_id}")

        return updated

    def remove_relationship(self, relationship_id: str) -> bool:
        """Remove one edge. Its reciprocal stays; removing it is the caller's call."""

        relationship = self._relationships.pop(relationship_id, None)
        if relationship is None:
            return False

        self._unindex(relationship.from_id, relationship_id)
        self._unindex(relationship.to_id, relationship_id)

        partner = self._relationships.get(relationship.reciprocal_id or "")
        if partner is not None and partner.reciprocal_id == relationship_id:
            self._replace(partner, reciprocal_id=None)

        if self.options.log_changes:
            log_change(f"Removed relationship: {relationship_id}")

        return True

    def clear_all_relationships(self) -> None:
        self._relationships.clear()
        self._index.clear()

        if self.options.log_changes:
            log_change("Cleared all location relationships")

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover_relationship(self, relationship_id: str) -> bool:
        """Mark an edge discovered; bidirectional edges reveal their reciprocal too.

        Returns False if the id is unknown.
        """

        relationship = self._relationships.get(relationship_id)
        if relationship is None:
            return False

        if not relationship.discovered:
            relationship = self._replace(relationship, discovered=True)

        if relationship.bidirectional:
            partner = self._reciprocal_of(relationship)
            if partner is not None and not partner.discovered:
                self._replace(partner, discovered=True)

        if self.options.log_changes:
            log_change(f"Discovered relationship: {relationship_id}")

        return True

    def _reciprocal_of(self, relationship: LocationRelationship) -> Optional[LocationRelationship]:
        if relationship.reciprocal_id is not None:
            linked = self._relationships.get(relationship.reciprocal_id)
            if linked is not None:
                return linked
        # Unlinked pairs (e.g. restored from records): scan the opposite endpoint
        candidate = self._find_reverse(
            relationship.to_id, relationship.from_id, inverse_type(relationship.type)
        )
        if candidate is not None and candidate.id != relationship.id:
            return candidate
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_relationship(self, relationship_id: str) -> Optional[LocationRelationship]:
        return self._relationships.get(relationship_id)

    def get_relationships(self, location_id: str, discovered_only: bool = False) -> List[LocationRelationship]:
        """Every edge touching ``location_id``, in insertion order."""

        result: List[LocationRelationship] = []
        for relationship_id in self._index.get(location_id, {}):
            relationship = self._relationships.get(relationship_id)
            if relationship is None:
                continue
            if discovered_only and not relationship.discovered:
                continue
            result.append(relationship)
        return result

    def get_outgoing_relationships(
        self, location_id: str, discovered_only: bool = False
    ) -> List[LocationRelationship]:
        return [
            rel for rel in self.get_relationships(location_id, discovered_only)
            if rel.from_id == location_id
        ]

    def get_incoming_relationships(
        self, location_id: str, discovered_only: bool = False
    ) -> List[LocationRelationship]:
        return [
            rel for rel in self.get_relationships(location_id, discovered_only)
            if rel.to_id == location_id
        ]

    def get_relationships_by_type(
        self,
        location_id: str,
        relationship_type: RelationshipType,
        discovered_only: bool = False,
    ) -> List[LocationRelationship]:
        return [
            rel for rel in self.get_relationships(location_id, discovered_only)
            if rel.type == relationship_type
        ]

    def get_direct_relationships(
        self, from_id: str, to_id: str, discovered_only: bool = False
    ) -> List[LocationRelationship]:
        """All parallel edges from ``from_id`` straight to ``to_id``."""
        return [
            rel for rel in self.get_outgoing_relationships(from_id, discovered_only)
            if rel.to_id == to_id
        ]

    def has_relationship(self, from_id: str, to_id: str, discovered_only: bool = False) -> bool:
        return bool(self.get_direct_relationships(from_id, to_id, discovered_only))

    def get_connected_locations(self, location_id: str, discovered_only: bool = False) -> List[str]:
        """Ids one outgoing hop away (duplicates kept when edges are parallel)."""
        return [rel.to_id for rel in self.get_outgoing_relationships(location_id, discovered_only)]

    def get_all_relationships(self) -> List[LocationRelationship]:
        return list(self._relationships.values())

    def __len__(self) -> int:
        return len(self._relationships)

    def __contains__(self, relationship_id: object) -> bool:
        return relationship_id in self._relationships

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def find_path(
        self,
        from_id: str,
        to_id: str,
        discovered_only: bool = False,
        *,
        max_hops: Optional[int] = None,
    ) -> Optional[List[LocationRelationship]]:
        """Fewest-hop edge sequence from ``from_id`` to ``to_id`` (see ``helpers.find_path``)."""
        return find_path(self, from_id, to_id, discovered_only=discovered_only, max_hops=max_hops)

    def generate_path_description(
        self, from_id: str, to_id: str, discovered_only: bool = False
    ) -> Optional[str]:
        path = self.find_path(from_id, to_id, discovered_only)
        if path is None:
            return None
        return describe_path(path)

    def build_location_hierarchy(self, root_id: str, discovered_only: bool = False) -> List[HierarchyNode]:
        return build_location_hierarchy(self, root_id, discovered_only=discovered_only)

    def check_travel_possibility(
        self,
        from_id: str,
        to_id: str,
        character: "Character",
        game_state: "GameState",
    ) -> TravelPossibilityResult:
        """Check the direct edges from ``from_id`` to ``to_id``, discovered or not.

        Parallel edges are ranked by difficulty tier, then travel time. Unmet
        requirements come back in ``blocked_by``; they are a normal result, not an
        error.
        """
        return evaluate_direct_edges(
            from_id,
            to_id,
            self.get_direct_relationships(from_id, to_id),
            character,
            game_state,
            evaluate_all=self.options.evaluate_all_parallel_edges,
        )

    # ------------------------------------------------------------------
    # Plain-record snapshots
    # ------------------------------------------------------------------

    def export_records(self) -> List[Dict[str, Any]]:
        """Relationships as JSON-compatible dicts, for whatever persistence the caller uses."""
        return [rel.model_dump(mode="json") for rel in self._relationships.values()]

    @classmethod
    def from_records(
        cls,
        records: Iterable[Union[LocationRelationship, Mapping[str, Any]]],
        options: Optional[RelationshipStoreOptions] = None,
    ) -> "RelationshipStore":
        """Rebuild a store from exported records.

        Records are restored exactly as given: no reciprocals are synthesized, since
        a consistent export already contains them.
        """

        store = cls(options)
        for record in records:
            relationship = (
                record if isinstance(record, LocationRelationship)
                else LocationRelationship.model_validate(record)
            )
            store._insert(relationship)
        return store
