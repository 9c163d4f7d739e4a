"""Traversal utilities over a relationship store."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, List, Optional, Set, Tuple

from .schemas import HierarchyNode, LocationRelationship, RelationshipType

if TYPE_CHECKING:
    from .store import RelationshipStore


def find_path(
    store: "RelationshipStore",
    start: str,
    goal: str,
    *,
    discovered_only: bool = False,
    max_hops: Optional[int] = None,
) -> Optional[List[LocationRelationship]]:
    """Return the edges of a fewest-hop route from start to goal using BFS.

    Returns ``[]`` when start and goal are the same location and ``None`` when goal
    is unreachable (or only reachable in more than ``max_hops`` edges). Equal-length
    routes are resolved by edge insertion order; travel time and difficulty are not
    considered.
    """

    if start == goal:
        return []
    if max_hops is not None and max_hops < 1:
        return None

    visited: Set[str] = {start}
    queue: deque[Tuple[str, List[LocationRelationship]]] = deque([(start, [])])

    while queue:
        node, path = queue.popleft()
        # Routes in the queue all have len(path) hops; extending past the bound is pointless
        if max_hops is not None and len(path) >= max_hops:
            continue
        for relationship in store.get_outgoing_relationships(node, discovered_only=discovered_only):
            neighbor = relationship.to_id
            if neighbor in visited:
                continue
            visited.add(neighbor)
            new_path = path + [relationship]
            if neighbor == goal:
                return new_path
            queue.append((neighbor, new_path))
    return None


def describe_path(path: List[LocationRelationship]) -> str:
    """Join edge descriptions into one sentence fragment.

    >>> describe_path([])
    "You're already there."
    """

    if not path:
        return "You're already there."
    if len(path) == 1:
        return path[0].description

    parts: List[str] = []
    for index, relationship in enumerate(path):
        if index > 0:
            parts.append(" and finally " if index == len(path) - 1 else ", then ")
        parts.append(relationship.description)
    return "The path leads you " + "".join(parts)


def format_travel_time(minutes: int) -> str:
    """Render minutes as "2 hours and 5 minutes", "1 hour", "45 minutes"."""

    hours, remainder = divmod(max(int(minutes), 0), 60)
    if hours > 0:
        text = f"{hours} hour{'s' if hours != 1 else ''}"
        if remainder > 0:
            text += f" and {remainder} minute{'s' if remainder != 1 else ''}"
        return text
    return f"{remainder} minute{'s' if remainder != 1 else ''}"


def build_location_hierarchy(
    store: "RelationshipStore",
    root_id: str,
    *,
    discovered_only: bool = False,
) -> List[HierarchyNode]:
    """Build the containment tree below ``root_id`` by following contains edges.

    Containment data is authored by hand and may contain cycles, so each location
    is expanded at most once per branch.
    """

    def children_of(location_id: str, ancestors: Set[str]) -> List[HierarchyNode]:
        nodes: List[HierarchyNode] = []
        for relationship in store.get_outgoing_relationships(location_id, discovered_only=discovered_only):
            if relationship.type != RelationshipType.CONTAINS:
                continue
            child_id = relationship.to_id
            if child_id in ancestors:
                continue
            nodes.append(
                HierarchyNode(
                    id=child_id,
                    relationship=relationship,
                    children=children_of(child_id, ancestors | {child_id}),
                )
            )
        return nodes

    return children_of(root_id, {root_id})
