"""Relationship type algebra used when synthesizing reciprocal edges.

Contains/within are mutual inverses; every other type is its own inverse. The
reciprocal text produced here is placeholder prose: callers that want richer
wording hand the structured edge to their narrator.
"""

from __future__ import annotations

from typing import Dict, Optional

from .schemas import RelationshipType


_INVERSE_TYPES: Dict[RelationshipType, RelationshipType] = {
    RelationshipType.CONTAINS: RelationshipType.WITHIN,
    RelationshipType.WITHIN: RelationshipType.CONTAINS,
}

# Applied in order; each phrase is replaced once, as authored prose rarely repeats it
_PHRASE_SUBSTITUTIONS = (
    ("leads to", "comes from"),
    ("connects to", "connects from"),
    ("visible from", "can see"),
)


def inverse_type(relationship_type: RelationshipType) -> RelationshipType:
    """Return the type the reciprocal edge should carry."""
    return _INVERSE_TYPES.get(relationship_type, relationship_type)


def reciprocal_description(description: str, relationship_type: RelationshipType) -> str:
    """Describe the reverse direction of an edge.

    Containment edges use fixed templates; everything else gets simple phrase
    substitution ("A path leads to the inn" -> "A path comes from the inn").
    """

    if relationship_type == RelationshipType.CONTAINS:
        return f"Located within the area described as: {description}"
    if relationship_type == RelationshipType.WITHIN:
        return f"Contains the area described as: {description}"

    result = description
    for phrase, replacement in _PHRASE_SUBSTITUTIONS:
        result = result.replace(phrase, replacement, 1)
    return result


def reciprocal_name(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    return f"Return to {name}"
