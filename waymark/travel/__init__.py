"""Travel preconditions and edge selection."""

from .requirements import check_requirements, lookup_state_path, requirement_met
from .ranking import difficulty_value, evaluate_direct_edges, rank_relationships

__all__ = [
    "check_requirements",
    "lookup_state_path",
    "requirement_met",
    "difficulty_value",
    "evaluate_direct_edges",
    "rank_relationships",
]
