"""
Mapping engine.

- NamingMatcher: cascade of name heuristics proposing one DAO field per DTO field
- HeuristicMapper: single-pass auto-mapping into a MappingStore
- MappingStore: associations, forward/reverse indexes, bounded undo/redo
"""

from .errors import (
    DuplicateAssociation,
    EmptyMemberSet,
    MappingError,
    UnknownAssociation,
    UnknownField,
)
from .heuristic import HeuristicMapper, NamingMatcher
from .mapping import Association, Cardinality
from .store import History, MappingStore

__all__ = [
    "Association",
    "Cardinality",
    "DuplicateAssociation",
    "EmptyMemberSet",
    "HeuristicMapper",
    "History",
    "MappingError",
    "MappingStore",
    "NamingMatcher",
    "UnknownAssociation",
    "UnknownField",
]
