"""Association (mapping) model."""
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Tuple

from fieldmapper.schema.models import FieldId, Side


class Cardinality(str, Enum):
    """Shape of an association, derived from its member counts."""

    ONE_TO_ONE = "1:1"
    ONE_TO_MANY = "1:N"
    MANY_TO_ONE = "N:1"

    @classmethod
    def derive(cls, source_count: int, target_count: int) -> "Cardinality":
        """
        Classify an association.

        More than one source member is always N:1, whatever the target count.
        There is no N:M shape.
        """
        if source_count > 1:
            return cls.MANY_TO_ONE
        if target_count > 1:
            return cls.ONE_TO_MANY
        return cls.ONE_TO_ONE


def new_association_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Association:
    """Links one or more source fields to one or more target fields."""

    id: str
    source_fields: Tuple[FieldId, ...]
    target_fields: Tuple[FieldId, ...]
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def cardinality(self) -> Cardinality:
        return Cardinality.derive(len(self.source_fields), len(self.target_fields))

    def members(self, side: Side) -> Tuple[FieldId, ...]:
        return self.source_fields if side == Side.SOURCE else self.target_fields

    def same_members(self, source_fields, target_fields) -> bool:
        """True if both member sets are equal, ignoring order."""
        return set(self.source_fields) == set(source_fields) and set(
            self.target_fields
        ) == set(target_fields)

    def without(self, side: Side, field_id: FieldId) -> "Association":
        """Copy of this association with one member removed from a side."""
        remaining = tuple(f for f in self.members(side) if f != field_id)
        if side == Side.SOURCE:
            return replace(self, source_fields=remaining)
        return replace(self, target_fields=remaining)

    def pairs(self) -> List[Tuple[FieldId, FieldId]]:
        """Every (source, target) pair, full cross product."""
        return [(s, t) for s in self.source_fields for t in self.target_fields]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "source_fields": [list(f) for f in self.source_fields],
            "target_fields": [list(f) for f in self.target_fields],
            "cardinality": self.cardinality.value,
            "warnings": list(self.warnings),
        }
