"""Models for the two field universes (DTO source side, DAO target side)."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Iterator, NamedTuple


class Side(str, Enum):
    """Which side of a mapping a field belongs to."""

    SOURCE = "source"  # DTO
    TARGET = "target"  # DAO


class FieldId(NamedTuple):
    """Identity of a field: (owner_class, name)."""

    owner_class: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner_class}.{self.name}"


@dataclass(frozen=True)
class Field:
    """Represents a single field declared on a class."""

    name: str
    type: str  # String, Long, List<Foo>, etc
    owner_class: str

    @property
    def id(self) -> FieldId:
        return FieldId(self.owner_class, self.name)

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "type": self.type,
            "owner_class": self.owner_class,
        }


@dataclass(frozen=True)
class FieldCatalog:
    """
    Both field universes for one editing session.

    Attributes cannot be reassigned. Identity lookups are built once at
    construction, so the field lists must not be mutated in place.

    Source fields are grouped by declaring class, keeping declaration order.
    Target fields are a flat list where each field carries its owner class.
    """

    source: Dict[str, List[Field]] = field(default_factory=dict)
    target: List[Field] = field(default_factory=list)

    def __post_init__(self):
        """Build identity lookups."""
        source_by_id: Dict[FieldId, Field] = {f.id: f for fields in self.source.values() for f in fields}
        object.__setattr__(self, "_source_by_id", source_by_id)
        object.__setattr__(self, "_target_by_id", {f.id: f for f in self.target})

    @classmethod
    def from_fields(cls, source_fields: List[Field], target_fields: List[Field]) -> "FieldCatalog":
        """Group a flat list of source fields by owner class."""
        grouped: Dict[str, List[Field]] = {}
        for f in source_fields:
            grouped.setdefault(f.owner_class, []).append(f)
        return cls(source=grouped, target=list(target_fields))

    def iter_source(self) -> Iterator[Field]:
        """Source fields in class order, then declaration order."""
        for fields in self.source.values():
            yield from fields

    def get(self, field_id: FieldId, side: Side) -> Optional[Field]:
        """Return field by identity on the given side."""
        if side == Side.SOURCE:
            return self._source_by_id.get(field_id)
        return self._target_by_id.get(field_id)

    def contains(self, field_id: FieldId, side: Side) -> bool:
        return self.get(field_id, side) is not None

    @property
    def total_source_fields(self) -> int:
        return len(self._source_by_id)

    @property
    def total_target_fields(self) -> int:
        return len(self.target)

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary."""
        return {
            "source": {
                class_name: [f.to_dict() for f in fields]
                for class_name, fields in self.source.items()
            },
            "target": [f.to_dict() for f in self.target],
        }
