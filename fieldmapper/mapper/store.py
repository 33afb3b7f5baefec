"""Mapping store: live associations, lookup indexes and undo/redo history."""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from fieldmapper.mapper.errors import (
    DuplicateAssociation,
    EmptyMemberSet,
    UnknownAssociation,
)
from fieldmapper.mapper.mapping import Association, new_association_id
from fieldmapper.schema.models import FieldId, Side

logger = logging.getLogger(__name__)

Index = Dict[FieldId, List[str]]


@dataclass(frozen=True)
class StoreSnapshot:
    """Full copy of the store state at one point in time."""

    associations: Tuple[Association, ...]
    forward_index: Dict[FieldId, Tuple[str, ...]]
    reverse_index: Dict[FieldId, Tuple[str, ...]]


class History:
    """
    Bounded list of snapshots plus a cursor.

    The cursor is -1 only while the history is empty. Pushing drops any redo
    states past the cursor; pushing past capacity evicts the oldest snapshot.
    """

    def __init__(self, capacity: int = 50):
        if capacity < 1:
            raise ValueError(f"History capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._snapshots: List[StoreSnapshot] = []
        self.cursor = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    def push(self, snapshot: StoreSnapshot) -> None:
        if self.cursor < len(self._snapshots) - 1:
            del self._snapshots[self.cursor + 1:]

        self._snapshots.append(snapshot)
        self.cursor += 1

        if len(self._snapshots) > self.capacity:
            self._snapshots.pop(0)
            self.cursor -= 1

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self._snapshots) - 1

    def back(self) -> Optional[StoreSnapshot]:
        if not self.can_undo:
            return None
        self.cursor -= 1
        return self._snapshots[self.cursor]

    def forward(self) -> Optional[StoreSnapshot]:
        if not self.can_redo:
            return None
        self.cursor += 1
        return self._snapshots[self.cursor]


class MappingStore:
    """
    Single source of truth for the associations of one editing session.

    Every successful mutation records the resulting state in the history, and
    the store starts with a snapshot of the empty state, so the snapshot under
    the cursor always equals the live state. Callers only ever receive
    Association copies (they are frozen), never the live indexes.
    """

    def __init__(self, history_limit: int = 50):
        self._associations: List[Association] = []
        self._forward: Index = {}
        self._reverse: Index = {}
        self.history = History(history_limit)
        self._record()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def associations(self) -> List[Association]:
        return list(self._associations)

    def __len__(self) -> int:
        return len(self._associations)

    def get(self, association_id: str) -> Optional[Association]:
        for association in self._associations:
            if association.id == association_id:
                return association
        return None

    def query(self, field_id: FieldId, side: Side) -> List[Association]:
        """Associations that reference a field on the given side."""
        index = self._forward if side == Side.SOURCE else self._reverse
        ids = index.get(field_id, [])
        by_id = {a.id: a for a in self._associations}
        return [by_id[i] for i in ids]

    def index_view(self, side: Side) -> Dict[FieldId, Tuple[str, ...]]:
        """Read-only copy of an index."""
        index = self._forward if side == Side.SOURCE else self._reverse
        return {k: tuple(v) for k, v in index.items()}

    def find(self, source_ids: Iterable[FieldId], target_ids: Iterable[FieldId]) -> Optional[Association]:
        """Existing association with exactly these member sets, if any."""
        source_ids = list(source_ids)
        target_ids = list(target_ids)
        for association in self._associations:
            if association.same_members(source_ids, target_ids):
                return association
        return None

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_association(
        self,
        source_ids: Sequence[FieldId],
        target_ids: Sequence[FieldId],
        warnings: Sequence[str] = (),
    ) -> Association:
        """
        Create an association between source and target fields.

        Args:
            source_ids: DTO field identities (at least one)
            target_ids: DAO field identities (at least one)
            warnings: Advisory messages attached to the association

        Returns:
            The new Association

        Raises:
            EmptyMemberSet: If either side is empty
            DuplicateAssociation: If a field repeats inside one side, or the
                exact member sets already form an existing association
        """
        source_ids = tuple(FieldId(*f) for f in source_ids)
        target_ids = tuple(FieldId(*f) for f in target_ids)

        if not source_ids:
            raise EmptyMemberSet("Association needs at least one source field")
        if not target_ids:
            raise EmptyMemberSet("Association needs at least one target field")

        for side, ids in ((Side.SOURCE, source_ids), (Side.TARGET, target_ids)):
            seen = set()
            for field_id in ids:
                if field_id in seen:
                    raise DuplicateAssociation(
                        f"Field {field_id} appears twice on the {side.value} side"
                    )
                seen.add(field_id)

        existing = self.find(source_ids, target_ids)
        if existing is not None:
            raise DuplicateAssociation(
                f"Association already exists: {self._describe(existing)}"
            )

        association = Association(
            id=new_association_id(),
            source_fields=source_ids,
            target_fields=target_ids,
            warnings=tuple(warnings),
        )
        self._associations.append(association)
        self._index(association)
        self._record()

        logger.debug(f"Created {association.cardinality.value} association {self._describe(association)}")
        return association

    def remove_field_from_association(self, association_id: str, side: Side, field_id: FieldId) -> Optional[Association]:
        """
        Remove one field from one side of an association.

        Emptying a side deletes the whole association. Removing a field that is
        not a member changes nothing but is still recorded in the history.

        Returns:
            The updated Association, or None if it was deleted
        """
        side = Side(side)
        field_id = FieldId(*field_id)
        position = self._position(association_id)
        association = self._associations[position]

        if field_id not in association.members(side):
            logger.debug(f"{field_id} is not on the {side.value} side of {association_id}")
            self._record()
            return association

        updated = association.without(side, field_id)
        self._unindex(association)

        if not updated.members(side):
            del self._associations[position]
            logger.debug(f"Deleted association {association_id}: {side.value} side emptied")
            result = None
        else:
            self._associations[position] = updated
            self._index(updated)
            result = updated

        self._record()
        return result

    def clear(self) -> None:
        """Remove every association."""
        self._associations = []
        self._forward = {}
        self._reverse = {}
        self._record()
        logger.info("Cleared all associations")

    def undo(self) -> bool:
        """Step back one snapshot. Returns False at the earliest snapshot."""
        snapshot = self.history.back()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False at the latest snapshot."""
        snapshot = self.history.forward()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _position(self, association_id: str) -> int:
        for i, association in enumerate(self._associations):
            if association.id == association_id:
                return i
        raise UnknownAssociation(f"Association not found: {association_id}")

    def _index(self, association: Association) -> None:
        for field_id in association.source_fields:
            self._forward.setdefault(field_id, []).append(association.id)
        for field_id in association.target_fields:
            self._reverse.setdefault(field_id, []).append(association.id)

    def _unindex(self, association: Association) -> None:
        for index, members in (
            (self._forward, association.source_fields),
            (self._reverse, association.target_fields),
        ):
            for field_id in members:
                ids = [i for i in index.get(field_id, []) if i != association.id]
                if ids:
                    index[field_id] = ids
                else:
                    index.pop(field_id, None)

    def _snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            associations=tuple(self._associations),
            forward_index={k: tuple(v) for k, v in self._forward.items()},
            reverse_index={k: tuple(v) for k, v in self._reverse.items()},
        )

    def _record(self) -> None:
        self.history.push(self._snapshot())

    def _restore(self, snapshot: StoreSnapshot) -> None:
        self._associations = list(snapshot.associations)
        self._forward = {k: list(v) for k, v in snapshot.forward_index.items()}
        self._reverse = {k: list(v) for k, v in snapshot.reverse_index.items()}

    @staticmethod
    def _describe(association: Association) -> str:
        sources = ", ".join(str(f) for f in association.source_fields)
        targets = ", ".join(str(f) for f in association.target_fields)
        return f"[{sources}] -> [{targets}]"
