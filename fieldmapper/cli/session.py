"""Editing session: owns the store and dispatches front-end commands."""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from config import MapperConfig
from fieldmapper.exporter.json_exporter import JsonExporter
from fieldmapper.mapper.errors import UnknownField
from fieldmapper.mapper.heuristic import HeuristicMapper, NamingMatcher
from fieldmapper.mapper.mapping import Association
from fieldmapper.mapper.store import MappingStore
from fieldmapper.schema.models import FieldCatalog, FieldId, Side
from fieldmapper.validator.direction_validator import DirectionValidator

logger = logging.getLogger(__name__)


class Command(str, Enum):
    """Discrete messages a front end may send to the session."""

    CREATE = "create"
    REMOVE_FIELD = "remove_field"
    CLEAR = "clear"
    UNDO = "undo"
    REDO = "redo"
    AUTO_MAP = "auto_map"
    EXPORT_SUMMARY = "export_summary"
    EXPORT_DOCUMENT = "export_document"


@dataclass
class SessionContext:
    """Per-session values the exported document needs."""

    trx_name: str = ""
    backend_type: str = ""
    document_id: str = ""


@dataclass
class SessionView:
    """Read-only state handed to the front end after every command."""

    associations: List[Association] = field(default_factory=list)
    can_undo: bool = False
    can_redo: bool = False


class MappingSession:
    """
    One interactive mapping session.

    The store is the only mutable state; front ends send a Command plus its
    payload and render from the returned SessionView.
    """

    def __init__(
        self,
        catalog: FieldCatalog,
        context: Optional[SessionContext] = None,
        config: Optional[MapperConfig] = None,
    ):
        """Initialize session for a catalog."""
        self.catalog = catalog
        self.context = context or SessionContext()
        self.config = config or MapperConfig()
        self.store = MappingStore(self.config.history_limit)
        self.matcher = NamingMatcher(self.config)
        self.validator = DirectionValidator(self.config)
        self.mapper = HeuristicMapper(self.store, self.matcher, self.validator)
        self.exporter = JsonExporter(self.config)

        self._handlers: Dict[Command, Callable[..., Any]] = {
            Command.CREATE: self.create,
            Command.REMOVE_FIELD: self.remove_field,
            Command.CLEAR: self.store.clear,
            Command.UNDO: self.store.undo,
            Command.REDO: self.store.redo,
            Command.AUTO_MAP: self.auto_map,
            Command.EXPORT_SUMMARY: self.export_summary,
            Command.EXPORT_DOCUMENT: self.export_document,
        }

    def handle(self, command: Command, **payload) -> Any:
        """
        Dispatch a command.

        Raises:
            ValueError: If the command is unknown
            MappingError: If the store rejects the operation
        """
        command = Command(command)
        logger.debug(f"Handling {command.value} {payload}")
        return self._handlers[command](**payload)

    def view(self) -> SessionView:
        return SessionView(
            associations=self.store.associations,
            can_undo=self.store.can_undo,
            can_redo=self.store.can_redo,
        )

    def create(self, source_ids: Sequence[FieldId], target_ids: Sequence[FieldId]) -> Association:
        """Create an association, attaching any directional warnings."""
        source_ids = [self._require(f, Side.SOURCE) for f in source_ids]
        target_ids = [self._require(f, Side.TARGET) for f in target_ids]

        warnings: List[str] = []
        for source_id in source_ids:
            for target_id in target_ids:
                warning = self.validator.validate(source_id.name, target_id.owner_class)
                if warning and warning not in warnings:
                    warnings.append(warning)

        return self.store.create_association(source_ids, target_ids, warnings)

    def remove_field(self, association_id: str, side: Side, field_id: FieldId) -> Optional[Association]:
        return self.store.remove_field_from_association(association_id, Side(side), FieldId(*field_id))

    def auto_map(self) -> List[Association]:
        return self.mapper.auto_map(self.catalog)

    def export_summary(self) -> Dict[str, Any]:
        return self.exporter.build_summary(self.catalog, self.store.associations)

    def export_document(self) -> Dict[str, Any]:
        return self.exporter.build_document(
            self.store.associations,
            document_id=self.context.document_id or self.context.trx_name,
            backend_type=self.context.backend_type,
            trx_name=self.context.trx_name,
        )

    def _require(self, field_id: FieldId, side: Side) -> FieldId:
        field_id = FieldId(*field_id)
        if not self.catalog.contains(field_id, side):
            raise UnknownField(f"Unknown {side.value} field: {field_id}")
        return field_id
