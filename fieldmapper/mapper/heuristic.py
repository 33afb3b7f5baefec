"""Heuristic mapping engine for auto-detecting DTO -> DAO field mappings."""
import logging
from typing import Callable, Collection, List, Optional, Sequence, Tuple

from config import MapperConfig
from fieldmapper.mapper.errors import DuplicateAssociation
from fieldmapper.mapper.mapping import Association
from fieldmapper.mapper.store import MappingStore
from fieldmapper.schema.models import Field, FieldCatalog, FieldId
from fieldmapper.validator.direction_validator import DirectionValidator

logger = logging.getLogger(__name__)


def _strip_prefix(name: str, prefixes: Sequence[str]) -> str:
    lower = name.lower()
    for prefix in prefixes:
        if prefix and lower.startswith(prefix.lower()):
            return name[len(prefix):]
    return name


def _strip_suffix(name: str, suffix: str) -> str:
    if suffix and name.lower().endswith(suffix.lower()):
        return name[: -len(suffix)]
    return name


class NamingMatcher:
    """
    Proposes at most one DAO field for a DTO field.

    Strategies run in order and the first hit wins; there is no scoring.
    The substring strategy is loose and depends on catalog order: when several
    targets qualify, the first one encountered is returned.
    """

    def __init__(self, config: Optional[MapperConfig] = None):
        """Initialize matcher."""
        self.config = config or MapperConfig()
        self.strategies: List[Tuple[str, Callable[[Field, List[Field]], Optional[Field]]]] = [
            ("exact", self._exact),
            ("directional_prefix", self._without_directional_prefix),
            ("substring", self._substring),
            ("role_prefix", self._without_role_affixes),
        ]

    def match(
        self,
        source_field: Field,
        target_fields: Sequence[Field],
        already_matched: Collection[FieldId] = (),
    ) -> Optional[Field]:
        """
        Find the best target for a source field.

        Args:
            source_field: DTO field
            target_fields: DAO fields in catalog order
            already_matched: Target identities claimed earlier in the same pass

        Returns:
            Matching DAO field, or None when no strategy hits
        """
        candidates = [t for t in target_fields if t.id not in already_matched]
        if not candidates:
            return None

        for strategy_name, strategy in self.strategies:
            target = strategy(source_field, candidates)
            if target is not None:
                logger.debug(f"{source_field.id} -> {target.id} ({strategy_name})")
                return target

        return None

    @staticmethod
    def _find_exact(name: str, candidates: List[Field]) -> Optional[Field]:
        lower = name.lower()
        if not lower:
            return None
        for target in candidates:
            if target.name.lower() == lower:
                return target
        return None

    def _exact(self, source: Field, candidates: List[Field]) -> Optional[Field]:
        return self._find_exact(source.name, candidates)

    def _without_directional_prefix(self, source: Field, candidates: List[Field]) -> Optional[Field]:
        stripped = _strip_prefix(source.name, self.config.directional_prefixes)
        if stripped == source.name:
            return None
        return self._find_exact(stripped, candidates)

    @staticmethod
    def _substring(source: Field, candidates: List[Field]) -> Optional[Field]:
        source_lower = source.name.lower()
        if not source_lower:
            return None
        for target in candidates:
            target_lower = target.name.lower()
            if target_lower and (source_lower in target_lower or target_lower in source_lower):
                return target
        return None

    def clean_source_name(self, name: str) -> str:
        """Drop directional/role prefixes and the field suffix from a DTO name."""
        name = _strip_prefix(name, self.config.directional_prefixes)
        name = _strip_prefix(name, self.config.source_role_prefixes)
        return _strip_suffix(name, self.config.field_suffix).lower()

    def clean_target_name(self, name: str) -> str:
        """Drop role prefix and the field suffix from a DAO name."""
        name = _strip_prefix(name, self.config.target_role_prefixes)
        return _strip_suffix(name, self.config.field_suffix).lower()

    def _without_role_affixes(self, source: Field, candidates: List[Field]) -> Optional[Field]:
        cleaned = self.clean_source_name(source.name)
        if not cleaned:
            return None
        for target in candidates:
            if self.clean_target_name(target.name) == cleaned:
                return target
        return None


class HeuristicMapper:
    """Auto-map a DTO catalog onto a DAO catalog in a single pass."""

    def __init__(
        self,
        store: MappingStore,
        matcher: Optional[NamingMatcher] = None,
        validator: Optional[DirectionValidator] = None,
    ):
        """Initialize mapper with the store it populates."""
        self.store = store
        self.matcher = matcher or NamingMatcher()
        self.validator = validator or DirectionValidator(self.matcher.config)

    def auto_map(self, catalog: FieldCatalog) -> List[Association]:
        """
        Create one 1:1 association per matched DTO field.

        Each DAO field is claimed by at most one DTO field during the pass.
        Fields without a match are skipped.

        Returns:
            Associations created in this pass, in catalog order
        """
        created: List[Association] = []
        claimed_sources = set()
        claimed_targets = set()

        for source_field in catalog.iter_source():
            if source_field.id in claimed_sources:
                continue

            target = self.matcher.match(source_field, catalog.target, claimed_targets)
            if target is None:
                logger.debug(f"No match for {source_field.id}")
                continue

            warning = self.validator.validate(source_field.name, target.owner_class)
            warnings = [warning] if warning else []

            claimed_sources.add(source_field.id)
            claimed_targets.add(target.id)

            try:
                association = self.store.create_association(
                    [source_field.id], [target.id], warnings
                )
            except DuplicateAssociation:
                logger.debug(f"Skipping {source_field.id} -> {target.id}: already mapped")
                continue

            created.append(association)

        logger.info(
            f"Auto-mapped {len(created)} of {catalog.total_source_fields} DTO fields"
        )
        return created
