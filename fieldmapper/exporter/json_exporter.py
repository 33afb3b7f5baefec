"""JSON exporter: mapping summary and code-generator document."""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from config import MapperConfig
from fieldmapper.mapper.mapping import Association, Cardinality
from fieldmapper.schema.models import FieldCatalog, FieldId

logger = logging.getLogger(__name__)

ONE_TO_ONE = "one-to-one"
ONE_TO_MANY = "one-to-many"
MANY_TO_ONE = "many-to-one"


class JsonExporter:
    """Export the current associations to JSON documents."""

    FIELD_TYPE = "body"

    def __init__(self, config: Optional[MapperConfig] = None):
        """Initialize exporter."""
        self.config = config or MapperConfig()

    # ------------------------------------------------------------------
    # Summary view
    # ------------------------------------------------------------------

    def build_summary(
        self,
        catalog: FieldCatalog,
        associations: Sequence[Association],
    ) -> Dict[str, Any]:
        """
        Per-field mapped status and mapping classification.

        Every catalog field is listed, mapped or not. Counterparts carry
        "one-to-one" when their association has one member on each side,
        otherwise "one-to-many" (DTO side) or "many-to-one" (DAO side).
        """
        mapped_to: Dict[FieldId, List[Dict[str, str]]] = {}
        mapped_from: Dict[FieldId, List[Dict[str, str]]] = {}
        mapping_summary: Dict[str, List[Dict[str, Any]]] = {
            "one_to_one": [],
            "one_to_many": [],
            "many_to_one": [],
        }

        for association in associations:
            is_one_to_one = association.cardinality == Cardinality.ONE_TO_ONE

            for source_id, target_id in association.pairs():
                mapped_to.setdefault(source_id, []).append({
                    "owner_class": target_id.owner_class,
                    "field_name": target_id.name,
                    "mapping_type": ONE_TO_ONE if is_one_to_one else ONE_TO_MANY,
                })
                mapped_from.setdefault(target_id, []).append({
                    "dto_class": source_id.owner_class,
                    "dto_field": source_id.name,
                    "mapping_type": ONE_TO_ONE if is_one_to_one else MANY_TO_ONE,
                })

            bucket = {
                Cardinality.ONE_TO_ONE: "one_to_one",
                Cardinality.ONE_TO_MANY: "one_to_many",
                Cardinality.MANY_TO_ONE: "many_to_one",
            }[association.cardinality]
            mapping_summary[bucket].append({
                "id": association.id,
                "dto_fields": [str(f) for f in association.source_fields],
                "dao_fields": [str(f) for f in association.target_fields],
                "warnings": list(association.warnings),
            })

        dto_fields = [
            {
                "class_name": f.owner_class,
                "field_name": f.name,
                "field_type": f.type,
                "mapped": f.id in mapped_to,
                "mapped_to": mapped_to.get(f.id, []),
            }
            for f in catalog.iter_source()
        ]
        dao_fields = [
            {
                "field_name": f.name,
                "field_type": f.type,
                "source_class": f.owner_class,
                "mapped": f.id in mapped_from,
                "mapped_from": mapped_from.get(f.id, []),
            }
            for f in catalog.target
        ]

        return {
            "metadata": {
                "generated_at": datetime.now().isoformat(),
                "total_dto_fields": len(dto_fields),
                "total_dao_fields": len(dao_fields),
                "mapped_dto_fields": sum(1 for f in dto_fields if f["mapped"]),
                "mapped_dao_fields": sum(1 for f in dao_fields if f["mapped"]),
                "total_connections": sum(len(a.pairs()) for a in associations),
                "warnings": sum(len(a.warnings) for a in associations),
            },
            "dto_fields": dto_fields,
            "dao_fields": dao_fields,
            "mapping_summary": mapping_summary,
        }

    # ------------------------------------------------------------------
    # Transformed document
    # ------------------------------------------------------------------

    def build_document(
        self,
        associations: Sequence[Association],
        document_id: str,
        backend_type: str,
        trx_name: str,
    ) -> Dict[str, Any]:
        """
        Build the document consumed by the code generator.

        One entry per (DTO field, DAO field) pair. Output-prefixed DTO fields
        go to output_fields with source and target swapped; everything else
        goes to input_fields. "format" is always the DAO owner class.
        """
        input_fields: List[Dict[str, str]] = []
        output_fields: List[Dict[str, str]] = []

        for association in associations:
            for source_id, target_id in association.pairs():
                if source_id.name.startswith(self.config.output_prefix):
                    output_fields.append({
                        "format": target_id.owner_class,
                        "field_type": self.FIELD_TYPE,
                        "source": target_id.name,
                        "target": source_id.name,
                    })
                else:
                    input_fields.append({
                        "format": target_id.owner_class,
                        "field_type": self.FIELD_TYPE,
                        "source": source_id.name,
                        "target": target_id.name,
                    })

        return {
            "id": document_id,
            "mappings": [
                {
                    "backend_type": backend_type,
                    "trx_name": trx_name,
                    "fields": {
                        "input_fields": input_fields,
                        "output_fields": output_fields,
                    },
                }
            ],
        }

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def export(self, output_file: Path, data: Dict[str, Any]) -> Path:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Exported mapping JSON to {output_file}")
        return output_file
