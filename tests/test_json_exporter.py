"""
Unit tests for JsonExporter

Tests:
- Summary view: mapped status, counterpart lists, classification
- Transformed document: direction routing, format tag, cross product
- File export
"""

import json

import pytest

from fieldmapper.exporter.json_exporter import JsonExporter
from fieldmapper.mapper.store import MappingStore
from fieldmapper.schema.models import Field, FieldCatalog, FieldId


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def catalog():
    return FieldCatalog(
        source={
            "UserDTO": [
                Field("BDtoInUserId", "String", "UserDTO"),
                Field("BDtoInName", "String", "UserDTO"),
                Field("BDtoOutBalance", "BigDecimal", "UserDTO"),
            ],
            "AuditDTO": [
                Field("channel", "String", "AuditDTO"),
            ],
        },
        target=[
            Field("userId", "String", "CUSTCE01"),
            Field("firstName", "String", "CUSTCE01"),
            Field("lastName", "String", "CUSTCE01"),
            Field("balance", "BigDecimal", "CUSTCS01"),
            Field("unused", "String", "CUSTCS01"),
        ],
    )


@pytest.fixture
def exporter():
    return JsonExporter()


def ids(catalog):
    source = {f.name: f.id for f in catalog.iter_source()}
    target = {f.name: f.id for f in catalog.target}
    return source, target


# ============================================================================
# SUMMARY
# ============================================================================


class TestSummary:
    """Test the summary view."""

    def test_unmapped_catalog(self, exporter, catalog):
        summary = exporter.build_summary(catalog, [])

        assert summary["metadata"]["total_dto_fields"] == 4
        assert summary["metadata"]["total_dao_fields"] == 5
        assert summary["metadata"]["mapped_dto_fields"] == 0
        assert summary["metadata"]["total_connections"] == 0
        assert all(not f["mapped"] for f in summary["dto_fields"])
        assert all(not f["mapped"] for f in summary["dao_fields"])

    def test_dto_fields_keep_catalog_order(self, exporter, catalog):
        summary = exporter.build_summary(catalog, [])

        assert [(f["class_name"], f["field_name"]) for f in summary["dto_fields"]] == [
            ("UserDTO", "BDtoInUserId"),
            ("UserDTO", "BDtoInName"),
            ("UserDTO", "BDtoOutBalance"),
            ("AuditDTO", "channel"),
        ]

    def test_classification(self, exporter, catalog):
        source, target = ids(catalog)
        store = MappingStore()
        store.create_association([source["BDtoInUserId"]], [target["userId"]])
        store.create_association([source["BDtoInName"]], [target["firstName"], target["lastName"]])
        store.create_association([source["BDtoOutBalance"], source["channel"]], [target["balance"]])

        summary = exporter.build_summary(catalog, store.associations)

        assert len(summary["mapping_summary"]["one_to_one"]) == 1
        assert len(summary["mapping_summary"]["one_to_many"]) == 1
        assert len(summary["mapping_summary"]["many_to_one"]) == 1
        assert summary["metadata"]["total_connections"] == 5
        assert summary["metadata"]["mapped_dto_fields"] == 4
        assert summary["metadata"]["mapped_dao_fields"] == 4

        dto_fields = {f["field_name"]: f for f in summary["dto_fields"]}
        assert dto_fields["BDtoInUserId"]["mapped_to"] == [
            {"owner_class": "CUSTCE01", "field_name": "userId", "mapping_type": "one-to-one"}
        ]
        assert [m["mapping_type"] for m in dto_fields["BDtoInName"]["mapped_to"]] == [
            "one-to-many",
            "one-to-many",
        ]

        dao_fields = {f["field_name"]: f for f in summary["dao_fields"]}
        assert not dao_fields["unused"]["mapped"]
        assert [m["mapping_type"] for m in dao_fields["balance"]["mapped_from"]] == [
            "many-to-one",
            "many-to-one",
        ]
        assert dao_fields["balance"]["source_class"] == "CUSTCS01"

    def test_warnings_counted(self, exporter, catalog):
        source, target = ids(catalog)
        store = MappingStore()
        store.create_association([source["BDtoInUserId"]], [target["balance"]], ["mismatch"])

        summary = exporter.build_summary(catalog, store.associations)

        assert summary["metadata"]["warnings"] == 1
        assert summary["mapping_summary"]["one_to_one"][0]["warnings"] == ["mismatch"]


# ============================================================================
# TRANSFORMED DOCUMENT
# ============================================================================


class TestDocument:
    """Test the code-generator document."""

    def test_input_field(self, exporter, catalog):
        source, target = ids(catalog)
        store = MappingStore()
        store.create_association([source["BDtoInUserId"]], [target["userId"]])

        document = exporter.build_document(store.associations, "CUST", "host", "CUST")

        assert document["id"] == "CUST"
        mapping = document["mappings"][0]
        assert mapping["backend_type"] == "host"
        assert mapping["trx_name"] == "CUST"
        assert mapping["fields"]["input_fields"] == [
            {"format": "CUSTCE01", "field_type": "body", "source": "BDtoInUserId", "target": "userId"}
        ]
        assert mapping["fields"]["output_fields"] == []

    def test_output_field_swapped(self, exporter, catalog):
        source, target = ids(catalog)
        store = MappingStore()
        store.create_association([source["BDtoOutBalance"]], [target["balance"]])

        document = exporter.build_document(store.associations, "CUST", "host", "CUST")

        assert document["mappings"][0]["fields"]["output_fields"] == [
            {"format": "CUSTCS01", "field_type": "body", "source": "balance", "target": "BDtoOutBalance"}
        ]

    def test_unprefixed_defaults_to_input(self, exporter, catalog):
        source, target = ids(catalog)
        store = MappingStore()
        store.create_association([source["channel"]], [target["unused"]])

        document = exporter.build_document(store.associations, "x", "", "")

        fields = document["mappings"][0]["fields"]
        assert fields["input_fields"][0]["source"] == "channel"
        assert fields["input_fields"][0]["format"] == "CUSTCS01"
        assert fields["output_fields"] == []

    def test_cross_product(self, exporter, catalog):
        source, target = ids(catalog)
        store = MappingStore()
        store.create_association(
            [source["BDtoInUserId"], source["BDtoInName"]],
            [target["firstName"], target["lastName"]],
        )

        document = exporter.build_document(store.associations, "x", "", "")

        pairs = [(e["source"], e["target"]) for e in document["mappings"][0]["fields"]["input_fields"]]
        assert pairs == [
            ("BDtoInUserId", "firstName"),
            ("BDtoInUserId", "lastName"),
            ("BDtoInName", "firstName"),
            ("BDtoInName", "lastName"),
        ]

    def test_pairs_recoverable(self, exporter, catalog):
        source, target = ids(catalog)
        store = MappingStore()
        store.create_association([source["BDtoInUserId"]], [target["userId"]])
        store.create_association([source["BDtoOutBalance"]], [target["balance"]])
        store.create_association([source["channel"]], [target["firstName"], target["lastName"]])

        document = exporter.build_document(store.associations, "x", "", "")
        fields = document["mappings"][0]["fields"]

        recovered = {(e["source"], e["target"]) for e in fields["input_fields"]}
        recovered |= {(e["target"], e["source"]) for e in fields["output_fields"]}
        expected = {
            (s.name, t.name) for a in store.associations for s, t in a.pairs()
        }
        assert recovered == expected


class TestExport:
    """Test file output."""

    def test_export_writes_json(self, exporter, tmp_path):
        output_file = tmp_path / "nested" / "doc.json"

        result = exporter.export(output_file, {"id": "CUST", "mappings": []})

        assert result == output_file
        assert json.loads(output_file.read_text(encoding="utf-8")) == {"id": "CUST", "mappings": []}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
