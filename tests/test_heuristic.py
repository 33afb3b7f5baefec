"""Tests for NamingMatcher and HeuristicMapper."""
import pytest

from config import MapperConfig
from fieldmapper.mapper.heuristic import HeuristicMapper, NamingMatcher
from fieldmapper.mapper.mapping import Cardinality
from fieldmapper.mapper.store import MappingStore
from fieldmapper.schema.models import Field, FieldCatalog, FieldId


def dto(name, owner="UserDTO"):
    return Field(name=name, type="String", owner_class=owner)


def dao(name, owner="CUSTCE01"):
    return Field(name=name, type="String", owner_class=owner)


@pytest.fixture
def matcher():
    return NamingMatcher()


class TestNamingMatcher:
    """Test the matching cascade."""

    def test_exact_case_insensitive(self, matcher):
        targets = [dao("other"), dao("USERID")]
        assert matcher.match(dto("userId"), targets) == targets[1]

    def test_directional_prefix_stripped(self, matcher):
        target = dao("userId")
        assert matcher.match(dto("BDtoInUserId"), [target]) == target
        assert matcher.match(dto("BDtoOutUserId"), [target]) == target

    def test_exact_wins_over_prefix_strip(self, matcher):
        exact = dao("bdtoinuserid")
        stripped = dao("userId")
        assert matcher.match(dto("BDtoInUserId"), [stripped, exact]) == exact

    def test_substring_either_direction(self, matcher):
        assert matcher.match(dto("name"), [dao("customerName")]).name == "customerName"
        assert matcher.match(dto("customerNameLong"), [dao("name")]).name == "name"

    def test_substring_first_in_catalog_order(self, matcher):
        # Loose heuristic: first qualifying target wins, no tie-break
        targets = [dao("addressLine"), dao("address")]
        assert matcher.match(dto("addr"), targets) == targets[0]

        assert matcher.match(dto("addr"), list(reversed(targets))) == targets[1]

    def test_role_prefix_and_suffix(self, matcher):
        target = dao("daoUserCodeField")
        assert matcher.match(dto("dtoUserCode"), [target]) == target

    def test_role_prefix_after_directional_prefix(self, matcher):
        target = dao("daoAmountField")
        assert matcher.match(dto("BDtoInAmountField"), [target]) == target

    def test_no_match(self, matcher):
        assert matcher.match(dto("userId"), [dao("balance"), dao("branch")]) is None

    def test_already_matched_excluded(self, matcher):
        first = dao("userId", "CUSTCE01")
        second = dao("userId", "CUSTCE02")
        assert matcher.match(dto("userId"), [first, second], {first.id}) == second
        assert matcher.match(dto("userId"), [first], {first.id}) is None

    def test_empty_catalog(self, matcher):
        assert matcher.match(dto("userId"), []) is None

    def test_clean_names(self, matcher):
        assert matcher.clean_source_name("BDtoInDtoCodeField") == "code"
        assert matcher.clean_target_name("DaoCodeField") == "code"

    def test_custom_prefixes(self):
        config = MapperConfig(input_prefix="in", output_prefix="out")
        matcher = NamingMatcher(config)
        target = dao("total")
        assert matcher.match(dto("inTotal"), [target]) == target


class TestHeuristicMapper:
    """Test single-pass auto-mapping."""

    def test_scenario_input_field_no_warning(self):
        catalog = FieldCatalog(
            source={"UserDTO": [dto("BDtoInUserId")]},
            target=[dao("userId", "CUSTCE01")],
        )
        store = MappingStore()

        created = HeuristicMapper(store).auto_map(catalog)

        assert len(created) == 1
        association = created[0]
        assert association.cardinality == Cardinality.ONE_TO_ONE
        assert association.source_fields == (FieldId("UserDTO", "BDtoInUserId"),)
        assert association.target_fields == (FieldId("CUSTCE01", "userId"),)
        assert association.warnings == ()
        assert store.associations == created

    def test_scenario_direction_mismatch_warns(self):
        catalog = FieldCatalog(
            source={"UserDTO": [dto("BDtoInUserId")]},
            target=[dao("userId", "CUSTCS01")],
        )

        created = HeuristicMapper(MappingStore()).auto_map(catalog)

        assert len(created) == 1
        assert len(created[0].warnings) == 1
        assert "CUSTCS01" in created[0].warnings[0]

    def test_target_claimed_once_per_pass(self):
        catalog = FieldCatalog(
            source={
                "UserDTO": [dto("userId")],
                "AccountDTO": [dto("userId", "AccountDTO")],
            },
            target=[dao("userId")],
        )

        created = HeuristicMapper(MappingStore()).auto_map(catalog)

        assert len(created) == 1
        assert created[0].source_fields == (FieldId("UserDTO", "userId"),)

    def test_catalog_order(self):
        catalog = FieldCatalog(
            source={"UserDTO": [dto("name"), dto("code")]},
            target=[dao("code"), dao("name")],
        )

        created = HeuristicMapper(MappingStore()).auto_map(catalog)

        assert [a.source_fields[0].name for a in created] == ["name", "code"]
        assert [a.target_fields[0].name for a in created] == ["name", "code"]

    def test_unmatched_skipped(self):
        catalog = FieldCatalog(
            source={"UserDTO": [dto("userId"), dto("zzz")]},
            target=[dao("userId")],
        )

        created = HeuristicMapper(MappingStore()).auto_map(catalog)

        assert len(created) == 1

    def test_existing_pair_skipped(self):
        catalog = FieldCatalog(
            source={"UserDTO": [dto("userId")]},
            target=[dao("userId")],
        )
        store = MappingStore()
        store.create_association([FieldId("UserDTO", "userId")], [FieldId("CUSTCE01", "userId")])

        created = HeuristicMapper(store).auto_map(catalog)

        assert created == []
        assert len(store) == 1

    def test_each_association_undoable(self):
        catalog = FieldCatalog(
            source={"UserDTO": [dto("name"), dto("code")]},
            target=[dao("name"), dao("code")],
        )
        store = MappingStore()
        HeuristicMapper(store).auto_map(catalog)

        store.undo()

        assert len(store) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
