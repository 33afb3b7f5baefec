"""Tests for DirectionValidator."""
import pytest

from config import MapperConfig
from fieldmapper.validator.direction_validator import DirectionValidator


@pytest.fixture
def validator():
    return DirectionValidator()


class TestDirectionValidator:
    """Test directional consistency warnings."""

    def test_direction_letters(self, validator):
        assert validator.direction_letters("CUSTCE01") == "CE"
        assert validator.direction_letters("custcs02") == "CS"

    @pytest.mark.parametrize("owner_class", ["UserDAO", "CUSTCE1", "CUSTCE001", "CUS1CE01", "CUSTCE0A", ""])
    def test_class_outside_scheme_not_checked(self, validator, owner_class):
        assert validator.direction_letters(owner_class) is None
        assert validator.validate("BDtoInUserId", owner_class) is None

    @pytest.mark.parametrize("letters", ["CE", "ME", "AE"])
    def test_input_to_input_ok(self, validator, letters):
        assert validator.validate("BDtoInUserId", f"CUST{letters}01") is None

    @pytest.mark.parametrize("letters", ["CS", "MS", "AS"])
    def test_input_to_output_warns(self, validator, letters):
        warning = validator.validate("BDtoInUserId", f"CUST{letters}01")
        assert warning is not None
        assert "BDtoInUserId" in warning
        assert f"CUST{letters}01" in warning

    @pytest.mark.parametrize("letters", ["CE", "ME", "AE"])
    def test_output_to_input_warns(self, validator, letters):
        assert validator.validate("BDtoOutBalance", f"ACCT{letters}01") is not None

    def test_output_to_output_ok(self, validator):
        assert validator.validate("BDtoOutBalance", "ACCTCS01") is None

    def test_unprefixed_field_never_warns(self, validator):
        assert validator.validate("userId", "CUSTCS01") is None
        assert validator.validate("userId", "CUSTCE01") is None

    def test_unknown_direction_letters(self, validator):
        assert validator.validate("BDtoInUserId", "CUSTXX01") is None

    def test_lowercase_letters_normalized(self, validator):
        assert validator.validate("BDtoInUserId", "custcs01") is not None

    def test_custom_direction_sets(self):
        config = MapperConfig(input_directions=("EN",), output_directions=("SA",))
        validator = DirectionValidator(config)

        assert validator.validate("BDtoInUserId", "CUSTSA01") is not None
        assert validator.validate("BDtoInUserId", "CUSTCS01") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
