"""Directional consistency check between DTO fields and DAO classes."""
import re
import logging
from typing import Optional

from config import MapperConfig

logger = logging.getLogger(__name__)


class DirectionValidator:
    """
    Flags an input DTO field mapped to an output DAO class, or vice versa.

    DAO classes following the transaction naming scheme encode their
    direction in letters 5-6, e.g. CUSTCE01 (CE = input) or CUSTCS01
    (CS = output). Classes outside the scheme are not checked.
    """

    CLASS_PATTERN = re.compile(r"^[A-Za-z]{4}([A-Za-z]{2})\d{2}$")

    def __init__(self, config: Optional[MapperConfig] = None):
        """Initialize validator."""
        self.config = config or MapperConfig()
        self.input_directions = {d.upper() for d in self.config.input_directions}
        self.output_directions = {d.upper() for d in self.config.output_directions}

    def direction_letters(self, owner_class: str) -> Optional[str]:
        """Return the direction letters of a DAO class, or None."""
        match = self.CLASS_PATTERN.match(owner_class or "")
        if not match:
            return None
        return match.group(1).upper()

    def validate(self, source_field_name: str, target_owner_class: str) -> Optional[str]:
        """
        Check a DTO field name against a DAO owner class.

        Args:
            source_field_name: DTO field name (e.g., BDtoInUserId)
            target_owner_class: DAO owner class name (e.g., CUSTCE01)

        Returns:
            Warning message, or None when consistent or not checkable
        """
        letters = self.direction_letters(target_owner_class)
        if letters is None:
            return None

        if source_field_name.startswith(self.config.input_prefix) and letters in self.output_directions:
            warning = (
                f"Input field '{source_field_name}' mapped to output class "
                f"'{target_owner_class}' ({letters})"
            )
        elif source_field_name.startswith(self.config.output_prefix) and letters in self.input_directions:
            warning = (
                f"Output field '{source_field_name}' mapped to input class "
                f"'{target_owner_class}' ({letters})"
            )
        else:
            return None

        logger.warning(warning)
        return warning
