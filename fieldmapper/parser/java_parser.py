"""Parser for Java class field declarations."""
import re
from typing import List

from fieldmapper.schema.models import Field


class JavaFieldParser:
    """Extracts field declarations from Java source text."""

    # private|public|protected [final] [static] Type name;
    FIELD_PATTERN = re.compile(
        r"(?:private|public|protected)\s+(?:final\s+)?(?:static\s+)?([\w.<>\[\]]+)\s+(\w+)\s*;"
    )

    # Same declaration, preceded by a @Campo annotation
    ANNOTATED_FIELD_PATTERN = re.compile(
        r"@Campo[\s\S]*?(?:private|public|protected)\s+(?:final\s+)?(?:static\s+)?([\w.<>\[\]]+)\s+(\w+)\s*;"
    )

    def __init__(self, require_annotation: bool = False):
        """
        Initialize parser.

        Args:
            require_annotation: Only keep fields annotated with @Campo (DAO classes)
        """
        self.require_annotation = require_annotation

    def parse(self, content: str, class_name: str) -> List[Field]:
        """
        Parse a Java class body.

        Args:
            content: Java source text
            class_name: Owner class name assigned to every field

        Returns:
            Fields in declaration order
        """
        pattern = self.ANNOTATED_FIELD_PATTERN if self.require_annotation else self.FIELD_PATTERN

        return [
            Field(name=match.group(2).strip(), type=match.group(1).strip(), owner_class=class_name)
            for match in pattern.finditer(content)
        ]
