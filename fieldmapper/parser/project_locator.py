"""Locate DTO and DAO sources inside a Java project."""
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from fieldmapper.parser.java_parser import JavaFieldParser
from fieldmapper.schema.models import Field, FieldCatalog

logger = logging.getLogger(__name__)


def _read_source(path: Path) -> str:
    # undecodable bytes (latin-1 comments) become U+FFFD
    return path.read_text(encoding="utf-8", errors="replace")


class ProjectLocator:
    """
    Finds the business/vN folder of a Java project and extracts its fields.

    Layout:
        <root>/src/main/java/.../business/vN/dto/*.java
        <root>/src/main/java/.../business/vN/dao/model/<folder>/*.java
    """

    VERSION_PATTERN = re.compile(r"^v\d+$", re.IGNORECASE)
    MAX_DEPTH = 5
    SKIPPED_DAO_PREFIXES = ("Request", "Response")

    def __init__(self, root: Path):
        """Initialize locator for a project root."""
        self.root = Path(root)

    def find_business_folder(self) -> Optional[Path]:
        """
        Find business/vN starting from src/main/java, src or the root.

        Returns:
            Path to the business/vN folder, or None
        """
        search_path = self.root
        for candidate in (self.root / "src" / "main" / "java", self.root / "src"):
            if candidate.is_dir():
                search_path = candidate
                break

        logger.debug(f"Searching business folder from {search_path}")
        result = self._search(search_path, self.MAX_DEPTH)

        if result is None:
            logger.warning(f"No business/vN folder found under {self.root}")
        else:
            logger.info(f"Found business folder: {result}")
        return result

    def _search(self, current: Path, depth: int) -> Optional[Path]:
        if depth <= 0:
            return None

        try:
            entries = sorted(p for p in current.iterdir() if p.is_dir())
        except OSError as e:
            logger.warning(f"Error reading directory {current}: {e}")
            return None

        for entry in entries:
            if entry.name.lower() == "business":
                try:
                    versions = sorted(p for p in entry.iterdir() if p.is_dir())
                except OSError as e:
                    logger.warning(f"Error reading directory {entry}: {e}")
                    continue
                for version in versions:
                    if self.VERSION_PATTERN.match(version.name):
                        return version
                logger.debug(f"'business' folder without vN version: {entry}")

        for entry in entries:
            if not entry.name.startswith("."):
                result = self._search(entry, depth - 1)
                if result is not None:
                    return result

        return None

    @staticmethod
    def get_model_subfolders(business_path: Path) -> List[str]:
        """List subfolders of dao/model."""
        model_path = Path(business_path) / "dao" / "model"
        if not model_path.is_dir():
            logger.warning(f"Missing dao/model folder in {business_path}")
            return []
        return sorted(p.name for p in model_path.iterdir() if p.is_dir())

    @staticmethod
    def extract_dto_fields(business_path: Path) -> Dict[str, List[Field]]:
        """Extract DTO fields grouped by class from dto/*.java."""
        dto_path = Path(business_path) / "dto"
        parser = JavaFieldParser()
        grouped: Dict[str, List[Field]] = {}

        if not dto_path.is_dir():
            logger.warning(f"Missing dto folder in {business_path}")
            return grouped

        for java_file in sorted(dto_path.glob("*.java")):
            class_name = java_file.stem
            fields = parser.parse(_read_source(java_file), class_name)
            if fields:
                grouped[class_name] = fields

        logger.info(f"Extracted {sum(len(f) for f in grouped.values())} DTO fields from {len(grouped)} classes")
        return grouped

    @classmethod
    def extract_dao_fields(cls, business_path: Path, selected_folder: str) -> List[Field]:
        """Extract @Campo fields from dao/model/<selected_folder>/*.java."""
        model_path = Path(business_path) / "dao" / "model" / selected_folder
        parser = JavaFieldParser(require_annotation=True)
        fields: List[Field] = []

        if not model_path.is_dir():
            logger.warning(f"Missing model folder {model_path}")
            return fields

        for java_file in sorted(model_path.glob("*.java")):
            if java_file.name.startswith(cls.SKIPPED_DAO_PREFIXES):
                continue
            fields.extend(parser.parse(_read_source(java_file), java_file.stem))

        logger.info(f"Extracted {len(fields)} DAO fields from {selected_folder}")
        return fields

    def build_catalog(self, business_path: Path, selected_folder: str) -> FieldCatalog:
        """Build the session catalog from a business folder and a model folder."""
        return FieldCatalog(
            source=self.extract_dto_fields(business_path),
            target=self.extract_dao_fields(business_path, selected_folder),
        )
