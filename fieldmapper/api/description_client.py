"""Remote service description client."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from config import RemoteConfig
from fieldmapper.schema.models import Field, FieldCatalog

logger = logging.getLogger(__name__)


class MalformedRemoteDocument(ValueError):
    """The fetched description lacks required keys or has the wrong shape."""


class RemoteFetchError(RuntimeError):
    """The description could not be fetched."""


@dataclass
class BackendAccess:
    """One backend transaction described by the remote document."""

    backend_type: str
    trx_name: str
    formats: List[str] = field(default_factory=list)


@dataclass
class ServiceDescription:
    """Remote description converted into catalog form."""

    name: str
    catalog: FieldCatalog
    backends: List[BackendAccess] = field(default_factory=list)


def _require(container: Any, key: str, expected: type, where: str) -> Any:
    if not isinstance(container, dict):
        raise MalformedRemoteDocument(f"{where} must be an object, got {type(container).__name__}")
    if key not in container:
        raise MalformedRemoteDocument(f"Missing '{key}' in {where}")
    value = container[key]
    if not isinstance(value, expected):
        raise MalformedRemoteDocument(
            f"'{key}' in {where} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _parse_field(raw: Any, owner_class: str, where: str) -> Field:
    name = _require(raw, "name", str, where)
    field_type = raw.get("type", "")
    if not isinstance(field_type, str):
        raise MalformedRemoteDocument(f"'type' in {where} must be str")
    return Field(name=name, type=field_type, owner_class=owner_class)


def parse_description(document: Any) -> ServiceDescription:
    """
    Convert a remote description into a catalog.

    Expected shape:
        {"details": {"name": ...,
                     "dtos": {ClassName: [{"name", "type"}]},
                     "backendAccess": [{"backendType", "trxName",
                                        "serviceMapping": [{"format", "fields": [...]}]}]}}

    Raises:
        MalformedRemoteDocument: If any required key is missing or malformed
    """
    details = _require(document, "details", dict, "document")
    name = details.get("name", "")
    if not isinstance(name, str):
        raise MalformedRemoteDocument("'name' in details must be str")

    dtos = details.get("dtos", {})
    if not isinstance(dtos, dict):
        raise MalformedRemoteDocument("'dtos' in details must be an object")

    source: Dict[str, List[Field]] = {}
    for class_name, raw_fields in dtos.items():
        if not isinstance(raw_fields, list):
            raise MalformedRemoteDocument(f"dtos.{class_name} must be a list")
        source[class_name] = [
            _parse_field(raw, class_name, f"dtos.{class_name}[{i}]")
            for i, raw in enumerate(raw_fields)
        ]

    accesses = _require(details, "backendAccess", list, "details")
    if not accesses:
        raise MalformedRemoteDocument("'backendAccess' in details is empty")

    target: List[Field] = []
    backends: List[BackendAccess] = []
    for i, access in enumerate(accesses):
        where = f"backendAccess[{i}]"
        mappings = _require(access, "serviceMapping", list, where)
        backend = BackendAccess(
            backend_type=str(access.get("backendType", "")),
            trx_name=str(access.get("trxName", "")),
        )

        for j, mapping in enumerate(mappings):
            mapping_where = f"{where}.serviceMapping[{j}]"
            format_name = _require(mapping, "format", str, mapping_where)
            raw_fields = _require(mapping, "fields", list, mapping_where)
            backend.formats.append(format_name)
            target.extend(
                _parse_field(raw, format_name, f"{mapping_where}.fields[{k}]")
                for k, raw in enumerate(raw_fields)
            )

        backends.append(backend)

    return ServiceDescription(
        name=name,
        catalog=FieldCatalog(source=source, target=target),
        backends=backends,
    )


class DescriptionClient:
    """Client for fetching service descriptions."""

    def __init__(self, config: RemoteConfig):
        """Initialize client."""
        self.config = config
        self.session = requests.Session()

        if config.api_key:
            self.session.headers.update({"Authorization": f"Bearer {config.api_key}"})

    def fetch(self, url: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch the raw description JSON.

        Raises:
            RemoteFetchError: On network errors, timeouts or non-JSON bodies
        """
        url = url or self.config.base_url
        if not url:
            raise RemoteFetchError("No description URL configured")

        try:
            logger.debug(f"Fetching service description from {url}")
            response = self.session.get(url, timeout=self.config.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            raise RemoteFetchError(f"Timed out after {self.config.timeout}s fetching {url}") from e
        except requests.exceptions.JSONDecodeError as e:
            raise RemoteFetchError(f"Invalid JSON from {url}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise RemoteFetchError(f"Error fetching {url}: {e}") from e
        except ValueError as e:
            raise RemoteFetchError(f"Invalid JSON from {url}: {e}") from e

    def get_description(self, url: Optional[str] = None) -> ServiceDescription:
        """Fetch and parse a description."""
        description = parse_description(self.fetch(url))
        logger.info(
            f"Loaded description '{description.name}': "
            f"{description.catalog.total_source_fields} DTO / "
            f"{description.catalog.total_target_fields} DAO fields"
        )
        return description
