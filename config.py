"""Application configuration."""
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class MapperConfig:
    """Mapping engine settings."""

    history_limit: int = 50
    input_prefix: str = "BDtoIn"
    output_prefix: str = "BDtoOut"
    source_role_prefixes: Tuple[str, ...] = ("bdto", "dto")
    target_role_prefixes: Tuple[str, ...] = ("bdao", "dao")
    field_suffix: str = "field"
    # Direction letters at positions 5-6 of a DAO owner class (e.g. CUSTCE01)
    input_directions: Tuple[str, ...] = ("CE", "ME", "AE")
    output_directions: Tuple[str, ...] = ("CS", "MS", "AS")

    @property
    def directional_prefixes(self) -> Tuple[str, ...]:
        return (self.input_prefix, self.output_prefix)

    @classmethod
    def from_env(cls) -> "MapperConfig":
        """Load config from environment variables."""
        return cls(
            history_limit=int(os.getenv("FIELDMAPPER_HISTORY_LIMIT", "50")),
            input_prefix=os.getenv("FIELDMAPPER_INPUT_PREFIX", "BDtoIn"),
            output_prefix=os.getenv("FIELDMAPPER_OUTPUT_PREFIX", "BDtoOut"),
        )


@dataclass
class RemoteConfig:
    """Remote service description settings."""

    base_url: str = ""
    api_key: str = ""
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "RemoteConfig":
        """Load config from environment variables."""
        return cls(
            base_url=os.getenv("FIELDMAPPER_REMOTE_URL", ""),
            api_key=os.getenv("FIELDMAPPER_REMOTE_TOKEN", ""),
            timeout=int(os.getenv("FIELDMAPPER_REMOTE_TIMEOUT", "30")),
        )


@dataclass
class AppConfig:
    """Application settings."""

    output_dir: str = "./output"
    mapper: MapperConfig = field(default_factory=MapperConfig)
    remote: Optional[RemoteConfig] = None

    def __post_init__(self):
        """Initialize default values."""
        if self.remote is None:
            self.remote = RemoteConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            output_dir=os.getenv("FIELDMAPPER_OUTPUT_DIR", "./output"),
            mapper=MapperConfig.from_env(),
            remote=RemoteConfig.from_env(),
        )


# Global instance
app_config = AppConfig.from_env()
