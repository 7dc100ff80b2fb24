"""Per-invocation settings for parsing and building packages."""

import json
import logging
from pathlib import Path
from typing import Any

from .constants import DEFAULT_CHECKSUM_ALGORITHM, DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


class Settings:
    """Settings for one parse or build invocation.

    Settings are passed explicitly to every component that needs them; there
    is no process-wide configuration.

    Config keys:
        encode_href: Percent-encode hrefs when writing and decode when reading
            (default: True)
        checksum_algorithm: Algorithm used when building (default: SHA-256)
        chunk_size: Read size for streaming checksums (default: 1 MiB)
        validate_schema: Validate METS documents against an XSD (default: False)
        schema_path: XSD used when validate_schema is set
        require_representation_type_parts: Reject representation METS TYPE
            values without a content type part (default: False)
        profile: Profile name used when parsing (default: "eark")
        creator_agent_name: Software agent written into built headers
            (default: "infopack")
    """

    def __init__(self, config: dict | None = None):
        self._config = dict(config or {})

    @classmethod
    def from_file(cls, path: Path) -> "Settings":
        """Load settings from a JSON file."""
        data = json.loads(Path(path).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a JSON object: {path}")
        logger.debug(f"Loaded settings from {path}")
        return cls(data)

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with the given keys replaced (None values are ignored)."""
        config = dict(self._config)
        config.update({k: v for k, v in overrides.items() if v is not None})
        return Settings(config)

    @property
    def encode_href(self) -> bool:
        return bool(self._config.get("encode_href", True))

    @property
    def checksum_algorithm(self) -> str:
        return str(self._config.get("checksum_algorithm", DEFAULT_CHECKSUM_ALGORITHM))

    @property
    def chunk_size(self) -> int:
        return int(self._config.get("chunk_size", DEFAULT_CHUNK_SIZE))

    @property
    def validate_schema(self) -> bool:
        return bool(self._config.get("validate_schema", False))

    @property
    def schema_path(self) -> Path | None:
        value = self._config.get("schema_path")
        return Path(value) if value else None

    @property
    def require_representation_type_parts(self) -> bool:
        return bool(self._config.get("require_representation_type_parts", False))

    @property
    def profile(self) -> str:
        return str(self._config.get("profile", "eark"))

    @property
    def creator_agent_name(self) -> str:
        return str(self._config.get("creator_agent_name", "infopack"))

    def as_dict(self) -> dict:
        return dict(self._config)
