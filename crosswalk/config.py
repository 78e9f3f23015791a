"""Configuration and logging setup."""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .values.coerce import TextOptions, boolean

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ENV_PREFIX = "CROSSWALK_"


@dataclass
class CrosswalkConfig:
    """Settings for an extraction run."""
    schemas_dir: Optional[str] = None
    entity_type: Optional[str] = None  # Detected per record when None
    bundle: Optional[str] = None
    strict: bool = False  # Treat missing required fields as failures
    locale: Optional[str] = None
    trim_text: bool = True
    log_level: str = "INFO"
    batch_size: int = 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "schemas_dir": self.schemas_dir,
            "entity_type": self.entity_type,
            "bundle": self.bundle,
            "strict": self.strict,
            "locale": self.locale,
            "trim_text": self.trim_text,
            "log_level": self.log_level,
            "batch_size": self.batch_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrosswalkConfig":
        """Create from dictionary representation."""
        return cls(
            schemas_dir=data.get("schemas_dir"),
            entity_type=data.get("entity_type"),
            bundle=data.get("bundle"),
            strict=bool(data.get("strict", False)),
            locale=data.get("locale"),
            trim_text=bool(data.get("trim_text", True)),
            log_level=str(data.get("log_level", "INFO")).upper(),
            batch_size=int(data.get("batch_size", 100)),
        )

    @classmethod
    def from_json_file(cls, file_path: str) -> "CrosswalkConfig":
        """Load configuration from a JSON file."""
        with open(file_path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls,
        base: Optional["CrosswalkConfig"] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> "CrosswalkConfig":
        """
        Apply CROSSWALK_* environment variables on top of a base configuration.

        Recognized: CROSSWALK_SCHEMAS_DIR, CROSSWALK_ENTITY_TYPE, CROSSWALK_BUNDLE,
        CROSSWALK_STRICT, CROSSWALK_LOCALE, CROSSWALK_TRIM_TEXT,
        CROSSWALK_LOG_LEVEL, CROSSWALK_BATCH_SIZE.
        """
        environ = os.environ if environ is None else environ
        data = (base or cls()).to_dict()

        for key in data:
            env_value = environ.get(f"{ENV_PREFIX}{key.upper()}")
            if env_value is None:
                continue
            if key in ("strict", "trim_text"):
                data[key] = boolean(env_value)
            else:
                data[key] = env_value

        return cls.from_dict(data)

    def text_options(self) -> TextOptions:
        """Default multi-value text options for this configuration."""
        return TextOptions(locale=self.locale, trim=self.trim_text)


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging in the package's standard format."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
