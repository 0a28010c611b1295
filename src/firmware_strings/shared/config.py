"""Configuration classes for firmware string handling.

This module provides configuration objects for the encoder and the
command-line tool.
"""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

# Names accepted on the command line and in CLI config files
KIND_NAMES = ("latin1", "ucs2")
OUTPUT_FORMATS = ("json", "hex")
BYTE_ORDERS = ("little", "big")


@dataclass
class EncoderConfig:
    """Configuration for text to firmware string encoding.

    Attributes:
        translate_line_endings: Emit CR before every LF
        enable_diagnostics: Collect DiagnosticEntry records on results
        correlation_id: Optional correlation ID attached to logs and diagnostics
    """

    translate_line_endings: bool = True
    enable_diagnostics: bool = True
    correlation_id: Optional[str] = None

    @classmethod
    def firmware(cls) -> "EncoderConfig":
        """Create configuration matching firmware console conventions (CR LF)."""
        return cls()

    @classmethod
    def verbatim(cls) -> "EncoderConfig":
        """Create configuration that copies line feeds unchanged."""
        return cls(translate_line_endings=False)

    def with_correlation_id(self, correlation_id: str) -> "EncoderConfig":
        """Return a copy tagged with a correlation ID."""
        return replace(self, correlation_id=correlation_id)


@dataclass
class CLIConfig:
    """Defaults for the command-line tool."""

    kind: str = "ucs2"
    capacity: int = 256
    output_format: str = "json"
    byteorder: str = "little"
    translate_line_endings: bool = True

    def __post_init__(self) -> None:
        """Validate CLI configuration."""
        if self.kind not in KIND_NAMES:
            raise ValueError(f"kind must be one of {list(KIND_NAMES)}")
        if self.capacity <= 0:
            raise ValueError("capacity must be > 0")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {list(OUTPUT_FORMATS)}")
        if self.byteorder not in BYTE_ORDERS:
            raise ValueError(f"byteorder must be one of {list(BYTE_ORDERS)}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CLIConfig":
        """Build a configuration from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        A missing file yields the defaults. Malformed content raises
        ``ValueError``.
        """
        if not config_path.exists():
            return cls()
        with config_path.open(encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a JSON object")
        return cls.from_dict(data)

    def encoder_config(self) -> EncoderConfig:
        """Derive the encoder configuration for this CLI run."""
        return EncoderConfig(translate_line_endings=self.translate_line_endings)
