"""
Configuration models and YAML I/O for tabular-ingest.

Key models:
- ParserConfig: Tokenizer and header settings (delimiter, quoting policy,
  buffer size, decoding, duplicate-header policy).
- SourceConfig: Input file path and the reader used to build records.
- OutputConfig: Export destination, format and invalid-record handling.
- ExtractConfig: Top-level config for a YAML-driven ``extract()`` run.

Key functions:
- load_config(path) -> ExtractConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

``ParserConfig`` is also used on its own: every ``ExtractionPipeline``
takes one, and falls back to the defaults when none is given.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator

from tabular_ingest.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 16 * 1024


class ParserConfig(BaseModel):
    """Tokenizer and header-index settings."""

    delimiter: str = Field(",", description="Single ASCII field separator")
    quote_char: str = Field('"', description="Single ASCII quote character")
    buffer_size: int = Field(
        DEFAULT_BUFFER_SIZE, gt=0, description="Read-ahead chunk size in bytes"
    )
    encoding: str = Field("utf-8", description="Encoding used to decode fields")
    encoding_errors: Literal["replace", "strict"] = Field(
        "replace",
        description=(
            "'replace' substitutes U+FFFD for undecodable bytes; "
            "'strict' raises FieldDecodeError"
        ),
    )
    strict_quoting: bool = Field(
        False,
        description=(
            "If True, malformed quoting raises MalformedQuotingError; "
            "otherwise the tokenizer recovers and keeps going"
        ),
    )
    duplicate_headers: Literal["last_wins", "reject"] = Field(
        "last_wins", description="How repeated header names are resolved"
    )
    strip_header_names: bool = Field(
        True, description="If True, strip surrounding whitespace from header names"
    )
    skip_blank_lines: bool = Field(
        True, description="If True, empty lines between data rows produce no record"
    )

    @model_validator(mode="after")
    def _check_special_bytes(self) -> ParserConfig:
        """Delimiter and quote must be distinct single ASCII bytes, not newlines."""
        for name in ("delimiter", "quote_char"):
            value = getattr(self, name)
            if len(value) != 1 or not value.isascii():
                raise ValueError(f"{name} must be a single ASCII character, got {value!r}")
            if value in "\r\n":
                raise ValueError(f"{name} cannot be a line terminator")
        if self.delimiter == self.quote_char:
            raise ValueError("delimiter and quote_char must differ")
        return self


class SourceConfig(BaseModel):
    """Source file information."""

    input_path: str = Field(..., description="Path to the delimited text file")
    reader: str = Field(..., description="Registered reader name, e.g. 'population'")


class OutputConfig(BaseModel):
    """Output settings."""

    output_path: str = Field(..., description="File the records are exported to")
    output_format: Literal["csv", "parquet"] = Field(
        "parquet", description="Output format"
    )
    drop_invalid: bool = Field(
        False, description="If True, records with valid=False are not exported"
    )


class ExtractConfig(BaseModel):
    """Top-level configuration for a YAML-driven extraction run."""

    source: SourceConfig
    parser: ParserConfig = Field(default_factory=ParserConfig)
    output: OutputConfig


def load_config(path: str | Path) -> ExtractConfig:
    """Load and validate an extract config YAML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return ExtractConfig.model_validate(raw)


def save_config(config: ExtractConfig, path: str | Path) -> None:
    """Serialize an ExtractConfig to YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# tabular-ingest extract configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
