"""Settings for the dmnlint CLI and HTTP API.

Settings live in ``.dmnlint.json``, looked up from the working directory
towards the filesystem root. Every key is optional; keys use camelCase in
the file and snake_case in Python.
"""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".dmnlint.json"

LOCAL_BIND_ADDRESSES = ("127.0.0.1", "localhost", "::1")
MIN_PORT, MAX_PORT = 1024, 65535


class OutputFormat(str, Enum):
    """How the CLI renders reports."""
    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


class LogLevel(str, Enum):
    """Root logger threshold."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class ValidationConfig(BaseModel):
    """When a run counts as failed, and how large a document may be."""
    fail_on_warnings: bool = Field(alias="failOnWarnings", default=False)
    # Enforced by the CLI and the API before a document reaches the validator
    max_document_bytes: int = Field(alias="maxDocumentBytes", default=10 * 1024 * 1024, ge=1)

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    format: OutputFormat = OutputFormat.TABLE

    model_config = ConfigDict(use_enum_values=True)


class ApiConfig(BaseModel):
    """``dmnlint serve`` settings. The server never listens beyond loopback."""
    enabled: bool = True
    bind: str = "127.0.0.1"
    port: int = 8624

    @field_validator("bind")
    @classmethod
    def check_loopback(cls, value: str) -> str:
        if value not in LOCAL_BIND_ADDRESSES:
            raise ValueError(
                f"bind must be a loopback address ({', '.join(LOCAL_BIND_ADDRESSES)}), got {value!r}"
            )
        return value

    @field_validator("port")
    @classmethod
    def check_port(cls, value: int) -> int:
        if not MIN_PORT <= value <= MAX_PORT:
            raise ValueError(f"port {value} is outside {MIN_PORT}-{MAX_PORT}")
        return value

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class DmnLintConfig(BaseModel):
    """Root of ``.dmnlint.json``. Unknown sections are rejected."""
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest ``.dmnlint.json`` in ``start_dir`` or one of its parents."""
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate
    return None


def load_config(config_path: str | Path | None = None) -> DmnLintConfig:
    """Read settings from ``config_path``, or from the discovered file.

    A missing file means defaults.

    Raises:
        ValueError: The file is not JSON, cannot be read, or holds invalid
            settings; the message names the file
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None or not path.exists():
        logger.debug("No configuration file found, using defaults")
        return create_default_config()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: invalid JSON ({e})") from e
    except OSError as e:
        raise ValueError(f"{path}: cannot read configuration ({e})") from e

    try:
        config = DmnLintConfig.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"{path}: invalid configuration\n{e}") from e

    logger.debug(f"Loaded configuration from {path}")
    return config


def create_default_config() -> DmnLintConfig:
    return DmnLintConfig()
