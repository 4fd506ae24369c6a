"""Configuration management for lracheck using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lracheck.constants import CONFIG_FILE_NAME, DEFAULT_DESCRIPTOR_SUFFIX


class ReportFormat(str, Enum):
    """Report output formats."""
    TEXT = "text"
    TABLE = "table"
    JSON = "json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class ScanConfig(BaseModel):
    """Discovery configuration section."""
    paths: list[str] = Field(default_factory=lambda: ["."])
    fail_when_path_not_exist: bool = Field(alias="failWhenPathNotExist", default=True)
    descriptor_suffix: str = Field(alias="descriptorSuffix", default=DEFAULT_DESCRIPTOR_SUFFIX)

    @field_validator("descriptor_suffix")
    @classmethod
    def validate_descriptor_suffix(cls, v):
        if not v.startswith("."):
            raise ValueError(f"descriptor_suffix must start with '.', got: {v}")
        return v

    model_config = ConfigDict(populate_by_name=True)


class EngineConfig(BaseModel):
    """Rule engine configuration section."""
    workers: int = 1

    @field_validator("workers")
    @classmethod
    def validate_workers(cls, v):
        if v < 1:
            raise ValueError("workers must be >= 1")
        return v


class ReportConfig(BaseModel):
    """Report configuration section."""
    format: ReportFormat = ReportFormat.TEXT
    sort: bool = False

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class LraCheckConfig(BaseModel):
    """Complete lracheck configuration model."""
    scan: ScanConfig = Field(default_factory=ScanConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> LraCheckConfig:
    """Load the lracheck configuration.

    An explicit path that does not exist, or no ``.lracheck.json`` found from
    the current directory upwards, yields the default configuration.

    Raises:
        ValueError: If the file cannot be read, is not JSON, or does not
            match the configuration schema
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None or not path.exists():
        return create_default_config()

    try:
        config_data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    try:
        return LraCheckConfig.model_validate(config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {path}: {e}") from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest .lracheck.json in start_dir (default: cwd) or one of its parents."""
    start = Path(start_dir if start_dir is not None else Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def create_default_config() -> LraCheckConfig:
    """Create default configuration: scan the current directory, fail on missing paths."""
    return LraCheckConfig()
