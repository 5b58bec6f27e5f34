"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TAL_OUTLINE__SECTION__KEY)
3. Repo YAML (./.tal-outline.yaml)
4. Global YAML (~/.config/tal-outline/config.yaml)
5. Built-in defaults (this file)

Examples:
    TAL_OUTLINE__LOGGING__LEVEL=DEBUG
    TAL_OUTLINE__SCAN__ENCODING=latin-1
    TAL_OUTLINE__WATCH__DEBOUNCE_MS=500
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TAL_OUTLINE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every outline scan.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ScanConfig(BaseModel):
    """Outline scan configuration.

    Env vars:
        TAL_OUTLINE__SCAN__EXTENSIONS: JSON list of file suffixes to outline
        TAL_OUTLINE__SCAN__ENCODING: Source file encoding
        TAL_OUTLINE__SCAN__MAX_FILE_SIZE_MB: Skip files larger than this
        TAL_OUTLINE__SCAN__MAIN_PREFIX: Name prefix of synthesized main-body entries
    """

    extensions: list[str] = Field(
        default_factory=lambda: [".tal"],
        description="File suffixes picked up when a directory is outlined.",
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding used to read source files.",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Skip files larger than this (MB).",
    )
    main_prefix: str = Field(
        default="main: ",
        description="Prefix of the synthesized entry covering a procedure's main body.",
    )

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v


class WatchConfig(BaseModel):
    """Watch mode configuration.

    Env vars:
        TAL_OUTLINE__WATCH__DEBOUNCE_MS: Change debounce window
    """

    debounce_ms: int = Field(
        default=300,
        description="Debounce window before re-outlining changed files.",
    )

    @field_validator("debounce_ms")
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"debounce_ms must be >= 0, got {v}")
        return v


class TalOutlineConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
