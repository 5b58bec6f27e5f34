"""tal-outline error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Document
- 9xxx: Internal

The outline scanner itself never raises for text input. These errors cover
the surfaces around it: loading configuration and reading documents.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Document (3xxx)
    DOCUMENT_UNREADABLE = 3001
    DOCUMENT_TOO_LARGE = 3002
    DOCUMENT_DECODE_FAILED = 3003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class TalOutlineError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TalOutlineError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class DocumentError(TalOutlineError):
    """Errors raised while acquiring a document to outline."""

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "DocumentError":
        return cls(
            code=ErrorCode.DOCUMENT_UNREADABLE,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def too_large(cls, path: str, size_mb: float, limit_mb: int) -> "DocumentError":
        return cls(
            code=ErrorCode.DOCUMENT_TOO_LARGE,
            message=f"{path} is {size_mb:.1f} MB, limit is {limit_mb} MB",
            details={"path": path, "size_mb": round(size_mb, 2), "limit_mb": limit_mb},
        )

    @classmethod
    def decode_failed(cls, path: str, encoding: str) -> "DocumentError":
        return cls(
            code=ErrorCode.DOCUMENT_DECODE_FAILED,
            message=f"Cannot decode {path} as {encoding}",
            details={"path": path, "encoding": encoding},
        )


class InternalError(TalOutlineError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
