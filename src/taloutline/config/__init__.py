"""Config module exports."""

from taloutline.config.loader import load_config
from taloutline.config.models import (
    LoggingConfig,
    LogOutputConfig,
    ScanConfig,
    TalOutlineConfig,
    WatchConfig,
)

__all__ = [
    "load_config",
    "LoggingConfig",
    "LogOutputConfig",
    "ScanConfig",
    "TalOutlineConfig",
    "WatchConfig",
]
