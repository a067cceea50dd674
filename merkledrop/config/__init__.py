"""
Runtime Configuration Module

Provides configuration loading and management for merkledrop.
"""

from .runtime import (
    AuditConfig,
    LoggingConfig,
    RuntimeConfig,
    SnapshotConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "AuditConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "SnapshotConfig",
    "get_default_config",
    "set_default_config",
]
