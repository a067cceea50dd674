"""
Runtime Configuration

Central configuration for snapshot building, auditing and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "MERKLEDROP_"


@dataclass
class SnapshotConfig:
    """Where records come from and where the ledger is written."""
    path: str = "snapshot.json"
    page_size: int = 1000
    primary_source: str = "mainnet"
    secondary_source: str = "xdai"
    # source id -> JSON export path
    sources: dict[str, str] = field(default_factory=dict)


@dataclass
class AuditConfig:
    """Configuration for snapshot audits."""
    cap_divisor: int = 10_000
    # authority name -> authoritative locked total
    authority_totals: dict[str, int] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - MERKLEDROP_SNAPSHOT_PATH: Persisted ledger path
        - MERKLEDROP_PAGE_SIZE: Records per source page
        - MERKLEDROP_PRIMARY_PATH: JSON export of the primary source
        - MERKLEDROP_SECONDARY_PATH: JSON export of the secondary source
        - MERKLEDROP_CAP_DIVISOR: Divisor for the capped total
        - MERKLEDROP_LOG_LEVEL: Log level
        - MERKLEDROP_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        # Snapshot settings
        if os.getenv(f"{ENV_PREFIX}SNAPSHOT_PATH"):
            overrides.setdefault("snapshot", {})["path"] = os.getenv(f"{ENV_PREFIX}SNAPSHOT_PATH")
        if os.getenv(f"{ENV_PREFIX}PAGE_SIZE"):
            overrides.setdefault("snapshot", {})["page_size"] = int(os.getenv(f"{ENV_PREFIX}PAGE_SIZE", "1000"))
        if os.getenv(f"{ENV_PREFIX}PRIMARY_PATH"):
            overrides.setdefault("sources", {})["primary"] = os.getenv(f"{ENV_PREFIX}PRIMARY_PATH")
        if os.getenv(f"{ENV_PREFIX}SECONDARY_PATH"):
            overrides.setdefault("sources", {})["secondary"] = os.getenv(f"{ENV_PREFIX}SECONDARY_PATH")

        # Audit settings
        if os.getenv(f"{ENV_PREFIX}CAP_DIVISOR"):
            overrides.setdefault("audit", {})["cap_divisor"] = int(os.getenv(f"{ENV_PREFIX}CAP_DIVISOR", "10000"))

        # Logging
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls().with_env_overrides()

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        snapshot_data = dict(data.get("snapshot") or {})
        audit_data = dict(data.get("audit") or {})
        logging_data = data.get("logging") or {}

        snapshot_data["sources"] = {
            str(k): str(v) for k, v in (snapshot_data.get("sources") or {}).items()
        }
        audit_data["authority_totals"] = {
            str(k): int(v) for k, v in (audit_data.get("authority_totals") or {}).items()
        }

        return cls(
            snapshot=SnapshotConfig(**snapshot_data),
            audit=AuditConfig(**audit_data),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "snapshot" in overrides:
            for key, value in overrides["snapshot"].items():
                setattr(new_config.snapshot, key, value)

        # Source paths are keyed by role; map them onto the configured source ids
        if "sources" in overrides:
            if "primary" in overrides["sources"]:
                new_config.snapshot.sources[new_config.snapshot.primary_source] = overrides["sources"]["primary"]
            if "secondary" in overrides["sources"]:
                new_config.snapshot.sources[new_config.snapshot.secondary_source] = overrides["sources"]["secondary"]

        if "audit" in overrides:
            for key, value in overrides["audit"].items():
                setattr(new_config.audit, key, value)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "snapshot": {
                "path": self.snapshot.path,
                "page_size": self.snapshot.page_size,
                "primary_source": self.snapshot.primary_source,
                "secondary_source": self.snapshot.secondary_source,
                "sources": dict(self.snapshot.sources),
            },
            "audit": {
                "cap_divisor": self.audit.cap_divisor,
                "authority_totals": dict(self.audit.authority_totals),
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
