"""
CLI Configuration

Locates and loads the YAML configuration file for the merkledrop CLI.
Environment variables (MERKLEDROP_* prefix) override file settings.
"""

from __future__ import annotations

from pathlib import Path

from merkledrop.config.runtime import RuntimeConfig


DEFAULT_CONFIG_PATHS = [
    Path("merkledrop.yaml"),
    Path(".merkledrop.yaml"),
    Path.home() / ".config" / "merkledrop" / "config.yaml",
]


def find_config_file() -> Path | None:
    """Return the first existing default config file, if any."""
    for path in DEFAULT_CONFIG_PATHS:
        candidate = path if path.is_absolute() else Path.cwd() / path
        if candidate.exists():
            return candidate
    return None


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file; must exist if given

    Returns:
        Merged configuration
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """# merkledrop configuration
snapshot:
  path: snapshot.json
  page_size: 1000
  primary_source: mainnet
  secondary_source: xdai
  sources:
    mainnet: data/mainnet.json
    xdai: data/xdai.json

audit:
  cap_divisor: 10000
  # Authoritative locked totals per chain, for the advisory cross-check
  authority_totals: {}

logging:
  level: INFO
  file: null
"""
