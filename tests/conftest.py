"""
Pytest configuration and shared fixtures for merkledrop tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import json
import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures import ADDR_AA, ADDR_BB, ADDR_CC, make_records  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def primary_records():
    """Primary feed of the reference scenario."""
    return make_records([(ADDR_AA, 100), (ADDR_BB, 200)])


@pytest.fixture
def secondary_records():
    """Secondary feed of the reference scenario."""
    return make_records([(ADDR_BB, 50), (ADDR_CC, 10)])


@pytest.fixture
def source_files(tmp_path, primary_records, secondary_records):
    """Write both scenario feeds as JSON exports; returns (primary, secondary) paths."""
    primary = tmp_path / "mainnet.json"
    secondary = tmp_path / "xdai.json"
    primary.write_text(json.dumps([r.model_dump() for r in primary_records]))
    # Subgraph shape for the secondary feed
    secondary.write_text(json.dumps([
        {"id": r.address, "amountOwed": r.amount} for r in secondary_records
    ]))
    return primary, secondary


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep MERKLEDROP_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("MERKLEDROP_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
