"""
Pytest configuration and shared fixtures for tincconf tests.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add the parent directory to the path for imports
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tincconf.config import ConfigStore
from tincconf.utils.error_handling import get_error_aggregator


# ===========================================================================
# Temporary Directory Fixtures
# ===========================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    tmpdir = tempfile.mkdtemp(prefix="tincconf_test_")
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def confbase(temp_dir: Path) -> Path:
    """Provide a configuration directory with an empty hosts/ subdirectory."""
    base = temp_dir / "tinc" / "testnet"
    (base / "hosts").mkdir(parents=True)
    return base


@pytest.fixture
def write_config(temp_dir: Path) -> Callable[..., str]:
    """Write text to a file below temp_dir and return its path as a string."""
    def _write(text: str, name: str = "tinc.conf", base: Path = None) -> str:
        path = (base or temp_dir) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return str(path)
    return _write


# ===========================================================================
# Store Fixtures
# ===========================================================================

@pytest.fixture
def store() -> Generator[ConfigStore, None, None]:
    """Provide an empty store that is torn down after the test."""
    with ConfigStore() as s:
        yield s


@pytest.fixture(autouse=True)
def clear_error_aggregator():
    """Start every test with no recorded errors."""
    get_error_aggregator().clear()
    yield
    get_error_aggregator().clear()


# ===========================================================================
# Markers Registration
# ===========================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "security: Security-specific tests")
    config.addinivalue_line("markers", "slow: Slow tests (>1s)")
