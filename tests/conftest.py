"""
ClipCast Test Configuration

Shared fixtures and configuration for all tests.
"""

import os
import random
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator
from zoneinfo import ZoneInfo

import pytest

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from clipcast.config import ClipCastConfig, ServerConfig, StoreConfig
from clipcast.service import ScheduleService
from clipcast.store.memory import MemoryDocumentStore
from tests.fixtures.factories import StoreFactory

TOKYO = ZoneInfo("Asia/Tokyo")


# ============ Time Fixtures ============


@pytest.fixture
def tz() -> ZoneInfo:
    """Reference timezone used by the default configuration."""
    return TOKYO


@pytest.fixture
def day_start() -> datetime:
    """Midnight of a fixed reference day."""
    return datetime(2024, 3, 1, tzinfo=TOKYO)


# ============ Randomness Fixtures ============


@pytest.fixture
def rng() -> random.Random:
    """Seeded generator so failures reproduce."""
    return random.Random(1234)


# ============ Store Fixtures ============


@pytest.fixture
def empty_store() -> MemoryDocumentStore:
    """Store with no corpus at all."""
    return MemoryDocumentStore()


@pytest.fixture
def small_store() -> MemoryDocumentStore:
    """500 five-minute clips."""
    return StoreFactory.memory(500, timedelta(minutes=5))


@pytest.fixture
def large_store() -> MemoryDocumentStore:
    """2000 five-minute clips, enough for the default initial pool."""
    return StoreFactory.memory(2000, timedelta(minutes=5))


@pytest.fixture
def service(small_store: MemoryDocumentStore) -> ScheduleService:
    """Schedule service with a seeded generator per run."""
    seeds = iter(range(1000))
    return ScheduleService(small_store, rng_factory=lambda: random.Random(next(seeds)))


# ============ Config Fixtures ============


@pytest.fixture
def develop_config() -> ClipCastConfig:
    """Configuration with develop mode on and an in-memory store."""
    return ClipCastConfig(
        server=ServerConfig(develop=True),
        store=StoreConfig(backend="memory"),
    )


# ============ Temporary File Fixtures ============


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_file = temp_dir / "config.yaml"
    config_content = """
server:
  host: "127.0.0.1"
  port: 9090
  develop: true

store:
  backend: "memory"

sampler:
  window_size: 50
  fetch_budget: 1000

timeline:
  timezone: "UTC"
  max_clip_minutes: 20

logging:
  level: "DEBUG"
"""
    config_file.write_text(config_content)
    return config_file


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables for each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("CLIPCAST_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


# ============ Markers ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
