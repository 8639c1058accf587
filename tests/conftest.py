"""
Pytest configuration for harper-frames.

Provides fixtures for:
- Settings with test-specific overrides
- Representative record batches (multi-series, sparse, conflicting kinds)
- Generated sample files for source and CLI tests
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest

from harper_frames.config import Settings, get_settings
from scripts.generate_samples import _generate_records, _write_records


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    """Make env overrides applied via monkeypatch visible to get_settings()."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by the code under test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.
    """
    return Settings(
        log_level="DEBUG",
        default_key_column="ts",
        default_discriminator="series",
        qualify_columns=True,
        flatten_nested=False,
        max_notices=5,
    )


@pytest.fixture
def series_records() -> List[Dict[str, Any]]:
    """Three samples from two series across two timestamps."""
    return [
        {"ts": 1, "series": "a", "val": 5},
        {"ts": 1, "series": "b", "val": 7},
        {"ts": 2, "series": "a", "val": 9},
    ]


@pytest.fixture
def timed_records() -> List[Dict[str, Any]]:
    """Timestamped samples with sparse attributes, as an analytics API returns them."""
    t0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    t1 = datetime(2024, 1, 1, 12, 1, tzinfo=timezone.utc)
    return [
        {"ts": t1, "series": "cpu0", "load": 0.25, "metric": "cpu"},
        {"ts": t0, "series": "cpu0", "load": 0.5, "metric": "cpu"},
        {"ts": t0, "series": "cpu1", "load": 0.75, "idle": 10, "metric": "cpu"},
        {"ts": t0, "series": "eth0", "rx": 1200, "metric": "network"},
    ]


@pytest.fixture
def samples_file(tmp_path: Path) -> Path:
    """A small generated record file without conflicting samples."""
    path = tmp_path / "records.json"
    _write_records(path, _generate_records(timestamps=5, interval_seconds=10, seed=7))
    return path
