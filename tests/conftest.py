"""Shared test fixtures."""

import pathlib
import shutil
from datetime import datetime, timezone

import pytest

from spaced.models import Context, ReviewOption, SpacingMethod
from spaced.settings import Settings

NOW = datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def tmp_spaced_dir(tmp_path):
    """Create a temporary spaced directory with an algorithms/ subdir."""
    spaced_dir = tmp_path / "spaced_dir"
    (spaced_dir / "algorithms").mkdir(parents=True)

    # Copy the example custom algorithm
    example = (pathlib.Path(__file__).parent.parent / "example_spaced_dir"
               / "algorithms" / "fixed_step.py")
    if example.exists():
        shutil.copy(example, spaced_dir / "algorithms" / "fixed_step.py")

    return spaced_dir


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    """Default settings that are never written to disk."""
    return Settings()


@pytest.fixture
def multi_settings():
    """Three SM-2 methods and two contexts, one active."""
    options = [ReviewOption("Fruitful", 1), ReviewOption("Ignore", 3),
               ReviewOption("Unfruitful", 5)]
    return Settings(
        spacing_methods=[
            SpacingMethod("First", review_options=list(options)),
            SpacingMethod("Second", review_options=list(options), default_interval=3,
                          default_ease=2.0),
            SpacingMethod("Third", review_options=list(options)),
        ],
        contexts=[
            Context("deep", active=True, method="Second"),
            Context("light", active=False, method="Third"),
        ],
    )
