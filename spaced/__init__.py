"""spaced: spaced repetition for whole notes."""

__version__ = "0.1.0"

from spaced.models import (CANCELLED, ConfigError, Context, Note, Outcome, ReviewOption,
                           Schedule, SpacingMethod, StoreError)
from spaced.settings import Settings
from spaced.app import App

__all__ = ["App", "CANCELLED", "ConfigError", "Context", "Note", "Outcome", "ReviewOption",
           "Schedule", "Settings", "SpacingMethod", "StoreError"]
