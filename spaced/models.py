"""Shared data classes used across spaced, the store, and algorithms."""

import pathlib
from dataclasses import dataclass, field

# Frontmatter keys read and written by the scheduler.
KEY_INTERVAL = "interval"
KEY_LAST_REVIEWED = "last-reviewed"
KEY_EASE = "ease"
KEY_METHOD = "method"
KEY_CONTEXTS = "contexts"

SM2 = "SuperMemo2.0"
CUSTOM = "custom"


class ConfigError(Exception):
    """Settings cannot support the requested operation."""


class StoreError(Exception):
    """The metadata store failed to read or write a note."""


class _Cancelled:
    def __repr__(self):
        return "CANCELLED"

    def __bool__(self):
        return False


CANCELLED = _Cancelled()


@dataclass
class ReviewOption:
    name: str
    score: float | None = None


@dataclass
class SpacingMethod:
    name: str
    algorithm: str = SM2
    review_options: list[ReviewOption] = field(default_factory=list)
    default_interval: float = 1
    default_ease: float | None = 2.5
    custom_script: str = ""

    def option(self, name: str) -> ReviewOption | None:
        for opt in self.review_options:
            if opt.name == name:
                return opt
        return None


@dataclass
class Context:
    name: str
    active: bool = False
    method: str | None = None


@dataclass
class Note:
    path: str
    metadata: dict = field(default_factory=dict)

    @property
    def title(self) -> str:
        name = pathlib.PurePath(self.path).name
        return name[:-3] if name.endswith(".md") else name

    @property
    def onboarded(self) -> bool:
        return KEY_INTERVAL in self.metadata

    @property
    def contexts(self) -> list[str]:
        return note_contexts(self.metadata)


@dataclass
class Schedule:
    interval: float
    ease: float | None


@dataclass
class Outcome:
    status: str
    message: str = ""
    note: Note | None = None


def note_contexts(metadata: dict) -> list[str]:
    """Context names from metadata; a bare string counts as one context."""
    value = metadata.get(KEY_CONTEXTS)
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]
