"""Due-queue building: context filtering, due checks, ordering."""

import sys
import time
from dataclasses import dataclass, field
from datetime import datetime

from spaced.models import KEY_INTERVAL, KEY_LAST_REVIEWED, Note
from spaced.settings import Settings
from spaced.timestamps import DAY_MS, to_epoch_ms


@dataclass
class QueueResult:
    notes: list[Note] = field(default_factory=list)
    no_active_contexts: bool = False

    @property
    def head(self) -> Note | None:
        return self.notes[0] if self.notes else None


def filter_by_context(notes: list[Note], settings: Settings) -> list[Note] | None:
    """Notes that pass the context filter, or None when no context is active."""
    if not settings.contexts:
        return list(notes)
    active = set(settings.active_context_names())
    if not active:
        return None
    return [n for n in notes
            if not n.contexts or any(c in active for c in n.contexts)]


def last_reviewed_ms(metadata: dict, default_zone: str = "utc") -> float:
    """Last review time in epoch milliseconds; 0 when never reviewed."""
    value = metadata.get(KEY_LAST_REVIEWED)
    if value in (None, ""):
        return 0
    try:
        return to_epoch_ms(value, default_zone)
    except (ValueError, TypeError):
        print(f"Warning: unreadable {KEY_LAST_REVIEWED} value {value!r}, treating as never reviewed",
              file=sys.stderr)
        return 0


def due_time_ms(metadata: dict, default_zone: str = "utc") -> float | None:
    """When the note falls due, or None when it is not onboarded."""
    if KEY_INTERVAL not in metadata:
        return None
    try:
        interval = float(metadata[KEY_INTERVAL])
    except (ValueError, TypeError):
        print(f"Warning: invalid {KEY_INTERVAL} value {metadata[KEY_INTERVAL]!r}", file=sys.stderr)
        return None
    return last_reviewed_ms(metadata, default_zone) + interval * DAY_MS


def build_queue(notes: list[Note], settings: Settings,
                now: datetime | None = None) -> QueueResult:
    """Due notes in ascending due-time order, most overdue first.

    Ties keep input order. Recomputed from scratch on every call.
    """
    candidates = filter_by_context(notes, settings)
    if candidates is None:
        return QueueResult(no_active_contexts=True)

    now_ms = now.timestamp() * 1000 if now is not None else time.time() * 1000
    due: list[tuple[float, Note]] = []
    for note in candidates:
        when = due_time_ms(note.metadata, settings.timestamp_zone)
        if when is not None and now_ms > when:
            due.append((when, note))
    due.sort(key=lambda pair: pair[0])
    return QueueResult(notes=[note for _, note in due])
