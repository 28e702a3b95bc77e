"""ReviewSession: note lifecycle operations independent of any UI.

Every public operation returns an Outcome instead of raising. Prompts are
callables ``prompt(message, options) -> str | CANCELLED``; notifications
go to ``notify(message)``.
"""

import pathlib
import sys
from datetime import datetime, timezone
from typing import Callable

from spaced.activity_log import ActivityLog
from spaced.algorithms import load_algorithm
from spaced.models import (CANCELLED, KEY_CONTEXTS, KEY_EASE, KEY_INTERVAL, KEY_LAST_REVIEWED,
                           KEY_METHOD, ConfigError, Note, Outcome, Schedule, StoreError,
                           note_contexts)
from spaced.queue import QueueResult, build_queue
from spaced.resolver import candidate_method, resolve_method
from spaced.settings import Settings
from spaced.timestamps import format_timestamp

REMOVE_OPTION = "Remove"
DONE_OPTION = "Done"
CHECKED = "☑"
UNCHECKED = "☐"

NOTHING_DUE = "No notes to review, enjoy some fresh air!"
NO_ACTIVE_CONTEXTS = "No active contexts"


def _number(value) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _fmt(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def _cancelled(choice) -> bool:
    return choice is CANCELLED or choice is None


class ReviewSession:
    def __init__(self, settings: Settings, store, prompt: Callable,
                 notify: Callable[[str], None] | None = None,
                 activity_log: ActivityLog | None = None,
                 spaced_dir: pathlib.Path | None = None,
                 now_fn: Callable[[], datetime] | None = None):
        self.settings = settings
        self.store = store
        self.prompt = prompt
        self._notify = notify
        self.activity_log = activity_log or ActivityLog(settings, spaced_dir)
        self.spaced_dir = spaced_dir
        self._now = now_fn or (lambda: datetime.now(timezone.utc))

    def notify(self, message: str):
        if self._notify:
            self._notify(message)

    def _guard(self, fn, *args) -> Outcome:
        try:
            return fn(*args)
        except ConfigError as e:
            message = f"Error: {e}"
            self.notify(message)
            return Outcome("error", message)
        except StoreError as e:
            print(f"Warning: {e}", file=sys.stderr)
            message = f"Error: {e}"
            self.notify(message)
            return Outcome("error", message)

    def _finish(self, status: str, message: str, note: Note | None = None) -> Outcome:
        self.notify(message)
        return Outcome(status, message, note)

    # ─── Queue ──────────────────────────────────────────────────────────

    def queue(self) -> QueueResult:
        return build_queue(self.store.notes(), self.settings, self._now())

    def next_note(self) -> Outcome:
        return self._guard(self._next_note)

    def _next_note(self) -> Outcome:
        result = self.queue()
        if result.no_active_contexts:
            return self._finish("no_active_contexts", NO_ACTIVE_CONTEXTS)
        if result.head is None:
            return self._finish("empty", NOTHING_DUE)
        return Outcome("ok", f"Next review: {result.head.title}", result.head)

    # ─── Resolution ─────────────────────────────────────────────────────

    def resolve(self, path: str):
        """Resolve and record the governing spacing method of a note."""
        meta = self.store.read(path)
        return resolve_method(path, meta, self.settings, self.store, self.notify)

    # ─── Lifecycle ──────────────────────────────────────────────────────

    def log_review_outcome(self, path: str) -> Outcome:
        """Review an onboarded note; onboard it otherwise."""
        return self._guard(self._log_review_outcome, path)

    def _log_review_outcome(self, path: str) -> Outcome:
        meta = self.store.read(path)
        if KEY_INTERVAL in meta:
            return self._review(path, meta)
        return self._onboard(path, meta)

    def onboard(self, path: str) -> Outcome:
        return self._guard(lambda: self._onboard(path, self.store.read(path)))

    def review(self, path: str) -> Outcome:
        return self._guard(lambda: self._review(path, self.store.read(path)))

    def remove(self, path: str) -> Outcome:
        return self._guard(lambda: self._remove(path, self.store.read(path)))

    def toggle_contexts(self, path: str) -> Outcome:
        return self._guard(lambda: self._toggle_contexts(path, self.store.read(path)))

    def _select_contexts(self, current: list[str]) -> list[str] | object:
        """Toggle loop over registered contexts, ended by Done.

        Returns the selected names or CANCELLED.
        """
        selected = list(current)
        while True:
            options = [f"{CHECKED if c.name in selected else UNCHECKED} {c.name}"
                       for c in self.settings.contexts] + [DONE_OPTION]
            choice = self.prompt("Select contexts for this note:", options)
            if _cancelled(choice):
                return CANCELLED
            if choice == DONE_OPTION:
                return selected
            name = choice[2:]
            if name in selected:
                selected.remove(name)
            else:
                selected.append(name)

    def _onboard(self, path: str, meta: dict) -> Outcome:
        current = note_contexts(meta)
        contexts = current
        if self.settings.contexts:
            contexts = self._select_contexts(current)
            if contexts is CANCELLED:
                return self._finish("cancelled", "Onboarding cancelled by user")

        candidate, reason = candidate_method({**meta, KEY_CONTEXTS: contexts}, self.settings)
        if len(self.settings.spacing_methods) > 1:
            names = [candidate.name] + [m.name for m in self.settings.spacing_methods
                                        if m.name != candidate.name]
            choice = self.prompt("Select a spacing method for this note:", names)
            if _cancelled(choice):
                return self._finish("cancelled", "Onboarding cancelled by user")
            method = self.settings.get_method(choice)
            if method is None:
                raise ConfigError(f"Unknown spacing method: {choice}")
        else:
            method = candidate
            if reason:
                self.notify(reason)

        updates = {
            KEY_INTERVAL: method.default_interval,
            KEY_LAST_REVIEWED: format_timestamp(self._now()),
            KEY_METHOD: method.name,
        }
        if method.default_ease is not None:
            updates[KEY_EASE] = method.default_ease
        if contexts != current:
            updates[KEY_CONTEXTS] = contexts if contexts else None
        self.store.update(path, updates)

        note = Note(path, {**meta, **{k: v for k, v in updates.items() if v is not None}})
        self.activity_log.log("onboarded", note)
        return self._finish("ok", f"Onboarded note: {note.title}", note)

    def _review(self, path: str, meta: dict) -> Outcome:
        if KEY_INTERVAL not in meta:
            raise ConfigError(f"Note is not onboarded: {path}")
        batch: dict = {}
        method = resolve_method(path, meta, self.settings, self.store, self.notify, batch=batch)

        options = [o.name for o in method.review_options] + [REMOVE_OPTION]
        choice = self.prompt("Select review outcome:", options)
        if _cancelled(choice):
            return self._finish("cancelled", "Review cancelled by user")
        if choice == REMOVE_OPTION:
            return self._remove(path, meta)

        option = method.option(choice)
        if option is None:
            raise ConfigError("Review option not found in settings. Please check your settings.")
        if option.score is None:
            raise ConfigError("Review option score is not set in settings. Please set a score "
                              f"for the selected review option: {option.name}")

        algorithm = load_algorithm(method, self.spaced_dir)
        prior_interval = _number(meta.get(KEY_INTERVAL))
        if prior_interval is None:
            prior_interval = method.default_interval
        prior_ease = _number(meta.get(KEY_EASE))
        if prior_ease is None:
            prior_ease = method.default_ease
        try:
            result = algorithm.compute(Schedule(prior_interval, prior_ease), option.score, method)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        except Exception as e:
            raise ConfigError(f"Spacing algorithm failed for '{method.name}': {e}") from e
        if _number(getattr(result, "interval", None)) is None:
            raise ConfigError(f"Spacing algorithm for '{method.name}' returned no interval")

        batch[KEY_INTERVAL] = result.interval
        batch[KEY_LAST_REVIEWED] = format_timestamp(self._now())
        if result.ease is not None:
            batch[KEY_EASE] = result.ease
        self.store.update(path, batch)

        note = Note(path, {**meta, **batch})
        self.activity_log.log("review", note, review_score=option.score,
                              new_interval=result.interval, new_ease=result.ease)
        return self._finish("ok", f"Interval updated from {_fmt(prior_interval)} "
                                  f"to {_fmt(result.interval)}", note)

    def _remove(self, path: str, meta: dict) -> Outcome:
        updates = {KEY_INTERVAL: None, KEY_EASE: None, KEY_LAST_REVIEWED: None,
                   KEY_CONTEXTS: None, KEY_METHOD: None}
        self.store.update(path, updates)
        note = Note(path, meta)
        self.activity_log.log("removed", note)
        return self._finish("ok", f"Removed note: {note.title}", Note(path, {
            k: v for k, v in meta.items() if k not in updates}))

    def _toggle_contexts(self, path: str, meta: dict) -> Outcome:
        if not self.settings.contexts:
            return self._finish("no_contexts", "No contexts defined")
        current = note_contexts(meta)
        options = [f"{CHECKED if c.name in current else UNCHECKED} {c.name}"
                   for c in self.settings.contexts]
        choice = self.prompt("Select contexts for this note:", options)
        if _cancelled(choice):
            return self._finish("cancelled", "Context selection cancelled by user")
        name = choice[2:]
        updated = [c for c in current if c != name]
        if name not in current:
            updated.append(name)
        self.store.update(path, {KEY_CONTEXTS: updated})
        return self._finish("ok", f"Contexts: {', '.join(updated) or '(none)'}",
                            Note(path, {**meta, KEY_CONTEXTS: updated}))
