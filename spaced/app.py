"""App: central object that wires together spaced_dir, settings, store, session."""

import pathlib
from typing import Callable

from spaced.activity_log import ActivityLog
from spaced.config import get_spaced_dir
from spaced.prompts import terminal_prompt
from spaced.session import ReviewSession
from spaced.settings import Settings
from spaced.store import MarkdownStore


class App:
    """Holds all shared state for a spaced session.

    Usage:
        app = App(notes_dir="/path/to/vault")
        outcome = app.session.log_review_outcome("ideas/essay.md")
        head = app.session.next_note().note

    For testing:
        app = App(spaced_dir=tmp_path, notes_dir=tmp_path / "notes",
                  prompt=lambda message, options: options[0])
    """

    def __init__(self, spaced_dir: pathlib.Path | str | None = None,
                 notes_dir: pathlib.Path | str | None = None,
                 prompt: Callable | None = None,
                 notify: Callable[[str], None] | None = print):
        if spaced_dir is None:
            spaced_dir = get_spaced_dir()
        self.spaced_dir = pathlib.Path(spaced_dir)
        self.settings = Settings.load(self.spaced_dir / "settings.json")
        if notes_dir is None:
            notes_dir = self.settings.notes_dir or pathlib.Path.cwd()
        self.notes_dir = pathlib.Path(notes_dir)
        self.store = MarkdownStore(self.notes_dir)
        self.activity_log = ActivityLog(self.settings, self.spaced_dir)
        self.session = ReviewSession(
            self.settings, self.store, prompt or terminal_prompt, notify,
            activity_log=self.activity_log, spaced_dir=self.spaced_dir)
