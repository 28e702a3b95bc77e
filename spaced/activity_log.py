"""Activity log: one JSON object per line for onboard, review and remove actions."""

import json
import pathlib
import sys
from datetime import datetime, timezone

from spaced.models import Note
from spaced.settings import Settings


class ActivityLog:
    def __init__(self, settings: Settings, base_dir: pathlib.Path | None = None):
        self.settings = settings
        self.base_dir = base_dir

    @property
    def path(self) -> pathlib.Path | None:
        if not self.settings.log_file_path:
            return None
        p = pathlib.Path(self.settings.log_file_path)
        if not p.is_absolute() and self.base_dir is not None:
            p = self.base_dir / p
        return p

    def entry(self, action: str, note: Note, review_score: float | None = None,
              new_interval: float | None = None, new_ease: float | None = None) -> dict:
        data = {
            "action": action,
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        }
        if self.settings.log_note_title:
            data["noteTitle"] = note.title
        if self.settings.log_frontmatter_properties:
            data["frontmatter"] = {
                prop: note.metadata[prop]
                for prop in self.settings.log_frontmatter_properties
                if note.metadata.get(prop) not in (None, "", [])
            }
        if review_score is not None:
            data["reviewScore"] = review_score
        if new_interval is not None:
            data["newInterval"] = new_interval
        if new_ease is not None:
            data["newEaseFactor"] = new_ease
        return data

    def log(self, action: str, note: Note, **fields):
        path = self.path
        if path is None:
            return
        if action == "onboarded" and not self.settings.log_onboard_action:
            return
        if action == "removed" and not self.settings.log_remove_action:
            return
        line = json.dumps(self.entry(action, note, **fields)) + "\n"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a") as f:
                f.write(line)
        except OSError as e:
            print(f"Warning: cannot write activity log {path}: {e}", file=sys.stderr)
