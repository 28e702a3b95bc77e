"""Note metadata stores.

A store exposes three operations:

    notes()                 -> list[Note]   every note with its metadata
    read(path)              -> dict         one note's metadata
    update(path, updates)                   apply all updates at once;
                                            a None value deletes the key

All field changes of one scheduling operation go through a single
``update`` call, so a note is never left half-updated.
"""

import copy
import os
import pathlib
import sys
import tempfile

from spaced.config import parse_frontmatter, update_frontmatter
from spaced.models import Note, StoreError


class MemoryStore:
    """In-process store keyed by note path."""

    def __init__(self, notes: dict[str, dict] | None = None):
        self._notes: dict[str, dict] = copy.deepcopy(notes or {})
        self.writes: list[tuple[str, dict]] = []

    def notes(self) -> list[Note]:
        return [Note(path, copy.deepcopy(meta)) for path, meta in self._notes.items()]

    def read(self, path: str) -> dict:
        if path not in self._notes:
            raise StoreError(f"No such note: {path}")
        return copy.deepcopy(self._notes[path])

    def update(self, path: str, updates: dict):
        if path not in self._notes:
            raise StoreError(f"No such note: {path}")
        meta = self._notes[path]
        for key, value in updates.items():
            if value is None:
                meta.pop(key, None)
            else:
                meta[key] = copy.deepcopy(value)
        self.writes.append((path, dict(updates)))


class MarkdownStore:
    """Markdown files under a root directory, metadata in frontmatter."""

    def __init__(self, root: pathlib.Path | str):
        self.root = pathlib.Path(root).resolve()

    def _resolve(self, path: str) -> pathlib.Path:
        p = pathlib.Path(path)
        if not p.is_absolute():
            p = self.root / p
        return p

    def notes(self) -> list[Note]:
        results: list[Note] = []
        self._scan_directory(self.root, results)
        return results

    def _scan_directory(self, dirpath: pathlib.Path, results: list[Note]):
        try:
            entries = sorted(dirpath.iterdir())
        except PermissionError:
            return
        for item in entries:
            if item.is_dir() and not item.name.startswith("."):
                self._scan_directory(item, results)
            elif item.is_file() and item.suffix == ".md":
                try:
                    text = item.read_text()
                except OSError as e:
                    print(f"Warning: cannot read {item}: {e}", file=sys.stderr)
                    continue
                meta, _body = parse_frontmatter(text)
                results.append(Note(str(item), meta))

    def read(self, path: str) -> dict:
        try:
            text = self._resolve(path).read_text()
        except OSError as e:
            raise StoreError(f"cannot read {path}: {e}") from e
        meta, _body = parse_frontmatter(text)
        return meta

    def update(self, path: str, updates: dict):
        target = self._resolve(path)
        try:
            text = target.read_text()
            new_text = update_frontmatter(text, updates)
            fd, tmp = tempfile.mkstemp(dir=str(target.parent), prefix=".spaced-", suffix=".md")
            try:
                with os.fdopen(fd, "w") as f:
                    f.write(new_text)
                os.replace(tmp, target)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            raise StoreError(f"cannot write {path}: {e}") from e
