"""Spacing method resolution for a single note."""

from typing import Callable

from spaced.models import KEY_METHOD, SpacingMethod, note_contexts
from spaced.settings import Settings


def candidate_method(metadata: dict, settings: Settings) -> tuple[SpacingMethod, str | None]:
    """Pick the method governing a note without touching the note.

    Returns (method, reason). reason is None when the note already names a
    registered method; otherwise it explains the implicit choice. Raises
    ConfigError when no spacing methods exist.
    """
    stored = settings.get_method(metadata.get(KEY_METHOD))
    if stored is not None:
        return stored, None

    first = settings.first_method()
    contexts = note_contexts(metadata)
    if not contexts:
        return first, f"Note has no contexts, using spacing method '{first.name}'"

    context = settings.get_context(contexts[0])
    if context is not None:
        bound = settings.get_method(context.method)
        if bound is not None:
            return bound, f"Using spacing method '{bound.name}' from context '{context.name}'"
        return first, (f"Context '{context.name}' has no valid spacing method, "
                       f"using '{first.name}'")
    return first, f"Context '{contexts[0]}' is not defined, using spacing method '{first.name}'"


def resolve_method(path: str, metadata: dict, settings: Settings, store,
                   notify: Callable[[str], None] | None = None,
                   batch: dict | None = None) -> SpacingMethod:
    """Resolve the governing method and record it on the note.

    A newly inferred method name is written back so later calls resolve
    through the note's own method field. With batch given, the write is
    added to that pending update instead of being applied immediately.
    """
    method, reason = candidate_method(metadata, settings)
    if reason is None:
        return method
    if batch is not None:
        batch[KEY_METHOD] = method.name
    else:
        store.update(path, {KEY_METHOD: method.name})
        metadata[KEY_METHOD] = method.name
    if notify:
        notify(reason)
    return method
