"""CLI: command-line interface for spaced."""

import argparse
import pathlib
import sys
import time

from spaced.app import App
from spaced.models import ConfigError, ReviewOption, SpacingMethod
from spaced.queue import due_time_ms
from spaced.timestamps import DAY_MS

_EXIT_CODES = {"ok": 0, "cancelled": 0, "empty": 0, "no_active_contexts": 0,
               "no_contexts": 0, "error": 1}


def _note_path(path: str) -> str:
    return str(pathlib.Path(path).resolve())


def cmd_review(args, app: App) -> int:
    outcome = app.session.log_review_outcome(_note_path(args.path))
    return _EXIT_CODES[outcome.status]


def cmd_onboard(args, app: App) -> int:
    outcome = app.session.onboard(_note_path(args.path))
    return _EXIT_CODES[outcome.status]


def cmd_remove(args, app: App) -> int:
    outcome = app.session.remove(_note_path(args.path))
    return _EXIT_CODES[outcome.status]


def cmd_contexts(args, app: App) -> int:
    outcome = app.session.toggle_contexts(_note_path(args.path))
    return _EXIT_CODES[outcome.status]


def cmd_next(args, app: App) -> int:
    outcome = app.session.next_note()
    if outcome.note is not None:
        print(outcome.note.path)
    return _EXIT_CODES[outcome.status]


def cmd_queue(args, app: App) -> int:
    result = app.session.queue()
    if result.no_active_contexts:
        print("No active contexts")
        return 0
    if not result.notes:
        print("No notes to review, enjoy some fresh air!")
        return 0
    now_ms = time.time() * 1000
    for note in result.notes:
        overdue = (now_ms - due_time_ms(note.metadata, app.settings.timestamp_zone)) / DAY_MS
        print(f"{overdue:8.1f}d overdue  {note.path}")
    return 0


def cmd_methods(args, app: App) -> int:
    settings = app.settings
    if args.action == "list":
        for i, m in enumerate(settings.spacing_methods):
            marker = "*" if i == 0 else " "
            opts = ", ".join(f"{o.name}={o.score}" for o in m.review_options)
            ease = "" if m.default_ease is None else f", ease {m.default_ease}"
            print(f"{marker} {m.name} [{m.algorithm}] interval {m.default_interval}{ease}: {opts}")
    elif args.action == "add":
        options = [_parse_option(o) for o in args.option or []]
        settings.add_method(SpacingMethod(
            name=args.name, algorithm=args.algorithm, review_options=options,
            default_interval=args.interval, default_ease=args.ease,
            custom_script=args.script or ""))
        print(f"Added spacing method: {args.name}")
    elif args.action == "rename":
        settings.rename_method(args.name, args.new_name)
        print(f"Renamed spacing method: {args.name} -> {args.new_name}")
    elif args.action == "delete":
        settings.delete_method(args.name)
        print(f"Deleted spacing method: {args.name}")
    return 0


def _parse_option(text: str) -> ReviewOption:
    if "=" not in text:
        raise ConfigError(f"Review option must look like NAME=SCORE: {text}")
    name, score = text.rsplit("=", 1)
    try:
        return ReviewOption(name.strip(), float(score))
    except ValueError:
        raise ConfigError(f"Review score must be a number from 0 to 5: {text}")


def cmd_context(args, app: App) -> int:
    settings = app.settings
    if args.action == "list":
        if not settings.contexts:
            print("No contexts defined")
        for c in settings.contexts:
            state = "active  " if c.active else "inactive"
            print(f"{state} {c.name} -> {c.method or '(first spacing method)'}")
    elif args.action == "add":
        settings.add_context(args.name, active=args.active, method=args.method)
        print(f"Added context: {args.name}")
    elif args.action == "delete":
        settings.delete_context(args.name)
        print(f"Deleted context: {args.name}")
    elif args.action in ("activate", "deactivate"):
        settings.set_context_active(args.name, args.action == "activate")
        print(f"Context {args.name} {args.action}d")
    elif args.action == "bind":
        settings.bind_context(args.name, args.method)
        print(f"Context {args.name} -> {args.method}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(prog="spaced", description="Spaced repetition for notes")
    parser.add_argument("--notes", help="Notes directory (default: settings notes_dir or cwd)")
    subparsers = parser.add_subparsers(dest="command")

    p_review = subparsers.add_parser("review", help="Log a review outcome (onboards new notes)")
    p_review.add_argument("path")
    p_onboard = subparsers.add_parser("onboard", help="Onboard a note")
    p_onboard.add_argument("path")
    p_remove = subparsers.add_parser("remove", help="Remove a note from scheduling")
    p_remove.add_argument("path")
    p_contexts = subparsers.add_parser("contexts", help="Toggle a note's contexts")
    p_contexts.add_argument("path")
    subparsers.add_parser("next", help="Print the most overdue note")
    subparsers.add_parser("queue", help="Print all due notes, most overdue first")

    p_methods = subparsers.add_parser("methods", help="Manage spacing methods")
    m_sub = p_methods.add_subparsers(dest="action")
    m_sub.add_parser("list")
    m_add = m_sub.add_parser("add")
    m_add.add_argument("name")
    m_add.add_argument("--algorithm", default="SuperMemo2.0", choices=["SuperMemo2.0", "custom"])
    m_add.add_argument("--interval", type=float, default=1)
    m_add.add_argument("--ease", type=float, default=2.5)
    m_add.add_argument("--script", help="Custom algorithm script name")
    m_add.add_argument("--option", action="append", help="Review option NAME=SCORE")
    m_rename = m_sub.add_parser("rename")
    m_rename.add_argument("name")
    m_rename.add_argument("new_name")
    m_delete = m_sub.add_parser("delete")
    m_delete.add_argument("name")

    p_context = subparsers.add_parser("context", help="Manage contexts")
    c_sub = p_context.add_subparsers(dest="action")
    c_sub.add_parser("list")
    c_add = c_sub.add_parser("add")
    c_add.add_argument("name")
    c_add.add_argument("--active", action="store_true")
    c_add.add_argument("--method")
    for action in ("delete", "activate", "deactivate"):
        c_sub.add_parser(action).add_argument("name")
    c_bind = c_sub.add_parser("bind")
    c_bind.add_argument("name")
    c_bind.add_argument("method")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)
    if args.command in ("methods", "context") and not args.action:
        args.action = "list"

    try:
        app = App(notes_dir=args.notes)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if not app.spaced_dir.exists():
        app.spaced_dir.mkdir(parents=True, exist_ok=True)
        print(f"Created spaced directory: {app.spaced_dir}")

    commands = {
        "review": cmd_review,
        "onboard": cmd_onboard,
        "remove": cmd_remove,
        "contexts": cmd_contexts,
        "next": cmd_next,
        "queue": cmd_queue,
        "methods": cmd_methods,
        "context": cmd_context,
    }
    try:
        code = commands[args.command](args, app)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)
