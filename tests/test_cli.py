"""Tests for CLI argument parsing and command dispatch."""

import json
from unittest.mock import MagicMock, patch

import pytest

from spaced.cli import main
from spaced.config import parse_frontmatter
from spaced.models import Outcome


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Point SPACED_DIR at a temp dir and return (spaced_dir, notes_dir)."""
    spaced_dir = tmp_path / "spaced"
    notes_dir = tmp_path / "notes"
    notes_dir.mkdir()
    monkeypatch.setenv("SPACED_DIR", str(spaced_dir))
    return spaced_dir, notes_dir


def _run(*argv):
    with pytest.raises(SystemExit) as exc:
        main(list(argv))
    return exc.value.code


def test_no_command_prints_help(capsys):
    assert _run() == 1
    assert "usage:" in capsys.readouterr().out.lower()


def test_methods_list_marks_default(env, capsys):
    assert _run("methods") == 0
    out = capsys.readouterr().out
    assert "* SuperMemo 2.0 (Simplified) [SuperMemo2.0]" in out
    assert "Unfruitful=5" in out


def test_methods_add_and_rename(env, capsys):
    spaced_dir, _ = env
    assert _run("methods", "add", "Daily", "--interval", "2", "--option", "Again=0",
                "--option", "Good=4") == 0
    assert _run("context", "add", "writing", "--active", "--method", "Daily") == 0
    assert _run("methods", "rename", "Daily", "Everyday") == 0
    data = json.loads((spaced_dir / "settings.json").read_text())
    names = [m["name"] for m in data["spacing_methods"]]
    assert names == ["SuperMemo 2.0 (Simplified)", "Everyday"]
    assert data["spacing_methods"][1]["review_options"] == [
        {"name": "Again", "score": 0.0}, {"name": "Good", "score": 4.0}]
    assert data["contexts"] == [{"name": "writing", "active": True, "method": "Everyday"}]


def test_delete_last_method_fails(env, capsys):
    assert _run("methods", "delete", "SuperMemo 2.0 (Simplified)") == 1
    assert "Error: Cannot delete the last spacing method" in capsys.readouterr().err


def test_bad_option_fails(env, capsys):
    assert _run("methods", "add", "Daily", "--option", "Good") == 1
    assert "NAME=SCORE" in capsys.readouterr().err


def test_context_lifecycle(env, capsys):
    assert _run("context", "add", "reading") == 0
    assert _run("context", "activate", "reading") == 0
    capsys.readouterr()
    assert _run("context") == 0
    assert "active   reading -> SuperMemo 2.0 (Simplified)" in capsys.readouterr().out
    assert _run("context", "delete", "reading") == 0
    capsys.readouterr()
    assert _run("context", "list") == 0
    assert "No contexts defined" in capsys.readouterr().out


def test_next_with_empty_notes_dir(env, capsys):
    _, notes_dir = env
    assert _run("--notes", str(notes_dir), "next") == 0
    assert "No notes to review" in capsys.readouterr().out


def test_review_flow(env, monkeypatch, capsys):
    _, notes_dir = env
    note = notes_dir / "essay.md"
    note.write_text("Body\n")

    assert _run("--notes", str(notes_dir), "review", str(note)) == 0
    meta, body = parse_frontmatter(note.read_text())
    assert meta["interval"] == 1
    assert meta["method"] == "SuperMemo 2.0 (Simplified)"
    assert body == "Body"
    assert "Onboarded note: essay" in capsys.readouterr().out

    monkeypatch.setattr("builtins.input", lambda prompt="": "3")
    assert _run("--notes", str(notes_dir), "review", str(note)) == 0
    meta, _ = parse_frontmatter(note.read_text())
    assert meta["interval"] == 2.6
    assert meta["ease"] == 2.6
    assert "Interval updated from 1 to 2.6" in capsys.readouterr().out


def test_queue_lists_due_notes(env, capsys):
    _, notes_dir = env
    (notes_dir / "old.md").write_text(
        "---\ninterval: 1\nlast-reviewed: 2020-01-01T00:00:00Z\n---\n")
    (notes_dir / "fresh.md").write_text("no header\n")
    assert _run("--notes", str(notes_dir), "queue") == 0
    out = capsys.readouterr().out
    assert "d overdue" in out
    assert "old.md" in out
    assert "fresh.md" not in out


def test_bad_settings_file(env, capsys):
    spaced_dir, _ = env
    spaced_dir.mkdir()
    (spaced_dir / "settings.json").write_text("{not json")
    assert _run("methods") == 1
    assert "Error: cannot parse" in capsys.readouterr().err


def test_review_dispatches_resolved_path(tmp_path):
    note = tmp_path / "essay.md"
    with patch("spaced.cli.App") as MockApp:
        mock_app = MagicMock()
        MockApp.return_value = mock_app
        mock_app.session.log_review_outcome.return_value = Outcome("cancelled")
        assert _run("--notes", str(tmp_path), "review", str(note)) == 0
        MockApp.assert_called_once_with(notes_dir=str(tmp_path))
        mock_app.session.log_review_outcome.assert_called_once_with(str(note.resolve()))


def test_error_outcome_exit_code(tmp_path):
    with patch("spaced.cli.App") as MockApp:
        mock_app = MagicMock()
        MockApp.return_value = mock_app
        mock_app.session.remove.return_value = Outcome("error", "Error: boom")
        assert _run("remove", str(tmp_path / "x.md")) == 1


def test_settings_entry_without_name(env, capsys):
    spaced_dir, _ = env
    spaced_dir.mkdir()
    (spaced_dir / "settings.json").write_text(
        json.dumps({"spacing_methods": [{"algorithm": "SuperMemo2.0"}]}))
    assert _run("methods") == 1
    assert "Error: Spacing method entry has no name" in capsys.readouterr().err
