"""Tests for spaced.config."""

import pathlib

from spaced.config import get_spaced_dir, parse_frontmatter, update_frontmatter


def test_parse_frontmatter_basic():
    text = "---\nmethod: Daily\ncontexts: [writing, essays]\n---\nFirst draft\nmore"
    meta, body = parse_frontmatter(text)
    assert meta["method"] == "Daily"
    assert meta["contexts"] == ["writing", "essays"]
    assert body.startswith("First draft")


def test_parse_frontmatter_no_frontmatter():
    text = "Just text"
    meta, body = parse_frontmatter(text)
    assert meta == {}
    assert body == "Just text"


def test_parse_frontmatter_unclosed():
    text = "---\nmethod: Daily\nno closing"
    meta, body = parse_frontmatter(text)
    assert meta == {}


def test_parse_frontmatter_quoted_values():
    text = '---\nname: "hello world"\nother: \'x: y\'\n---\nbody'
    meta, body = parse_frontmatter(text)
    assert meta["name"] == "hello world"
    assert meta["other"] == "x: y"


def test_parse_frontmatter_numbers_and_booleans():
    text = "---\ninterval: 2.6\nease: 2\nsuspended: true\n---\nbody"
    meta, body = parse_frontmatter(text)
    assert meta["interval"] == 2.6
    assert meta["ease"] == 2
    assert meta["suspended"] is True


def test_parse_frontmatter_block_list():
    text = "---\ncontexts:\n  - writing\n  - essays\ninterval: 1\n---\nbody"
    meta, body = parse_frontmatter(text)
    assert meta["contexts"] == ["writing", "essays"]
    assert meta["interval"] == 1


def test_parse_frontmatter_timestamp_stays_text():
    text = "---\nlast-reviewed: 2025-01-09T12:00:00Z\n---\n"
    meta, _ = parse_frontmatter(text)
    assert meta["last-reviewed"] == "2025-01-09T12:00:00Z"


def test_update_frontmatter_replaces_and_appends():
    text = "---\ntitle: Essay\ninterval: 1\n---\nBody text\n"
    result = update_frontmatter(text, {"interval": 2.6, "ease": 2.6})
    assert result == "---\ntitle: Essay\ninterval: 2.6\nease: 2.6\n---\nBody text\n"


def test_update_frontmatter_deletes_keys():
    text = "---\ninterval: 1\ncontexts:\n  - a\n  - b\ntitle: Essay\n---\nBody\n"
    result = update_frontmatter(text, {"interval": None, "contexts": None, "ease": None})
    assert result == "---\ntitle: Essay\n---\nBody\n"


def test_update_frontmatter_creates_header():
    result = update_frontmatter("Just text", {"interval": 1})
    assert result == "---\ninterval: 1\n---\nJust text"


def test_update_frontmatter_writes_block_lists():
    result = update_frontmatter("", {"contexts": ["a", "b"]})
    assert "contexts:\n  - a\n  - b\n" in result
    meta, _ = parse_frontmatter(result)
    assert meta["contexts"] == ["a", "b"]


def test_update_frontmatter_keeps_other_lines_verbatim():
    text = "---\naliases:\n  - foo\ntags: [a, b]\ninterval: 1\n---\nBody"
    result = update_frontmatter(text, {"interval": 3})
    assert result == "---\naliases:\n  - foo\ntags: [a, b]\ninterval: 3\n---\nBody"


def test_update_frontmatter_round_trips_values():
    text = update_frontmatter("Body", {
        "last-reviewed": "2025-01-02T03:04:05Z",
        "method": "SuperMemo 2.0 (Simplified)",
        "label": "Daily: focus",
        "count": "42",
        "interval": 1.0,
        "quoted": '"Quick" mode',
        "path": "C:\\notes\\daily",
        "mixed": 'say "hi"\\now',
        "dashed": "-x\\y",
        "names": ['"a"', "b\\c"],
    })
    meta, body = parse_frontmatter(text)
    assert meta["quoted"] == '"Quick" mode'
    assert meta["path"] == "C:\\notes\\daily"
    assert meta["mixed"] == 'say "hi"\\now'
    assert meta["dashed"] == "-x\\y"
    assert meta["names"] == ['"a"', "b\\c"]
    assert meta["last-reviewed"] == "2025-01-02T03:04:05Z"
    assert meta["method"] == "SuperMemo 2.0 (Simplified)"
    assert meta["label"] == "Daily: focus"
    assert meta["count"] == "42"
    assert meta["interval"] == 1
    assert body == "Body"


def test_get_spaced_dir_from_env(monkeypatch, capsys):
    """SPACED_DIR env var is used and a warning is printed."""
    monkeypatch.setenv("SPACED_DIR", "/tmp/test-spaced")
    result = get_spaced_dir()
    assert result == pathlib.Path("/tmp/test-spaced")
    captured = capsys.readouterr()
    assert "SPACED_DIR" in captured.err


def test_get_spaced_dir_from_config(monkeypatch, tmp_path):
    """Falls back to ~/.config/spaced/config DIR= line."""
    monkeypatch.delenv("SPACED_DIR", raising=False)
    config_dir = tmp_path / ".config" / "spaced"
    config_dir.mkdir(parents=True)
    (config_dir / "config").write_text("DIR=/my/spaced/dir\n")
    monkeypatch.setattr(pathlib.Path, "home", lambda: tmp_path)
    assert get_spaced_dir() == pathlib.Path("/my/spaced/dir")


def test_get_spaced_dir_default(monkeypatch, tmp_path):
    monkeypatch.delenv("SPACED_DIR", raising=False)
    monkeypatch.setattr(pathlib.Path, "home", lambda: tmp_path)
    assert get_spaced_dir() == tmp_path / ".local" / "share" / "spaced"
