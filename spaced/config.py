"""Configuration helpers: spaced directory discovery and frontmatter parsing."""

import json
import os
import pathlib
import re
import sys

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")


def get_spaced_dir() -> pathlib.Path:
    env_dir = os.environ.get("SPACED_DIR")
    if env_dir:
        print(f"Warning: using SPACED_DIR={env_dir} from environment", file=sys.stderr)
        return pathlib.Path(env_dir)
    config_path = pathlib.Path.home() / ".config" / "spaced" / "config"
    if config_path.exists():
        for line in config_path.read_text().splitlines():
            line = line.strip()
            if line.startswith("DIR="):
                return pathlib.Path(line[4:].strip())
    default = pathlib.Path.home() / ".local" / "share" / "spaced"
    return default


def _parse_scalar(v: str):
    if v.startswith("[") and v.endswith("]"):
        return [x.strip().strip('"').strip("'") for x in v[1:-1].split(",") if x.strip()]
    if v.startswith('"') and v.endswith('"') and len(v) >= 2:
        # written with json.dumps, so escapes decode the same way
        try:
            decoded = json.loads(v)
        except json.JSONDecodeError:
            return v[1:-1]
        return decoded if isinstance(decoded, str) else v[1:-1]
    if v.startswith("'") and v.endswith("'") and len(v) >= 2:
        return v[1:-1]
    if v.lower() == "true":
        return True
    if v.lower() == "false":
        return False
    if _NUMBER_RE.match(v):
        return float(v) if "." in v else int(v)
    return v


def _split_frontmatter(text: str) -> tuple[list[str], str] | None:
    """Split text into header lines and the remainder after the closing fence."""
    if not text.startswith("---"):
        return None
    end = text.find("\n---", 3)
    if end == -1:
        return None
    header = text[3:end].strip("\n")
    lines = header.splitlines() if header.strip() else []
    return lines, text[end + 4:]


def parse_frontmatter(text: str) -> tuple[dict, str]:
    """Parse YAML frontmatter from markdown. Returns (metadata, body)."""
    split = _split_frontmatter(text)
    if split is None:
        return {}, text
    lines, rest = split
    body = rest.strip()
    meta = {}
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if line[:1].isspace() or line.lstrip().startswith("- ") or ":" not in line:
            continue
        k, v = line.split(":", 1)
        k = k.strip()
        v = v.strip()
        if v == "":
            items = []
            while i < len(lines) and lines[i].strip().startswith("-"):
                item = lines[i].strip()[1:].strip()
                items.append(_parse_scalar(item) if item else "")
                i += 1
            meta[k] = [str(x) if not isinstance(x, str) else x for x in items] if items else ""
            continue
        meta[k] = _parse_scalar(v)
    return meta, body


def _format_scalar(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    s = str(value)
    if (s == "" or ": " in s or " #" in s or s[0] in "[]{}\"'&*!|>%@`#,-?"
            or s.strip() != s or s.lower() in ("true", "false", "null", "~")
            or _NUMBER_RE.match(s)):
        return json.dumps(s, ensure_ascii=False)
    return s


def _format_entry(key: str, value) -> list[str]:
    if isinstance(value, (list, tuple)):
        if not value:
            return [f"{key}: []"]
        return [f"{key}:"] + [f"  - {_format_scalar(v)}" for v in value]
    return [f"{key}: {_format_scalar(value)}"]


def update_frontmatter(text: str, updates: dict) -> str:
    """Apply updates to the frontmatter header of text.

    Keys mapped to None are removed. Header lines belonging to keys that
    are not in updates are kept verbatim. A header is created when the
    text has none.
    """
    split = _split_frontmatter(text)
    if split is None:
        lines, rest = [], "\n" + text if text else "\n"
    else:
        lines, rest = split

    # Group header lines into (key, lines) blocks; continuation lines
    # (indented or list items) stay with the key above them.
    blocks: list[list] = []
    for line in lines:
        is_start = (not line[:1].isspace() and not line.startswith("-") and ":" in line)
        if is_start or not blocks:
            key = line.split(":", 1)[0].strip() if is_start else None
            blocks.append([key, [line]])
        else:
            blocks[-1][1].append(line)

    pending = dict(updates)
    out: list[str] = []
    for key, block_lines in blocks:
        if key in pending:
            value = pending.pop(key)
            if value is not None:
                out.extend(_format_entry(key, value))
        else:
            out.extend(block_lines)
    for key, value in pending.items():
        if value is not None:
            out.extend(_format_entry(key, value))

    header = "\n".join(out)
    if header:
        header += "\n"
    if not rest.startswith("\n"):
        rest = "\n" + rest
    return f"---\n{header}---{rest}"
