"""Settings: spacing method and context registries, persisted as JSON.

Every edit operation writes the whole settings file back. Usage:

    settings = Settings.load(spaced_dir / "settings.json")
    settings.add_context("writing", active=True, method="Daily")
"""

import dataclasses
import json
import pathlib
import sys

from spaced.models import SM2, ConfigError, Context, ReviewOption, SpacingMethod

TIMESTAMP_ZONES = ("utc", "local")


def default_spacing_methods() -> list[SpacingMethod]:
    return [SpacingMethod(
        name="SuperMemo 2.0 (Simplified)",
        algorithm=SM2,
        review_options=[
            ReviewOption("Fruitful", 1),
            ReviewOption("Ignore", 3),
            ReviewOption("Unfruitful", 5),
        ],
        default_interval=1,
        default_ease=2.5,
    )]


def _require_name(d, kind: str) -> str:
    if not isinstance(d, dict) or not str(d.get("name") or "").strip():
        raise ConfigError(f"{kind} entry has no name: {d!r}")
    return str(d["name"])


def _number_field(value, what: str, allow_none: bool = False) -> float | None:
    if value is None and allow_none:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"{what} must be a number, got {value!r}")
    try:
        return value if isinstance(value, (int, float)) else float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{what} must be a number, got {value!r}") from None


def _option_from_dict(method_name: str, d) -> ReviewOption:
    name = _require_name(d, f"Review option of '{method_name}'")
    option = ReviewOption(name, _number_field(
        d.get("score"), f"Score of review option '{name}'", allow_none=True))
    _check_score(option)
    return option


def _method_from_dict(d) -> SpacingMethod:
    name = _require_name(d, "Spacing method")
    return SpacingMethod(
        name=name,
        algorithm=d.get("algorithm", SM2),
        review_options=[_option_from_dict(name, o) for o in d.get("review_options", [])],
        default_interval=_number_field(d.get("default_interval", 1),
                                       f"default_interval of '{name}'"),
        default_ease=_number_field(d.get("default_ease"), f"default_ease of '{name}'",
                                   allow_none=True),
        custom_script=d.get("custom_script") or "",
    )


def _context_from_dict(d) -> Context:
    return Context(name=_require_name(d, "Context"), active=bool(d.get("active", False)),
                   method=d.get("method"))


@dataclasses.dataclass
class Settings:
    spacing_methods: list[SpacingMethod] = dataclasses.field(default_factory=default_spacing_methods)
    contexts: list[Context] = dataclasses.field(default_factory=list)
    timestamp_zone: str = "utc"
    notes_dir: str = ""
    log_file_path: str = ""
    log_onboard_action: bool = True
    log_remove_action: bool = True
    log_note_title: bool = True
    log_frontmatter_properties: list[str] = dataclasses.field(default_factory=list)
    path: pathlib.Path | None = dataclasses.field(default=None, compare=False, repr=False)

    @classmethod
    def load(cls, path: pathlib.Path | str) -> "Settings":
        """Load settings from path, filling missing keys with defaults."""
        path = pathlib.Path(path)
        settings = cls(path=path)
        if not path.exists():
            return settings
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise ConfigError(f"cannot parse {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"cannot parse {path}: expected a JSON object")
        if "spacing_methods" in data:
            settings.spacing_methods = [_method_from_dict(m) for m in data["spacing_methods"]]
        if "contexts" in data:
            settings.contexts = [_context_from_dict(c) for c in data["contexts"]]
        for key in ("timestamp_zone", "notes_dir", "log_file_path", "log_onboard_action",
                    "log_remove_action", "log_note_title", "log_frontmatter_properties"):
            if key in data:
                setattr(settings, key, data[key])
        if settings.timestamp_zone not in TIMESTAMP_ZONES:
            print(f"Warning: unknown timestamp_zone '{settings.timestamp_zone}', using utc",
                  file=sys.stderr)
            settings.timestamp_zone = "utc"
        return settings

    def to_dict(self) -> dict:
        d = dataclasses.asdict(self)
        d.pop("path")
        return d

    def save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(self.to_dict(), indent=2) + "\n")
        tmp.replace(self.path)

    # ─── Spacing methods ────────────────────────────────────────────────

    def get_method(self, name: str | None) -> SpacingMethod | None:
        if not name:
            return None
        for method in self.spacing_methods:
            if method.name == name:
                return method
        return None

    def first_method(self) -> SpacingMethod:
        if not self.spacing_methods:
            raise ConfigError("No spacing methods are configured")
        return self.spacing_methods[0]

    def _require_method(self, name: str) -> SpacingMethod:
        method = self.get_method(name)
        if method is None:
            raise ConfigError(f"Unknown spacing method: {name}")
        return method

    def add_method(self, method: SpacingMethod) -> SpacingMethod:
        if not method.name.strip():
            method.name = f"Spacing method - #{len(self.spacing_methods) + 1}"
        if self.get_method(method.name):
            raise ConfigError(f"Spacing method already exists: {method.name}")
        for opt in method.review_options:
            _check_score(opt)
        self.spacing_methods.append(method)
        self.save()
        return method

    def rename_method(self, old: str, new: str):
        """Rename a method and repoint every context bound to the old name."""
        method = self._require_method(old)
        new = new.strip()
        if not new:
            raise ConfigError("Spacing method name cannot be empty")
        if new != old and self.get_method(new):
            raise ConfigError(f"Spacing method already exists: {new}")
        method.name = new
        for context in self.contexts:
            if context.method == old:
                context.method = new
        self.save()

    def delete_method(self, name: str):
        method = self._require_method(name)
        if len(self.spacing_methods) == 1:
            raise ConfigError("Cannot delete the last spacing method")
        self.spacing_methods.remove(method)
        self.save()

    def set_review_options(self, name: str, options: list[ReviewOption]):
        method = self._require_method(name)
        for opt in options:
            _check_score(opt)
        method.review_options = list(options)
        self.save()

    # ─── Contexts ───────────────────────────────────────────────────────

    def get_context(self, name: str) -> Context | None:
        for context in self.contexts:
            if context.name == name:
                return context
        return None

    def _require_context(self, name: str) -> Context:
        context = self.get_context(name)
        if context is None:
            raise ConfigError(f"Unknown context: {name}")
        return context

    def active_context_names(self) -> list[str]:
        return [c.name for c in self.contexts if c.active]

    def add_context(self, name: str, active: bool = False, method: str | None = None) -> Context:
        name = name.strip()
        if not name:
            raise ConfigError("Context name cannot be empty")
        if self.get_context(name):
            raise ConfigError(f"Context already exists: {name}")
        if method is None and self.spacing_methods:
            method = self.spacing_methods[0].name
        elif method is not None:
            self._require_method(method)
        context = Context(name=name, active=active, method=method)
        self.contexts.append(context)
        self.save()
        return context

    def delete_context(self, name: str):
        self.contexts.remove(self._require_context(name))
        self.save()

    def set_context_active(self, name: str, active: bool):
        self._require_context(name).active = active
        self.save()

    def bind_context(self, name: str, method: str | None):
        context = self._require_context(name)
        if method is not None:
            self._require_method(method)
        context.method = method
        self.save()


def _check_score(option: ReviewOption):
    if option.score is None:
        return
    if not 0 <= option.score <= 5:
        raise ConfigError(f"Review score must be a number from 0 to 5: {option.name}")
