# config_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any

try:
    import yaml  # PyYAML
except ImportError as e:
    raise SystemExit(
        "Missing dependency: PyYAML\n"
        "Install with: python -m pip install pyyaml"
    ) from e


class RenderConfig:
    """
    Immutable-ish container for HTML renderer configuration.

    The defaults reproduce the plain markup (class names, prefixes) that
    downstream stylesheets expect; only override them deliberately.
    """

    def __init__(
        self,
        *,
        footnote_reference_class: str,
        footnote_definition_class: str,
        footnote_label_class: str,
        code_language_prefix: str,
        mailto_prefix: str,
        trace_events: bool,
    ):
        self.footnote_reference_class = footnote_reference_class
        self.footnote_definition_class = footnote_definition_class
        self.footnote_label_class = footnote_label_class
        self.code_language_prefix = code_language_prefix
        self.mailto_prefix = mailto_prefix
        self.trace_events = trace_events

    def replace(self, **changes: Any) -> "RenderConfig":
        """Return a copy with some fields changed (e.g. trace_events from the CLI)."""
        values = dict(vars(self))
        values.update(changes)
        return RenderConfig(**values)


# ---------------- Defaults ---------------------------------------------------

DEFAULT_CONFIG = RenderConfig(
    footnote_reference_class="footnote-reference",
    footnote_definition_class="footnote-definition",
    footnote_label_class="footnote-definition-label",
    code_language_prefix="language-",
    mailto_prefix="mailto:",
    trace_events=False,
)

_STRING_KEYS = (
    "footnote_reference_class",
    "footnote_definition_class",
    "footnote_label_class",
    "code_language_prefix",
    "mailto_prefix",
)

# ---------------- Loader -----------------------------------------------------


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    return value


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be true or false")
    return value


def config_from_mapping(raw: Any) -> RenderConfig:
    """
    Build a RenderConfig from an already-parsed mapping (None means defaults).
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise TypeError("Config root must be a mapping")

    values: dict[str, Any] = {}
    for key in _STRING_KEYS:
        values[key] = _as_str(raw.get(key, getattr(DEFAULT_CONFIG, key)), key)
    values["trace_events"] = _as_bool(
        raw.get("trace_events", DEFAULT_CONFIG.trace_events),
        "trace_events",
    )
    return RenderConfig(**values)


def load_config(path: Path) -> RenderConfig:
    """
    Load YAML config and return a RenderConfig instance.
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    return config_from_mapping(raw)


def load_config_or_default(path: Path) -> RenderConfig:
    """
    Like load_config(), but a missing file means "use the defaults".
    """
    if not path.exists():
        return DEFAULT_CONFIG
    return load_config(path)
