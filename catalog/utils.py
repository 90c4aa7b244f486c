"""Text helpers shared by the catalog search pipeline."""

from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, List, Mapping

Record = Dict[str, Any]

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")

# Catalog documents are data, not cycles, but a pathological export should
# still not blow the interpreter stack.
MAX_TEXT_DEPTH = 32


def normalize(value: Any) -> str:
    """Lower-case *value*, strip accents and surrounding whitespace.

    ``None`` becomes an empty string. "Café" and "cafe" normalise to the same
    text, and applying the function twice changes nothing.
    """

    if value is None:
        return ""
    text = value if isinstance(value, str) else _scalar_text(value)
    decomposed = unicodedata.normalize("NFD", text.lower())
    return _COMBINING_MARKS.sub("", decomposed).strip()


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_text(value: Any, _depth: int = 0) -> str:
    """Flatten *value* into display text.

    Lists are joined with ``", "`` after dropping empty parts, mappings
    contribute their values in insertion order (keys are dropped), and any
    other scalar is coerced with ``str``.
    """

    if value is None:
        return ""

    if isinstance(value, (list, tuple, Mapping)):
        if _depth >= MAX_TEXT_DEPTH:
            return ""
        items = value.values() if isinstance(value, Mapping) else value
        parts = (to_text(item, _depth + 1) for item in items)
        return ", ".join(part for part in parts if part)

    if isinstance(value, str):
        return value

    return _scalar_text(value)


def tokenize(text: str) -> List[str]:
    """Split already-normalised *text* on runs of whitespace."""

    return [token for token in _WHITESPACE.split(text) if token]


def coerce_bool(value: Any) -> bool:
    """Coerce truthy strings and numbers into booleans."""

    if isinstance(value, bool):
        return value

    if isinstance(value, (int, float)):
        return value != 0

    if isinstance(value, str):
        normalized = value.strip().lower()
        return normalized in {"true", "yes", "y", "1", "owned", "x"}

    return False


def parse_flag(value: str | None) -> bool:
    """Interpret a query-string checkbox value such as ``?owned=true``."""

    if value is None:
        return False
    return value.strip().lower() in {"true", "1", "yes", "on"}
