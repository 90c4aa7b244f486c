"""Command-style query parsing ("dupes of x", "original x", "house original")."""

from __future__ import annotations

from typing import NamedTuple

from catalog.utils import normalize, tokenize

MODE_ALL = "all"
MODE_DUPES_OF = "dupes_of"
MODE_ORIGINAL = "original"
MODE_HOUSE_ONLY = "house_only"

HOUSE_ORIGINAL_PHRASES = frozenset(
    {
        "house original",
        "house:original",
        "house originals",
        "house:originals",
        "my originals",
        "my original",
    }
)
DUPE_PREFIXES = ("dupes of ", "inspired by ", "clones of ", "dupe of ", "clone of ")
ORIGINAL_PREFIXES = ("original ", "og ", "real ")


class QueryIntent(NamedTuple):
    mode: str
    query: str


def _strip_prefix(text: str, prefixes: tuple[str, ...]) -> str | None:
    for prefix in prefixes:
        if text.startswith(prefix):
            return text[len(prefix):].strip()
    return None


def parse_command(raw_query: str | None) -> QueryIntent:
    """Interpret *raw_query* as a filter mode plus the residual search text.

    Matching happens on the normalised query, so commands are case and
    accent insensitive and runs of spaces count as one. House-original
    phrases are checked first, then dupe prefixes, then original prefixes.
    A prefix with nothing after it is not a command: the whole query is
    searched literally instead.
    """

    text = " ".join(tokenize(normalize(raw_query)))

    if text in HOUSE_ORIGINAL_PHRASES:
        return QueryIntent(MODE_HOUSE_ONLY, "")

    for mode, prefixes in ((MODE_DUPES_OF, DUPE_PREFIXES), (MODE_ORIGINAL, ORIGINAL_PREFIXES)):
        residual = _strip_prefix(text, prefixes)
        if residual is None:
            continue
        if residual:
            return QueryIntent(mode, residual)
        break

    return QueryIntent(MODE_ALL, text)
