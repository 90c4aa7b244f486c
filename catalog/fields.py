"""Schema-tolerant field access for catalog records.

Records arrive from hand-edited JSON and spreadsheet exports, so the same
logical field can live under several names (``family``, ``"Scent Family"``,
``"Olfactive Family"``...) or inside nested objects (``notes.top``,
``private.builtFrom``). All of that knowledge lives in :data:`FIELD_SPECS`:
each logical field maps to an ordered tuple of accessors, and
:func:`extract_field` returns the first one that resolves to non-empty text.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Mapping, NamedTuple, Sequence, Union

from catalog.utils import coerce_bool, normalize, to_text

Accessor = Union[str, Callable[[Mapping[str, Any]], Any]]

HAYSTACK_SEPARATOR = " | "


def path(*keys: str) -> Callable[[Mapping[str, Any]], Any]:
    """Return an accessor that walks nested mappings along *keys*.

    Any step that is missing or is not a mapping resolves to ``None`` so a
    list-shaped ``notes`` never satisfies ``path("notes", "top")``.
    """

    def accessor(record: Mapping[str, Any]) -> Any:
        current: Any = record
        for key in keys:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
        return current

    accessor.__name__ = "path_" + "_".join(keys)
    return accessor


def _flat_notes(record: Mapping[str, Any]) -> Any:
    notes = record.get("notes")
    if isinstance(notes, (list, tuple, str)):
        return notes
    return None


FIELD_SPECS: Dict[str, Sequence[Accessor]] = {
    "id": ("id", "ID", "Id"),
    "name": ("name", "Name", "Fragrance", "title"),
    "brand": ("brand", "Brand"),
    "house": ("house", "House"),
    "family": ("family", "Scent Family", "Olfactive Family", "scentFamily", "olfactiveFamily"),
    "reference": ("inspiredBy", "Inspired By", "reference", "Reference"),
    "gender": ("gender", "Gender"),
    "concentration": ("concentration", "Concentration"),
    "size": ("size", "Size", "Size (ml)"),
    "tags": ("tags", "Tags"),
    "notes_top": ("notesTop", "Top Notes", "topNotes", "top_notes", path("notes", "top")),
    "notes_heart": (
        "notesHeart",
        "Heart Notes",
        "middleNotes",
        "middle_notes",
        "heartNotes",
        path("notes", "heart"),
        path("notes", "middle"),
    ),
    "notes_base": (
        "notesBase",
        "Base Notes",
        "Bottom Notes",
        "baseNotes",
        "base_notes",
        path("notes", "base"),
    ),
    "notes_all": ("notesText", "Notes", "All Notes", _flat_notes),
    "built_from": (path("private", "builtFrom"), "Built From", "builtFrom", "Components", "components"),
    "owned": ("owned", "Owned"),
    "is_dupe": ("isDupe", "Is Dupe", "dupe"),
    "is_house_original": ("isHouseOriginal", "House Original"),
}


def extract_field(record: Any, candidates: Sequence[Accessor]) -> Any:
    """Return the first candidate value of *record* with non-empty text.

    Candidates are tried in order; a string is looked up as a key and a
    callable is invoked with the record. The raw value is returned (not its
    text), or ``""`` when nothing resolves.
    """

    if not isinstance(record, Mapping):
        return ""

    for candidate in candidates:
        if candidate is None:
            continue
        if callable(candidate):
            value = candidate(record)
        else:
            value = record.get(candidate)
        if value is not None and to_text(value).strip():
            return value
    return ""


def field_text(record: Any, field: str) -> str:
    """Resolve the logical *field* through :data:`FIELD_SPECS` as trimmed text."""

    return to_text(extract_field(record, FIELD_SPECS[field])).strip()


def record_flag(record: Any, field: str) -> bool:
    return coerce_bool(extract_field(record, FIELD_SPECS[field]))


def record_key(record: Any) -> str:
    """Identifier used for per-record metadata: the id, else the normalised name."""

    return field_text(record, "id") or normalize(field_text(record, "name"))


class Notes(NamedTuple):
    top: str
    heart: str
    base: str
    all: str
    has_pyramid: bool


def extract_notes(record: Any) -> Notes:
    """Resolve the note pyramid and the flat note list of *record*.

    ``has_pyramid`` is true when any of top/heart/base is present; callers
    show ``all`` only when it is false.
    """

    top = field_text(record, "notes_top")
    heart = field_text(record, "notes_heart")
    base = field_text(record, "notes_base")
    return Notes(
        top=top,
        heart=heart,
        base=base,
        all=field_text(record, "notes_all"),
        has_pyramid=bool(top or heart or base),
    )


def _note_leaves(value: Any, depth: int = 0) -> Iterator[str]:
    if value is None or depth > 8:
        return
    if isinstance(value, Mapping):
        value = list(value.values())
    if isinstance(value, (list, tuple)):
        for item in value:
            yield from _note_leaves(item, depth + 1)
        return
    for part in to_text(value).split(","):
        part = part.strip()
        if part:
            yield part


def note_list(record: Any) -> List[str]:
    """Return every individually listed note of *record*, deduplicated.

    Covers the pyramid fields, spreadsheet-style columns, flat lists and a
    comma separated ``notes`` string. The first casing seen for a note wins.
    """

    if not isinstance(record, Mapping):
        return []

    sources = [
        extract_field(record, FIELD_SPECS["notes_top"]),
        extract_field(record, FIELD_SPECS["notes_heart"]),
        extract_field(record, FIELD_SPECS["notes_base"]),
        extract_field(record, FIELD_SPECS["notes_all"]),
        record.get("notes"),
    ]

    seen = set()
    notes: List[str] = []
    for source in sources:
        for note in _note_leaves(source):
            key = normalize(note)
            if not key or key in seen:
                continue
            seen.add(key)
            notes.append(note)
    return notes


def build_haystack(record: Any) -> str:
    """Build the normalised, pipe-delimited search text for *record*.

    The private ``builtFrom`` composition is always included: private mode
    decides what is rendered, never what is searchable.
    """

    if not isinstance(record, Mapping):
        return ""

    notes = extract_notes(record)
    parts = [
        extract_field(record, FIELD_SPECS["id"]),
        extract_field(record, FIELD_SPECS["name"]),
        extract_field(record, FIELD_SPECS["brand"]),
        extract_field(record, FIELD_SPECS["house"]),
        extract_field(record, FIELD_SPECS["family"]),
        extract_field(record, FIELD_SPECS["reference"]),
        extract_field(record, FIELD_SPECS["gender"]),
        extract_field(record, FIELD_SPECS["concentration"]),
        extract_field(record, FIELD_SPECS["size"]),
        extract_field(record, FIELD_SPECS["tags"]),
        record.get("notes"),
        notes.top,
        notes.heart,
        notes.base,
        notes.all,
        extract_field(record, FIELD_SPECS["built_from"]),
    ]

    normalized = (normalize(to_text(part)) for part in parts)
    return HAYSTACK_SEPARATOR.join(text for text in normalized if text)
