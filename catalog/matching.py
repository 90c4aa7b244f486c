"""Filtering, ranking and matched-note metadata for grouped queries."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Iterable, List, Sequence, Union

from pyuca import Collator

from catalog.commands import MODE_DUPES_OF, MODE_HOUSE_ONLY, MODE_ORIGINAL
from catalog.expansions import TermGroup
from catalog.fields import build_haystack, field_text, note_list, record_flag
from catalog.utils import Record, normalize

Group = Union[TermGroup, Sequence[str]]

MAX_MATCHED_NOTES = int(os.environ.get("MAX_MATCHED_NOTES", "8"))


def _alternatives(group: Group) -> Sequence[str]:
    return group.alternatives if isinstance(group, TermGroup) else group


def match_groups(haystack: str, groups: Iterable[Group]) -> bool:
    """True when every group has at least one alternative inside *haystack*.

    OR within a group, AND across groups; no groups matches everything.
    """

    return all(
        any(alternative in haystack for alternative in _alternatives(group))
        for group in groups
    )


def record_matches(
    record: Any,
    mode: str,
    groups: Sequence[Group],
    owned_only: bool = False,
    dupes_only: bool = False,
) -> bool:
    """Apply the checkbox filters and the command *mode* to one record."""

    if owned_only and not record_flag(record, "owned"):
        return False
    if dupes_only and not record_flag(record, "is_dupe"):
        return False

    if mode == MODE_HOUSE_ONLY:
        return record_flag(record, "is_house_original")

    if mode == MODE_DUPES_OF:
        # Scoped to what the record says it is inspired by.
        if not record_flag(record, "is_dupe"):
            return False
        return match_groups(normalize(field_text(record, "reference")), groups)

    if mode == MODE_ORIGINAL and record_flag(record, "is_dupe"):
        return False

    if not groups:
        return True

    return match_groups(build_haystack(record), groups)


@lru_cache(maxsize=None)
def _collator() -> Collator:
    # Parses the bundled DUCET table; one instance per process.
    return Collator()


def rank_records(records: Iterable[Record]) -> List[Record]:
    """Sort by normalised name in Unicode collation order, keeping ties in order."""

    sort_key = _collator().sort_key
    return sorted(records, key=lambda record: sort_key(normalize(field_text(record, "name"))))


def compute_matched_notes(
    record: Any, groups: Iterable[Group], limit: int = MAX_MATCHED_NOTES
) -> List[str]:
    """Return the record's notes that contain an alternative of any group.

    Notes keep their original casing, appear once (first casing wins) and
    are capped at *limit*. This only explains a match; it never decides one.
    """

    notes = [(note, normalize(note)) for note in note_list(record)]
    matched: List[str] = []
    seen = set()

    for group in groups:
        alternatives = _alternatives(group)
        for note, key in notes:
            if key in seen or not any(alternative in key for alternative in alternatives):
                continue
            seen.add(key)
            matched.append(note)
            if len(matched) >= limit:
                return matched
    return matched
