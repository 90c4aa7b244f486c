"""Search entrypoint for the fragrance finder."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, NamedTuple, Sequence

from catalog.commands import MODE_HOUSE_ONLY, parse_command
from catalog.expansions import build_groups
from catalog.fields import record_key
from catalog.matching import compute_matched_notes, rank_records, record_matches
from catalog.utils import Record, normalize, tokenize

logger = logging.getLogger(__name__)


class SearchOptions(NamedTuple):
    """Per-session switches passed in by the caller; all default to off."""

    owned_only: bool = False
    dupes_only: bool = False
    private_mode: bool = False


def search_catalog(
    query: str | None, records: Sequence[Record], options: SearchOptions | None = None
) -> Dict[str, Any]:
    """Return the records matching *query*, ranked by name, with match metadata.

    The query is parsed into a command mode and residual text, the residual
    is expanded into OR-groups (one per typed word), every record is filtered
    against those groups and the checkbox options, and the survivors are
    sorted. ``typed_terms`` holds the literal words for highlighting;
    expansions only surface through ``applied_expansion_labels``.

    ``options.private_mode`` is echoed back for rendering and never changes
    which records match.
    """

    options = options or SearchOptions()
    raw = (query or "").strip()
    intent = parse_command(raw)
    typed_terms = tokenize(normalize(raw))

    residual_terms = [] if intent.mode == MODE_HOUSE_ONLY else tokenize(intent.query)
    grouped = build_groups(residual_terms)

    logger.debug("Searching mode=%s groups=%s", intent.mode, grouped.groups)

    matches = rank_records(
        record
        for record in records
        if record_matches(
            record,
            intent.mode,
            grouped.groups,
            owned_only=options.owned_only,
            dupes_only=options.dupes_only,
        )
    )

    matched_notes: Dict[str, List[str]] = {}
    for record in matches:
        notes = compute_matched_notes(record, grouped.groups)
        if notes:
            matched_notes.setdefault(record_key(record), notes)

    return {
        "query": raw,
        "mode": intent.mode,
        "typed_terms": typed_terms,
        "groups": grouped.groups,
        "matches": matches,
        "matched_notes_by_record_id": matched_notes,
        "applied_expansion_labels": grouped.applied_labels,
        "total_count": len(matches),
        "options": options,
    }
