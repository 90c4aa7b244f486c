"""Display payloads for search results.

Cards carry plain field values plus highlighted HTML for the literally
typed terms. Expansions are never highlighted; the status line names them
instead so users know similar terms were used.
"""

from __future__ import annotations

import os
import re
from typing import Any, Dict, Iterable, List, Sequence

from markupsafe import Markup, escape

from catalog.fields import extract_notes, field_text, record_flag
from catalog.utils import normalize

MAX_EXPANSION_LABELS = int(os.environ.get("MAX_EXPANSION_LABELS", "4"))
EMPTY_VALUE = "—"

BADGE_HOUSE_ORIGINAL = "House Original"
BADGE_DUPE = "Inspired Expression"
BADGE_ORIGINAL = "Original"


def highlight(text: str, terms: Iterable[str]) -> Markup:
    """Escape *text* and wrap case-insensitive hits of *terms* in ``span.hl``."""

    needles = sorted({term for term in terms if term}, key=len, reverse=True)
    if not text or not needles:
        return escape(text or "")

    pattern = re.compile("|".join(re.escape(needle) for needle in needles), re.IGNORECASE)
    out: List[str] = []
    cursor = 0
    for match in pattern.finditer(text):
        out.append(escape(text[cursor:match.start()]))
        out.append(Markup('<span class="hl">%s</span>') % match.group(0))
        cursor = match.end()
    out.append(escape(text[cursor:]))
    return Markup("").join(out)


def badge_text(record: Any) -> str:
    if record_flag(record, "is_house_original"):
        return BADGE_HOUSE_ORIGINAL
    if record_flag(record, "is_dupe"):
        return BADGE_DUPE
    return BADGE_ORIGINAL


def card_id(record: Any) -> str:
    ident = field_text(record, "id")
    if ident:
        return "c_" + ident
    return "c_" + re.sub(r"\s+", "_", normalize(field_text(record, "name")))


def build_card(record: Any, typed_terms: Sequence[str], private_mode: bool = False) -> Dict[str, Any]:
    """Assemble the card payload for one matched record.

    The flat ``all`` notes are shown only when the record has no pyramid, and
    ``built_from`` is present only in private mode.
    """

    notes = extract_notes(record)
    owned = record_flag(record, "owned")

    fields = {
        "name": field_text(record, "name"),
        "house": field_text(record, "brand") or field_text(record, "house"),
        "family": field_text(record, "family") or EMPTY_VALUE,
        "gender": field_text(record, "gender"),
        "concentration": field_text(record, "concentration"),
        "reference": field_text(record, "reference") or EMPTY_VALUE,
        "top": notes.top,
        "heart": notes.heart,
        "base": notes.base,
        "notes": "" if notes.has_pyramid else notes.all,
    }

    card: Dict[str, Any] = {
        "id": card_id(record),
        "badge": badge_text(record),
        "owned": owned,
        "owned_label": "Owned" if owned else "Not owned",
        "has_pyramid": notes.has_pyramid,
        **fields,
        "highlighted": {
            key: str(highlight(value, typed_terms)) for key, value in fields.items() if value
        },
    }

    if private_mode:
        built_from = field_text(record, "built_from")
        if built_from:
            card["built_from"] = built_from

    return card


def expansion_notice(applied_labels: Sequence[str], limit: int = MAX_EXPANSION_LABELS) -> str:
    if not applied_labels:
        return ""
    return " • matched using similar terms: " + " · ".join(applied_labels[:limit])


def status_line(count: int, raw_query: str, applied_labels: Sequence[str]) -> str:
    """Summary such as ``3 match(es) for "fresh"`` plus the expansion banner."""

    status = f"{count} match(es)"
    query = (raw_query or "").strip()
    if query:
        status += f' for "{query}"'
    return status + expansion_notice(applied_labels)
