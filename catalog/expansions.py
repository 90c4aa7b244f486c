"""Synonym and intent expansion for typed search terms.

Relations are authored as an undirected graph: :data:`SYNONYM_CLUSTERS` are
groups of fully interchangeable terms and :data:`RELATED_TERMS` link a term to
looser associations ("fresh" -> "airy"). Every edge is stored in both
directions when :data:`EXPANSIONS` is built, so if "summer" expands to
"citrus" then "citrus" expands back to "summer".
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, NamedTuple, Sequence, Tuple

from catalog.utils import normalize

SANDALWOOD_FAMILY = ("sandalwood", "santal", "sandalo", "santalum", "sandal")
AMBROXAN_FAMILY = ("ambroxan", "amberwood", "woody amber")

SYNONYM_CLUSTERS: Tuple[Tuple[str, ...], ...] = (
    SANDALWOOD_FAMILY,
    AMBROXAN_FAMILY,
    ("incense", "olibanum", "frankincense"),
    ("oud", "agarwood"),
    ("iris", "orris"),
    ("tonka", "coumarin"),
    ("vanilla", "vanille"),
    ("musk", "musky"),
)

RELATED_TERMS: Dict[str, Tuple[str, ...]] = {
    "ambroxan": ("ambergris",),
    "ambergris": ("salty amber", "marine amber"),
    "ambery": ("amber", "resinous"),
    "incense": ("smoky",),
    "iris": ("powdery",),
    "orris": ("powdery",),
    "tonka": ("sweet almond",),
    "citrus": ("bergamot", "grapefruit", "lemon", "lime", "orange"),
    "bright": ("bergamot", "grapefruit", "lemon", "lime", "orange"),
    "vanilla": ("creamy", "sweet"),
    "vanille": ("creamy", "sweet"),
    "musk": ("skin scent",),
    "musky": ("skin scent",),
    "clean": ("fresh", "airy"),
    "fresh": ("clean", "airy", "citrus", "green"),
    "blue": ("aquatic", "marine", "ozonic", "fresh"),
    "aquatic": ("marine", "ozonic"),
    "marine": ("salty",),
    "green": ("herbal", "leafy"),
    "sweet": ("gourmand", "sugary"),
    "gourmand": ("dessert", "edible"),
    "spicy": ("warm spicy", "pepper", "cardamom"),
    "smoky": ("leather", "dark"),
    "office": ("clean", "fresh", "light"),
    "summer": ("fresh", "citrus", "blue"),
    "winter": ("amber", "spicy", "vanilla"),
    "night": ("dark", "amber", "spicy"),
    "sexy": ("amber", "musk", "vanilla"),
}

# Substring triggers for partial or misspelled input ("sandalw", "ambrox").
PARTIAL_FAMILIES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...], str], ...] = (
    (("santal", "sandalo", "sandal"), SANDALWOOD_FAMILY, "sandalwood family terms"),
    (("ambrox",), AMBROXAN_FAMILY, "ambroxan family terms"),
)

LABEL_PREVIEW_TERMS = 3


class Expansion(NamedTuple):
    add: Tuple[str, ...]
    label: str


class TermGroup(NamedTuple):
    token: str
    alternatives: Tuple[str, ...]


class GroupedQuery(NamedTuple):
    groups: List[TermGroup]
    applied_labels: List[str]


def _link(graph: Dict[str, Dict[str, None]], left: str, right: str) -> None:
    left, right = normalize(left), normalize(right)
    if not left or not right or left == right:
        return
    graph.setdefault(left, {})[right] = None
    graph.setdefault(right, {})[left] = None


def build_table(
    clusters: Iterable[Sequence[str]], related: Mapping[str, Sequence[str]]
) -> Mapping[str, Expansion]:
    """Derive the read-only key -> :class:`Expansion` table from the graph."""

    graph: Dict[str, Dict[str, None]] = {}
    for cluster in clusters:
        for index, term in enumerate(cluster):
            for other in cluster[index + 1:]:
                _link(graph, term, other)
    for term, neighbours in related.items():
        for other in neighbours:
            _link(graph, term, other)

    table: Dict[str, Expansion] = {}
    for term, neighbours in graph.items():
        add = tuple(neighbours)
        preview = "/".join(add[:LABEL_PREVIEW_TERMS])
        table[term] = Expansion(add=add, label=f"{term} ⇄ {preview}")
    return MappingProxyType(table)


EXPANSIONS: Mapping[str, Expansion] = build_table(SYNONYM_CLUSTERS, RELATED_TERMS)


def expansion_for(term: str) -> Expansion | None:
    return EXPANSIONS.get(normalize(term))


def build_groups(typed_terms: Iterable[str]) -> GroupedQuery:
    """Turn typed terms into OR-groups of accepted alternatives.

    Each non-empty term yields one group (in input order) holding the term,
    its table expansions and any partial-family terms it triggers. The
    labels of every expansion used are returned once each, in first-use order.
    """

    groups: List[TermGroup] = []
    labels: Dict[str, None] = {}

    for raw in typed_terms:
        term = normalize(raw)
        if not term:
            continue

        alternatives: Dict[str, None] = {term: None}

        entry = expansion_for(term)
        if entry is not None:
            alternatives.update(dict.fromkeys(entry.add))
            labels[entry.label] = None

        for triggers, family, label in PARTIAL_FAMILIES:
            if any(trigger in term for trigger in triggers):
                alternatives.update(dict.fromkeys(family))
                labels[label] = None

        groups.append(TermGroup(token=term, alternatives=tuple(alternatives)))

    return GroupedQuery(groups=groups, applied_labels=list(labels))
