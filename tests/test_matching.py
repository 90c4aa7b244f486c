import importlib

import pytest

import catalog.matching as matching
from catalog.expansions import build_groups
from catalog.matching import compute_matched_notes, match_groups, rank_records, record_matches


def groups_for(*terms):
    return build_groups(terms).groups


def test_match_groups_and_across_or_within():
    haystack = "cloud | airy musk | bergamot"
    assert match_groups(haystack, [["zzz", "airy"], ["bergamot"]])
    assert not match_groups(haystack, [["airy"], ["vetiver"]])
    assert match_groups(haystack, [])


def test_dupes_of_matches_reference_only():
    dupe = {"name": "Night Tribute", "isDupe": True, "reference": "Bleu de Chanel"}
    not_dupe = {"name": "Bleu de Chanel", "isDupe": False, "reference": "Bleu de Chanel"}
    named_only = {"name": "Bleu Nuit", "isDupe": True, "reference": "Sauvage"}

    groups = groups_for("bleu")
    assert record_matches(dupe, "dupes_of", groups)
    assert not record_matches(not_dupe, "dupes_of", groups)
    assert not record_matches(named_only, "dupes_of", groups)


def test_original_mode_excludes_dupes():
    groups = groups_for("aventus")
    assert record_matches({"name": "Aventus"}, "original", groups)
    assert not record_matches({"name": "Aventus Copy", "isDupe": True}, "original", groups)


def test_house_only_ignores_terms():
    groups = groups_for("zzz")
    assert record_matches({"name": "Mine", "isHouseOriginal": True}, "house_only", groups)
    assert not record_matches({"name": "zzz"}, "house_only", groups)


def test_checkbox_filters_compose_with_mode():
    owned_dupe = {"name": "A", "owned": "yes", "isDupe": True}
    unowned = {"name": "B", "owned": False}

    assert record_matches(owned_dupe, "all", [], owned_only=True, dupes_only=True)
    assert not record_matches(unowned, "all", [], owned_only=True)
    assert not record_matches(unowned, "all", [], dupes_only=True)
    assert record_matches(unowned, "all", [])


def test_rank_records_is_stable_on_equal_names():
    records = [
        {"id": 1, "name": "Beta"},
        {"id": 2, "name": "alpha"},
        {"id": 3, "name": "BETA"},
        {"id": 4, "name": "Éclat"},
    ]
    ranked = rank_records(records)
    assert [record["id"] for record in ranked] == [2, 1, 3, 4]
    assert [record["id"] for record in records] == [1, 2, 3, 4]


def test_compute_matched_notes_in_group_order():
    record = {
        "notes": {"top": ["Bergamot", "Lemon"], "heart": "Lavender, bergamot", "base": ["Sandalwood"]},
    }
    assert compute_matched_notes(record, groups_for("citrus", "santal")) == [
        "Bergamot",
        "Lemon",
        "Sandalwood",
    ]


def test_compute_matched_notes_caps_and_keeps_first_casing():
    record = {"notes": ["ROSE"] + [f"rose {index}" for index in range(12)] + ["rose"]}
    matched = compute_matched_notes(record, groups_for("rose"))
    assert len(matched) == 8
    assert matched[0] == "ROSE"


def test_compute_matched_notes_without_groups():
    assert compute_matched_notes({"notes": ["Rose"]}, []) == []


def test_rank_records_uses_unicode_collation():
    records = [{"name": "Zeta"}, {"name": "Øre"}, {"name": "Œillet"}, {"name": "apple"}]
    assert [record["name"] for record in rank_records(records)] == ["apple", "Œillet", "Øre", "Zeta"]


@pytest.fixture
def reload_matching(monkeypatch):
    yield lambda: importlib.reload(matching)
    monkeypatch.delenv("MAX_MATCHED_NOTES", raising=False)
    importlib.reload(matching)


def test_matched_notes_limit_reads_environment(monkeypatch, reload_matching):
    monkeypatch.setenv("MAX_MATCHED_NOTES", "2")
    module = reload_matching()

    record = {"notes": [f"rose {index}" for index in range(5)]}
    assert module.MAX_MATCHED_NOTES == 2
    assert module.compute_matched_notes(record, groups_for("rose")) == ["rose 0", "rose 1"]
