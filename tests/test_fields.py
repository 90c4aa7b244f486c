from catalog.fields import (
    FIELD_SPECS,
    build_haystack,
    extract_field,
    extract_notes,
    field_text,
    note_list,
    path,
    record_flag,
    record_key,
)


def test_extract_field_returns_first_resolving_candidate():
    record = {"family": "Woody", "Scent Family": "Woody Aromatic Spicy"}
    assert extract_field(record, FIELD_SPECS["family"]) == "Woody"


def test_extract_field_skips_empty_values():
    record = {"family": "   ", "Scent Family": [], "Olfactive Family": ["Amber", "Woody"]}
    assert extract_field(record, FIELD_SPECS["family"]) == ["Amber", "Woody"]


def test_extract_field_accepts_callables_in_order():
    record = {"a": "from key"}
    candidates = [lambda r: None, lambda r: "derived", "a"]
    assert extract_field(record, candidates) == "derived"


def test_extract_field_without_match_or_mapping():
    assert extract_field({"x": 1}, ["y", "z"]) == ""
    assert extract_field(["not", "a", "record"], ["name"]) == ""


def test_path_ignores_non_mapping_steps():
    top = path("notes", "top")
    assert top({"notes": {"top": "Bergamot"}}) == "Bergamot"
    assert top({"notes": ["Bergamot"]}) is None
    assert top({}) is None


def test_extract_notes_pyramid_with_middle_alias():
    notes = extract_notes({"notes": {"top": "Bergamot", "middle": ["Iris", "Violet"]}})
    assert notes.top == "Bergamot"
    assert notes.heart == "Iris, Violet"
    assert notes.base == ""
    assert notes.all == ""
    assert notes.has_pyramid is True


def test_extract_notes_spreadsheet_columns():
    notes = extract_notes({"Top Notes": "Pink Pepper", "Base Notes": "Vetiver"})
    assert notes.top == "Pink Pepper"
    assert notes.base == "Vetiver"
    assert notes.has_pyramid is True


def test_extract_notes_flat_list_has_no_pyramid():
    notes = extract_notes({"notes": ["Rose", "Oud"]})
    assert notes.all == "Rose, Oud"
    assert notes.has_pyramid is False


def test_note_list_dedupes_across_formats():
    record = {
        "notes": {"top": ["Bergamot", "Lemon"], "heart": "Lavender, bergamot", "base": ["Sandalwood"]},
    }
    assert note_list(record) == ["Bergamot", "Lemon", "Lavender", "Sandalwood"]


def test_note_list_splits_comma_separated_string():
    assert note_list({"notes": "Rose, Oud ,, Saffron"}) == ["Rose", "Oud", "Saffron"]


def test_build_haystack_is_normalized_and_ordered():
    record = {"id": "a1", "name": "Café Noir", "brand": "Maison"}
    assert build_haystack(record) == "a1 | cafe noir | maison"


def test_build_haystack_includes_private_composition():
    record = {"name": "Quiet Wood", "private": {"builtFrom": ["Iso E Super", "Cashmeran"]}}
    assert "iso e super, cashmeran" in build_haystack(record)


def test_build_haystack_tolerates_malformed_fields():
    record = {"name": "Odd", "notes": 42, "tags": {"a": [None, {"b": "Night"}]}}
    haystack = build_haystack(record)
    assert "42" in haystack
    assert "night" in haystack
    assert build_haystack("not a record") == ""


def test_field_text_and_flags():
    record = {"Olfactive Family": ["Amber", "Woody"], "Owned": "Yes", "isDupe": False}
    assert field_text(record, "family") == "Amber, Woody"
    assert record_flag(record, "owned") is True
    assert record_flag(record, "is_dupe") is False
    assert record_flag(record, "is_house_original") is False


def test_record_key_prefers_id():
    assert record_key({"id": 7, "name": "X"}) == "7"
    assert record_key({"name": "  Fleur Élégante "}) == "fleur elegante"
