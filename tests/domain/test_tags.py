from __future__ import annotations

from aedsync.domain.tags import (
    apply_updates,
    conflict_keys,
    diff_tags,
    is_aed_only,
    is_opted_out,
    register_ref,
    strip_updates,
)


def test_register_ref_strips_whitespace_and_ignores_blank() -> None:
    assert register_ref({"ref:hjertestarterregister": " 42 "}) == "42"
    assert register_ref({"ref:hjertestarterregister": "   "}) is None
    assert register_ref({}) is None


def test_note_key_marks_opt_out_even_when_empty() -> None:
    assert is_opted_out({"note": ""})
    assert not is_opted_out({"description": "note"})


def test_aed_only_requires_emergency_and_known_keys() -> None:
    assert is_aed_only({"emergency": "defibrillator", "indoor": "yes", "level": "1"})
    assert not is_aed_only({"emergency": "defibrillator", "amenity": "pharmacy"})
    assert not is_aed_only({"indoor": "yes"})


def test_conflict_keys_are_sorted() -> None:
    tags = {"shop": "chemist", "amenity": "pharmacy", "emergency": "defibrillator"}

    assert conflict_keys(tags) == ["amenity", "shop"]


def test_strip_updates_only_remove_present_aed_keys() -> None:
    tags = {
        "amenity": "pharmacy",
        "emergency": "defibrillator",
        "ref:hjertestarterregister": "7",
        "name": "Apotek 1",
    }

    assert strip_updates(tags) == {"emergency": None, "ref:hjertestarterregister": None}


def test_apply_updates_sets_and_removes_keys() -> None:
    tags = {"name": "Old", "level": "1"}

    result = apply_updates(tags, {"name": "New", "level": None, "indoor": "yes"})

    assert result == {"name": "New", "indoor": "yes"}
    assert tags == {"name": "Old", "level": "1"}


def test_diff_tags_keeps_unrelated_keys_untouched() -> None:
    current = {"name": "Same", "survey:date": "2020-01-01", "level": "1"}
    desired = {"name": "Same", "level": "2", "indoor": "yes"}

    assert diff_tags(current, desired) == {"level": "2", "indoor": "yes"}
