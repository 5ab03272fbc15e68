from __future__ import annotations

import copy

import pytest

from plans.merge import json_equal, merge_patch


def test_merge_unions_arrays_and_adds_objects():
    base = {"a": 1, "arr": [1, 2]}
    patch = {"arr": [2, 3], "b": {"x": 1}}

    assert merge_patch(base, patch) == {"a": 1, "arr": [1, 2, 3], "b": {"x": 1}}


def test_merge_does_not_mutate_inputs():
    base = {"nested": {"k": [1]}, "s": "x"}
    patch = {"nested": {"k": [2], "new": {"deep": True}}, "s": "y"}
    base_before = copy.deepcopy(base)
    patch_before = copy.deepcopy(patch)

    merged = merge_patch(base, patch)

    assert base == base_before
    assert patch == patch_before
    assert merged == {"nested": {"k": [1, 2], "new": {"deep": True}}, "s": "y"}

    # the result owns its copies of patch subtrees
    merged["nested"]["new"]["deep"] = False
    assert patch["nested"]["new"]["deep"] is True


def test_merge_recurses_into_nested_objects():
    base = {"cost": {"deductible": 10, "copay": 5, "_org": "a"}}
    patch = {"cost": {"copay": 7}}

    assert merge_patch(base, patch) == {"cost": {"deductible": 10, "copay": 7, "_org": "a"}}


def test_merge_replaces_when_types_differ():
    base = {"obj": 5, "arr": {"not": "a list"}, "scalar": [1, 2]}
    patch = {"obj": {"x": 1}, "arr": [1], "scalar": "now a string"}

    assert merge_patch(base, patch) == {"obj": {"x": 1}, "arr": [1], "scalar": "now a string"}


def test_array_union_keeps_order_and_dedups_within_patch():
    base = {"arr": [{"id": 1}, {"id": 2}]}
    patch = {"arr": [{"id": 3}, {"id": 1}, {"id": 3}, {"id": 4}]}

    assert merge_patch(base, patch)["arr"] == [{"id": 1}, {"id": 2}, {"id": 3}, {"id": 4}]


def test_array_union_uses_structural_equality_for_objects():
    base = {"arr": [{"a": 1, "b": 2}]}
    patch = {"arr": [{"b": 2, "a": 1}]}

    assert merge_patch(base, patch) == base


def test_array_union_does_not_confuse_booleans_and_numbers():
    merged = merge_patch({"flags": [1, 0]}, {"flags": [True, False, 1]})

    assert merged["flags"] == [1, 0, True, False]
    assert merged["flags"][2] is True


def test_null_overwrites_existing_value():
    assert merge_patch({"a": {"b": 1}}, {"a": None}) == {"a": None}


def test_existing_array_elements_are_not_modified():
    base = {"arr": [1, 2, 2]}

    assert merge_patch(base, {"arr": [2]}) == {"arr": [1, 2, 2]}


def test_patch_must_be_an_object():
    with pytest.raises(TypeError):
        merge_patch({"a": 1}, [1, 2])  # type: ignore[arg-type]


def test_json_equal_semantics():
    assert json_equal({"a": [1, {"b": None}]}, {"a": [1, {"b": None}]})
    assert json_equal(1, 1.0)
    assert not json_equal(True, 1)
    assert not json_equal(False, 0)
    assert not json_equal({"a": 1}, {"a": 1, "b": 2})
    assert not json_equal([1, 2], [2, 1])
    assert not json_equal("1", 1)
