from __future__ import annotations

from foundry.core.utils.merge import deep_merge, merge_arrays


def test_merge_arrays_empty_override_replaces_base() -> None:
    assert merge_arrays([1, 2], []) == []


def test_merge_arrays_markers() -> None:
    assert merge_arrays([1, 2], [3]) == [3]
    assert merge_arrays([1, 2], ["+", 3]) == [1, 2, 3]
    assert merge_arrays([1, 2], ["=", 3]) == [3]


def test_deep_merge_nested_sections() -> None:
    base = {"strategies": {"create": {"persist_method": "save"}, "stub": {"id_start": 1001}}}
    override = {"strategies": {"stub": {"id_start": 1}}}

    merged = deep_merge(base, override)

    assert merged == {"strategies": {"create": {"persist_method": "save"}, "stub": {"id_start": 1}}}


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"a": {"b": 1}, "items": [1]}
    override = {"a": {"c": 2}, "items": ["+", 2]}

    merged = deep_merge(base, override)

    assert merged == {"a": {"b": 1, "c": 2}, "items": [1, 2]}
    assert base == {"a": {"b": 1}, "items": [1]}


def test_deep_merge_scalar_replaces_mapping() -> None:
    assert deep_merge({"a": {"b": 1}}, {"a": None}) == {"a": None}
