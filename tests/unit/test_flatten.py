from __future__ import annotations

import pytest

from harper_frames.domain.errors import MalformedRecordError
from harper_frames.projection.flatten import flatten_nested, flatten_record, has_nested


def test_has_nested_detects_mappings_and_sequences():
    assert not has_nested([{"a": 1}, {"b": "x"}])
    assert has_nested([{"a": 1}, {"cpu": {"user": 1}}])
    assert has_nested([{"disks": [1, 2]}])


def test_flatten_record_names_mapping_children_with_dots():
    flat = flatten_record({"cpu": {"load": {"user": 1.5, "system": 0.5}}, "host": "h1"})
    assert flat == {"host": "h1", "cpu.load.user": 1.5, "cpu.load.system": 0.5}


def test_flatten_record_indexes_sequence_elements():
    flat = flatten_record({"disks": [{"fs": "/dev/sda"}, {"fs": "/dev/sdb"}]})
    assert flat == {"disks.0.fs": "/dev/sda", "disks.1.fs": "/dev/sdb"}


def test_flatten_record_drops_empty_containers():
    assert flatten_record({"a": {}, "b": [], "c": 1}) == {"c": 1}


def test_flatten_record_prefers_top_level_on_collision():
    flat = flatten_record({"cpu.load": 9, "cpu": {"load": 1}})
    assert flat == {"cpu.load": 9}


def test_flatten_record_custom_separator():
    assert flatten_record({"a": {"b": 1}}, separator="/") == {"a/b": 1}


def test_flatten_nested_leaves_input_untouched():
    records = [{"a": {"b": 1}}]
    flattened = flatten_nested(records)
    assert flattened == [{"a.b": 1}]
    assert records == [{"a": {"b": 1}}]


def test_flatten_nested_rejects_non_mapping():
    with pytest.raises(MalformedRecordError):
        flatten_nested([{"a": 1}, 42])
