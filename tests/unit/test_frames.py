from __future__ import annotations

import json
from datetime import datetime, timezone

from harper_frames.domain.models import Column, DataQualityWarning, Kind, WideTable
from harper_frames.frames import encode_value, to_frame, to_records
from harper_frames.projection import pivot, project, unify
from harper_frames.sources.json_file import decode_timestamp

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
T0_MS = 1_704_110_400_000
T_SUBSECOND = datetime(2023, 11, 14, 22, 13, 20, 1000, tzinfo=timezone.utc)
T_SUBSECOND_MS = 1_700_000_000_001
NOTICE_LIMIT = 2


def _wide() -> WideTable:
    return WideTable(
        key_column="ts",
        columns=[
            Column("ts", Kind.timestamp),
            Column("a.load", Kind.float, {"series": "a"}),
            Column("a.up", Kind.boolean, {"series": "a"}),
            Column("a.state", Kind.string, {"series": "a"}),
            Column("a.count", Kind.integer, {"series": "a"}),
            Column("a.extra", Kind.null, {"series": "a"}),
        ],
        rows=[
            [T0, 0.5, True, "ok", 3, None],
            [None, None, None, None, None, None],
        ],
    )


def test_to_frame_schema_preserves_name_kind_and_labels():
    frame = to_frame(_wide(), ref_id="A", name="cpu")
    fields = frame["schema"]["fields"]

    assert frame["schema"]["refId"] == "A"
    assert frame["schema"]["name"] == "cpu"
    assert [f["type"] for f in fields] == ["time", "number", "boolean", "string", "number", "other"]
    assert [f["typeInfo"]["frame"] for f in fields] == [
        "time.Time",
        "float64",
        "bool",
        "string",
        "int64",
        "json.RawMessage",
    ]
    assert all(f["typeInfo"]["nullable"] for f in fields)
    assert fields[1]["labels"] == {"series": "a"}


def test_to_frame_values_are_column_arrays_with_nulls():
    values = to_frame(_wide(), ref_id="A")["data"]["values"]

    assert values[0] == [T0_MS, None]
    assert values[1] == [0.5, None]
    assert values[3] == ["ok", None]


def test_to_frame_is_json_serializable():
    json.dumps(to_frame(_wide(), ref_id="A"))


def test_to_frame_name_defaults_to_ref_id():
    assert to_frame(_wide(), ref_id="B")["schema"]["name"] == "B"


def test_to_frame_omits_meta_without_warnings():
    assert "meta" not in to_frame(_wide(), ref_id="A")["schema"]


def test_to_frame_caps_notices():
    warnings = [DataQualityWarning(code="type_conflict", message=f"w{i}") for i in range(4)]
    notices = to_frame(_wide(), ref_id="A", warnings=warnings, max_notices=NOTICE_LIMIT)["schema"][
        "meta"
    ]["notices"]

    assert [n["text"] for n in notices[:NOTICE_LIMIT]] == ["w0", "w1"]
    assert notices[-1]["text"] == "2 more data-quality warnings omitted"
    assert all(n["severity"] == "warning" for n in notices)


def test_to_records_keeps_row_order_and_nulls():
    records = to_records(_wide())

    assert records[0] == {
        "ts": T0_MS,
        "a.load": 0.5,
        "a.up": True,
        "a.state": "ok",
        "a.count": 3,
        "a.extra": None,
    }
    assert set(records[1].values()) == {None}


def test_encode_value_keeps_millisecond_precision():
    assert encode_value(T_SUBSECOND) == T_SUBSECOND_MS
    assert encode_value(datetime(1970, 1, 1, 0, 0, 1, 1000, tzinfo=timezone.utc)) == 1001


def test_encode_value_treats_naive_timestamps_as_utc():
    assert encode_value(T_SUBSECOND.replace(tzinfo=None)) == T_SUBSECOND_MS


def test_epoch_millisecond_keys_survive_projection_and_encoding():
    raw_keys = [1000, 1001, T_SUBSECOND_MS]
    records = [{"ts": decode_timestamp(ms), "v": n} for n, ms in enumerate(raw_keys)]
    long = project(records, unify(records))

    frame = to_frame(pivot(long, "ts"), ref_id="A")

    assert frame["data"]["values"][0] == raw_keys
    assert to_records(pivot(long, "ts"))[1]["ts"] == 1001
