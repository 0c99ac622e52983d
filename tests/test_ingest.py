import json

import pytest

from unwrapped_stats.ingest import IngestError, discover_files, ingest_buffers, parse_buffer, read_files
from unwrapped_stats.models.listen import ListenRecord, parse_year

from conftest import listen

def test_parse_bare_array():
    text = json.dumps([listen("A", "2020-01-01T10:00:00Z"), listen("B", "2021-01-01T10:00:00Z")])
    parsed = parse_buffer(text)
    assert [r.artist_name for r in parsed] == ["A", "B"]

def test_parse_tracks_object():
    text = json.dumps({"tracks": [listen("A", "2020-01-01"), listen("B", "2020-01-02")]})
    parsed = parse_buffer(text)
    assert [r.artist_name for r in parsed] == ["A", "B"]

@pytest.mark.parametrize("text", [
    "not json at all",
    "[{\"ts\": ",
    "{\"items\": []}",
    "{\"tracks\": {\"ts\": \"2020-01-01\"}}",
    "42",
    "\"a string\"",
])
def test_parse_rejects_malformed_or_unexpected_shapes(text):
    with pytest.raises(IngestError):
        parse_buffer(text, source="bad.json")

def test_non_object_entries_are_dropped():
    text = json.dumps([listen("A"), 7, "x", None, [1], listen("B")])
    assert [r.artist_name for r in parse_buffer(text)] == ["A", "B"]

def test_ingest_preserves_buffer_and_record_order():
    first = json.dumps([listen("A"), listen("B")])
    second = json.dumps({"tracks": [listen("C")]})
    third = json.dumps([listen("D"), listen("E")])
    result = ingest_buffers([first, ("second.json", second), third])
    assert [r.artist_name for r in result.records] == ["A", "B", "C", "D", "E"]
    assert result.errors == []

def test_failed_buffer_is_skipped_and_reported():
    good = json.dumps([listen("A")])
    result = ingest_buffers([("broken.json", "{oops"), ("good.json", good), ("shape.json", "{}")])
    assert [r.artist_name for r in result.records] == ["A"]
    assert [e.source for e in result.errors] == ["broken.json", "shape.json"]
    assert result.buffers_failed == 2

def test_unknown_fields_are_ignored_and_absent_differs_from_empty():
    entry = listen("", "2020-01-01", album="", track="T", ms_played=0, platform="ios", something_new=True)
    record = ListenRecord.from_dict(entry)
    assert record.artist_name == ""
    assert record.album_name == ""
    assert record.ms_played == 0
    assert record.platform == "ios"

    bare = ListenRecord.from_dict({})
    assert bare.artist_name is None
    assert bare.ms_played is None

def test_legacy_account_data_keys():
    record = ListenRecord.from_dict({
        "endTime": "2019-03-04 21:15",
        "artistName": "Legacy",
        "trackName": "Old Song",
        "msPlayed": 1234,
    })
    assert record.artist_name == "Legacy"
    assert record.track_name == "Old Song"
    assert record.ms_played == 1234
    assert record.year == 2019

@pytest.mark.parametrize("ts, year", [
    ("2020-01-01T12:00:00Z", 2020),
    ("2019-12-31T23:59:59Z", 2019),
    ("2021-06-01", 2021),
    ("2018-07-08 09:10", 2018),
    ("not a date", None),
    ("", None),
    (None, None),
    (20200101, None),
])
def test_parse_year(ts, year):
    assert parse_year(ts) == year

def test_read_files_reports_missing_files(tmp_path):
    good = tmp_path / "Streaming_History_Audio_2020.json"
    good.write_text(json.dumps([listen("A")]), encoding="utf-8")
    result = read_files([str(tmp_path / "missing.json"), str(good)])
    assert [r.artist_name for r in result.records] == ["A"]
    assert len(result.errors) == 1
    assert result.errors[0].source.endswith("missing.json")

def test_discover_files(tmp_path):
    nested = tmp_path / "Spotify Extended Streaming History"
    nested.mkdir()
    (nested / "Streaming_History_Audio_2021.json").write_text("[]")
    (tmp_path / "Streaming_History_Audio_2020.json").write_text("[]")
    (tmp_path / "StreamingHistory0.json").write_text("[]")
    (tmp_path / "notes.txt").write_text("")

    found = discover_files(str(tmp_path))
    names = sorted(p.rsplit("/", 1)[-1] for p in found)
    assert names == ["StreamingHistory0.json", "Streaming_History_Audio_2020.json", "Streaming_History_Audio_2021.json"]

def test_discover_files_falls_back_to_recursive_search(tmp_path):
    deep = tmp_path / "export" / "inner"
    deep.mkdir(parents=True)
    (deep / "Streaming_History_Audio_2022.json").write_text("[]")
    assert discover_files(str(tmp_path)) == [str(deep / "Streaming_History_Audio_2022.json")]
