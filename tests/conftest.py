import json
from datetime import date

import pytest

from unwrapped_stats.db import Database
from unwrapped_stats.models.listen import ListenRecord
from unwrapped_stats.services.storage import SnapshotStore

TODAY = date(2026, 10, 18)

def listen(artist=None, ts=None, album=None, track=None, **extra):
    """Build an export-shaped record dict, leaving out fields passed as None"""
    entry = {
        "ts": ts,
        "master_metadata_album_artist_name": artist,
        "master_metadata_album_album_name": album,
        "master_metadata_track_name": track,
    }
    entry = {key: value for key, value in entry.items() if value is not None}
    entry.update(extra)
    return entry

def records(*entries):
    return [ListenRecord.from_dict(entry) for entry in entries]

def album_listens(album, artist, track_count, plays, ts="2022-05-01T10:00:00Z"):
    """`plays` listens spread round-robin over `track_count` distinct tracks"""
    return [
        listen(artist, ts, album=album, track=f"{album} track {i % track_count + 1}")
        for i in range(plays)
    ]

@pytest.fixture
def scenario_entries():
    return [
        listen("A", "2020-01-01"),
        listen("A", "2020-06-01"),
        listen("B", "2021-01-01"),
        listen("", "2021-02-01"),
    ]

@pytest.fixture
def scenario_buffer(scenario_entries):
    return json.dumps(scenario_entries)

@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'cache.db'}")
    db.init()
    yield db
    db.dispose()

@pytest.fixture
def store(database):
    return SnapshotStore(database)
