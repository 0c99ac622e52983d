from unwrapped_stats.aggregator import Aggregator
from unwrapped_stats.estimator import Currency
from unwrapped_stats.models.db import Base
from unwrapped_stats.models.snapshot import SummarySnapshot
from unwrapped_stats.ranking import podium
from unwrapped_stats.services.storage import SnapshotStore

from conftest import TODAY, album_listens, listen, records

class UnserializableSnapshot(SummarySnapshot):
    def model_dump_json(self, **kwargs):
        raise ValueError("cannot serialize")

def build_snapshot(*entries):
    summary = Aggregator().process(records(*entries), today=TODAY)
    return SummarySnapshot.from_summary(summary, podium(summary))

def test_empty_slot(store):
    assert not store.exists()
    assert store.load() is None

def test_save_and_load(store, scenario_entries):
    snapshot = build_snapshot(*scenario_entries, *album_listens("LP", "A", track_count=8, plays=16))
    assert store.save(snapshot)
    assert store.exists()

    loaded = store.load()
    assert loaded == snapshot
    assert loaded.most_played_artist == "A"
    assert loaded.artists[0].yearly == {2020: 2, 2022: 16}
    assert loaded.albums[0].track_count == 8

def test_save_overwrites_previous(store):
    store.save(build_snapshot(listen("A")))
    store.save(build_snapshot(listen("B"), listen("B")))
    assert [a.name for a in store.load().artists] == ["B"]

def test_failed_serialization_keeps_previous_snapshot(store):
    previous = build_snapshot(listen("A"))
    store.save(previous)

    broken = UnserializableSnapshot(**build_snapshot(listen("Z")).model_dump())
    assert store.save(broken) is False
    assert store.load() == previous

def test_malformed_payload_loads_as_no_data(store):
    assert store._put(store.key, "{not json")
    assert store.exists()
    assert store.load() is None

    assert store._put(store.key, '{"artists": [{"name": "A", "plays": -3}]}')
    assert store.load() is None

def test_clear_is_idempotent(store):
    store.save(build_snapshot(listen("A")))
    assert store.clear()
    assert not store.exists()
    assert store.clear()
    assert store.load() is None

def test_database_errors_are_reported_not_raised(store, database):
    Base.metadata.drop_all(database._engine)
    assert store.load() is None
    assert store.exists() is False
    assert store.save(build_snapshot(listen("A"))) is False
    assert store.clear() is False

def test_preferences_use_separate_slots(store):
    assert store.load_currency() == Currency.GBP
    assert store.load_albums_limit() == 10

    assert store.save_currency(Currency.USD)
    assert store.save_albums_limit(25)
    store.clear()

    assert store.load_currency() == Currency.USD
    assert store.load_albums_limit() == 25

def test_bad_preferences_fall_back_to_defaults(store):
    store._put(store.currency_key, "EUR")
    store._put(store.albums_limit_key, "lots")
    assert store.load_currency() == Currency.GBP
    assert store.load_albums_limit() == 10
    assert store.save_albums_limit(0) is False

def test_store_initializes_database(tmp_path):
    from unwrapped_stats.db import Database
    database = Database(f"sqlite:///{tmp_path / 'fresh.db'}")
    store = SnapshotStore(database, key="custom")
    assert database.initialized
    assert store.save(build_snapshot(listen("A")))
    assert SnapshotStore(database, key="other").load() is None
    database.dispose()
