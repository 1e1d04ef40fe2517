import pytest

from aibird import birdbase
from aibird.birdbase import BirdBase


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db(tmp_path, clock):
    store = BirdBase(tmp_path / "bird.db", clock=clock)
    yield store
    store.close()


def test_cache_key_empty_string():
    assert birdbase.cache_key("") == b"6b4e03423667dbb73b6e15454f0eb1abd4597f9a1b078e3f5b5a6bc7"


def test_cache_key_distinct_and_hex():
    a, b = birdbase.cache_key("a"), birdbase.cache_key("b")
    assert a != b
    assert len(a) == 56
    int(a, 16)


def test_compress_round_trip_and_gzip_magic():
    data = b"birds fly above floods" * 20
    packed = birdbase.compress(data)
    assert packed[:2] == b"\x1f\x8b"
    assert birdbase.decompress(packed) == data


def test_put_get_string(db):
    db.put_string("greeting", "hello")
    assert db.get("greeting") == b"hello"


def test_put_int_stored_as_text(db):
    db.put_int("count", 42)
    assert int(db.get("count")) == 42


def test_put_bytes_overwrite(db):
    db.put_bytes("k", b"one")
    db.put_bytes("k", b"two")
    assert db.get("k") == b"two"


def test_missing_key_raises(db):
    assert not db.has("absent")
    with pytest.raises(KeyError):
        db.get("absent")


def test_delete(db):
    db.put_string("k", "v")
    assert db.has("k")
    db.delete("k")
    assert not db.has("k")
    db.delete("k")
    assert not db.has("k")


def test_expire_seconds(db, clock):
    db.put_string_expire_seconds("flood", "1", 3)
    clock.now += 2
    assert db.get("flood") == b"1"
    clock.now += 2
    assert not db.has("flood")
    with pytest.raises(KeyError):
        db.get("flood")


def test_expire_hours(db, clock):
    db.put_bytes_expire_hours("img", b"data", 1)
    clock.now += 3599
    assert db.has("img")
    clock.now += 2
    assert not db.has("img")


def test_value_too_large(tmp_path):
    with BirdBase(tmp_path / "small.db", max_value_size=10) as store:
        with pytest.raises(ValueError):
            store.put_bytes("big", bytes(range(256)) * 4)
        assert not store.has("big")


def test_persists_across_reopen(tmp_path):
    path = tmp_path / "persist.db"
    with BirdBase(path) as store:
        store.put_string("efnet_users", "[]")
    with BirdBase(path) as store:
        assert store.get("efnet_users") == b"[]"


def test_merge_keeps_live_entries(db, clock):
    db.put_string("live", "v")
    db.put_string_expire_seconds("dead", "v", 1)
    clock.now += 5
    db.merge()
    assert db.get("live") == b"v"
    assert not db.has("dead")


def test_closed_store_raises(tmp_path):
    store = BirdBase(tmp_path / "closed.db")
    store.close()
    with pytest.raises(RuntimeError):
        store.has("k")