import sqlite3

from itinerary_ace.db.dal import (
    COUNTRIES_KEY,
    CUSTOM_CURRENCIES_KEY,
    ITINERARY_DATA_PREFIX,
    QUOTATION_REQUESTS_KEY,
)
from itinerary_ace.db.migrate import CURRENT_SCHEMA_VERSION, apply_migrations
from itinerary_ace.models.itinerary import TripData
from itinerary_ace.services import countries, currencies, itineraries


def test_key_value_primitives(db):
    assert db.get_item("missing") is None
    db.set_item("a", "1")
    db.set_item("a", "2")
    assert db.get_item("a") == "2"
    assert db.keys(prefix="a") == ["a"]
    assert db.remove_item("a") is True
    assert db.remove_item("a") is False


def test_missing_collection_is_seeded_and_persisted(db):
    assert db.get_item(COUNTRIES_KEY) is None
    seeded = countries.list_countries(db)
    assert len(seeded) == 5
    assert db.get_item(COUNTRIES_KEY) is not None


def test_corrupt_collection_is_replaced_with_seed(db):
    db.set_item(COUNTRIES_KEY, "{not json")
    assert [c.name for c in countries.list_countries(db)][0] == "Bangladesh"

    db.set_item(COUNTRIES_KEY, '[{"name": "Nowhere"}]')
    assert len(countries.list_countries(db)) == 5


def test_corrupt_custom_currencies_are_reset(db):
    db.set_item(CUSTOM_CURRENCIES_KEY, '["KRW", 7]')
    assert currencies.list_custom_currencies(db) == []
    assert db.get_item(CUSTOM_CURRENCIES_KEY) is None


def test_corrupt_itinerary_document_is_discarded(db):
    db.set_item(f"{ITINERARY_DATA_PREFIX}ITN-bad", '{"id": "ITN-bad"}')
    assert itineraries.get_itinerary(db, "ITN-bad") is None
    assert db.get_item(f"{ITINERARY_DATA_PREFIX}ITN-bad") is None


def test_itinerary_round_trips_through_storage(db):
    trip = itineraries.create_itinerary(db)
    loaded = itineraries.get_itinerary(db, trip.id)
    assert isinstance(loaded, TripData)
    assert loaded.id == trip.id
    assert itineraries.get_last_active_id(db) == trip.id


def test_stale_last_active_pointer_is_cleared(db):
    trip = itineraries.create_itinerary(db)
    db.remove_item(f"{ITINERARY_DATA_PREFIX}{trip.id}")
    assert itineraries.get_last_active_id(db) is None


def test_migration_renames_legacy_keys(tmp_path):
    path = tmp_path / "legacy.sqlite3"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE local_storage (key TEXT PRIMARY KEY, value TEXT NOT NULL, updated_at TEXT)")
    conn.execute("INSERT INTO local_storage (key, value) VALUES ('itineraryAceCustomCurrencies', '[\"KRW\"]')")
    conn.execute("INSERT INTO local_storage (key, value) VALUES ('itineraryAceQuotationRequests', '[]')")
    conn.commit()
    conn.close()

    assert apply_migrations(path) == CURRENT_SCHEMA_VERSION
    assert apply_migrations(path) == CURRENT_SCHEMA_VERSION

    conn = sqlite3.connect(path)
    keys = {row[0] for row in conn.execute("SELECT key FROM local_storage")}
    version = conn.execute("SELECT value FROM metadata WHERE key = 'schema_version'").fetchone()[0]
    conn.close()
    assert keys == {CUSTOM_CURRENCIES_KEY, QUOTATION_REQUESTS_KEY}
    assert version == str(CURRENT_SCHEMA_VERSION)
