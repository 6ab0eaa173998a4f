import pytest
from fastapi.testclient import TestClient

from itinerary_ace.core.config import Settings
from itinerary_ace.db.dal import Database
from itinerary_ace.db.migrate import apply_migrations
from itinerary_ace.main import create_app


@pytest.fixture
def settings(tmp_path):
    s = Settings(
        data_dir=tmp_path,
        db_filename="test.sqlite3",
        exchange_rate_provider="exchangerate-api",
        exchangerate_api_key=None,
        refresh_rates_on_startup=False,
        debug=False,
    )
    s.init_post_load()
    return s


@pytest.fixture
def db(settings):
    apply_migrations(settings.db_path)
    return Database(settings.db_path)


@pytest.fixture
def client(settings):
    app = create_app(settings_override=settings)
    with TestClient(app) as c:
        yield c
