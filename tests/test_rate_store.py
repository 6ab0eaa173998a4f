import pytest

from itinerary_ace.core.config import Settings
from itinerary_ace.db.dal import API_RATES_LAST_FETCHED_KEY, EXCHANGE_MARKUP_KEY
from itinerary_ace.models.rates import ExchangeRateIn, SpecificMarkupIn
from itinerary_ace.services import currencies
from itinerary_ace.services.http_client import HttpError, redact
from itinerary_ace.services.rates import providers, rate_store
from itinerary_ace.services.rates.base import LatestRates, RateProvider, RateProviderError


class FakeProvider(RateProvider):
    name = "fake"

    def __init__(self, rates=None, error=None):
        self.rates = rates or {}
        self.error = error
        self.calls = []

    def fetch_latest(self, base_currency):
        self.calls.append(base_currency)
        if self.error:
            raise RateProviderError(self.error)
        return LatestRates(base_currency=base_currency, rates=self.rates, last_update_unix=1718000000)


def test_seed_default_rates_only_once(db):
    assert rate_store.seed_default_rates(db) is True
    assert rate_store.seed_default_rates(db) is False
    pairs = {(r.from_currency, r.to_currency) for r in rate_store.list_rates(db)}
    assert ("USD", "THB") in pairs
    assert all(r.source == "manual" for r in rate_store.list_rates(db))


def test_rates_are_sorted_and_unique(db):
    rate_store.add_rate(db, ExchangeRateIn(from_currency="USD", to_currency="THB", rate=36))
    rate_store.add_rate(db, ExchangeRateIn(from_currency="EUR", to_currency="GBP", rate=0.85))
    assert [r.from_currency for r in rate_store.list_rates(db)] == ["EUR", "USD"]
    with pytest.raises(ValueError):
        rate_store.add_rate(db, ExchangeRateIn(from_currency="USD", to_currency="THB", rate=37))


def test_update_rate_marks_it_manual(db):
    rate = rate_store.add_rate(db, ExchangeRateIn(from_currency="USD", to_currency="THB", rate=36))
    updated = rate_store.update_rate(db, rate.id, 35.5)
    assert updated.rate == 35.5
    assert updated.source == "manual"
    assert rate_store.update_rate(db, "missing", 1.0) is None
    with pytest.raises(ValueError):
        rate_store.update_rate(db, rate.id, 0)


def test_global_markup_bounds_and_bad_storage(db):
    assert rate_store.get_global_markup(db) == 0.0
    assert rate_store.set_global_markup(db, 2.5) == 2.5
    assert rate_store.get_global_markup(db) == 2.5
    with pytest.raises(ValueError):
        rate_store.set_global_markup(db, 51)
    db.write_scalar(EXCHANGE_MARKUP_KEY, "abc")
    assert rate_store.get_global_markup(db) == 0.0


def test_specific_markup_crud(db):
    markup = rate_store.add_specific_markup(
        db, SpecificMarkupIn(from_currency="USD", to_currency="THB", markup_percentage=3)
    )
    with pytest.raises(ValueError):
        rate_store.add_specific_markup(
            db, SpecificMarkupIn(from_currency="USD", to_currency="THB", markup_percentage=4)
        )
    assert rate_store.update_specific_markup(db, markup.id, 4).markup_percentage == 4
    converter = rate_store.build_converter(db)
    assert converter.markup_for("USD", "THB") == (4, "specific")
    assert rate_store.delete_specific_markup(db, markup.id) is True
    assert rate_store.delete_specific_markup(db, markup.id) is False


def test_refresh_without_key_falls_back_to_defaults(db, settings):
    report = rate_store.refresh_rates(db, settings)
    assert report.status == "fallback"
    assert report.seeded_defaults is True
    assert rate_store.list_rates(db)


def test_refresh_failure_keeps_stored_rates(db, settings):
    rate_store.add_rate(db, ExchangeRateIn(from_currency="USD", to_currency="THB", rate=30))
    report = rate_store.refresh_rates(db, settings, provider=FakeProvider(error="boom"))
    assert report.status == "fallback"
    assert report.seeded_defaults is False
    assert report.message == "boom"
    assert [r.rate for r in rate_store.list_rates(db)] == [30]


def test_refresh_upserts_managed_currencies(db, settings):
    existing = rate_store.add_rate(db, ExchangeRateIn(from_currency="USD", to_currency="THB", rate=30))
    currencies.add_custom_currency(db, "KRW")
    provider = FakeProvider(rates={"THB": 35.9, "KRW": 1380.0, "XAU": 0.0004, "USD": 1.0})

    report = rate_store.refresh_rates(db, settings, provider=provider)

    assert report.status == "success"
    assert provider.calls == ["USD"]
    assert sorted(report.updated_currencies) == ["KRW", "THB"]
    by_pair = {(r.from_currency, r.to_currency): r for r in rate_store.list_rates(db)}
    assert by_pair[("USD", "THB")].id == existing.id
    assert by_pair[("USD", "THB")].rate == 35.9
    assert by_pair[("USD", "THB")].source == "api"
    assert by_pair[("USD", "KRW")].rate == 1380.0
    assert ("USD", "XAU") not in by_pair
    assert db.read_scalar(API_RATES_LAST_FETCHED_KEY).startswith("2024-06-10")


def test_exchangerate_api_provider_parses_payload(monkeypatch):
    seen = {}

    def fake_get_json(url, **kwargs):
        seen["url"] = url
        return {
            "result": "success",
            "time_last_update_unix": 1718000000,
            "conversion_rates": {"USD": 1, "THB": "36.1", "BAD": "x", "ZER": 0},
        }

    monkeypatch.setattr(providers, "get_json", fake_get_json)
    provider = providers.ExchangeRateApiProvider("https://api.example.test/v6/", "k3y")
    latest = provider.fetch_latest("usd")
    assert seen["url"] == "https://api.example.test/v6/k3y/latest/USD"
    assert latest.rates == {"USD": 1.0, "THB": 36.1}
    assert latest.last_update_unix == 1718000000


def test_exchangerate_api_provider_reports_errors(monkeypatch):
    monkeypatch.setattr(
        providers, "get_json", lambda url, **kwargs: {"result": "error", "error-type": "invalid-key"}
    )
    provider = providers.ExchangeRateApiProvider("https://api.example.test/v6", "bad")
    with pytest.raises(RateProviderError, match="invalid-key"):
        provider.fetch_latest("USD")

    def unreachable(url, **kwargs):
        raise HttpError("connection refused")

    monkeypatch.setattr(providers, "get_json", unreachable)
    with pytest.raises(RateProviderError):
        provider.fetch_latest("USD")


def test_api_key_is_redacted_from_urls():
    url = "https://v6.exchangerate-api.com/v6/s3cret/latest/USD"
    assert redact(url, ["s3cret"]) == "https://v6.exchangerate-api.com/v6/***/latest/USD"
    assert redact(url, [""]) == url


def test_static_provider_setting_refreshes_default_rates(db, settings):
    settings.exchange_rate_provider = "static"
    report = rate_store.refresh_rates(db, settings)
    assert report.status == "success"
    assert "THB" in report.updated_currencies
    assert {r.to_currency: r.rate for r in rate_store.list_rates(db)}["JPY"] == 157.0
    assert all(r.source == "api" for r in rate_store.list_rates(db))
    provider = providers.make_rate_provider("static")
    with pytest.raises(RateProviderError):
        provider.fetch_latest("EUR")
    with pytest.raises(ValueError):
        providers.make_rate_provider("exchangerate-api")


def test_unknown_provider_setting_is_rejected(tmp_path):
    s = Settings(data_dir=tmp_path, exchange_rate_provider="carrier-pigeon")
    with pytest.raises(ValueError, match="carrier-pigeon"):
        s.init_post_load()
