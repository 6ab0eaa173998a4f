from __future__ import annotations

"""Persisted exchange rates, markups and API refresh.

Storage keys:
    itineraryAceExchangeRates        JSON array of ExchangeRate, sorted FROM-TO
    itineraryAceExchangeMarkup       global markup percentage as a bare number
    itineraryAceSpecificMarkups      JSON array of SpecificMarkupRate
    itineraryAceApiRatesLastFetched  ISO timestamp of the provider's last update
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING

from itinerary_ace.db.dal import (
    API_RATES_LAST_FETCHED_KEY,
    Database,
    EXCHANGE_MARKUP_KEY,
    EXCHANGE_RATES_KEY,
    SPECIFIC_MARKUPS_KEY,
)
from itinerary_ace.models.common import utc_now
from itinerary_ace.models.constants import MAX_MARKUP_PERCENTAGE, REFERENCE_CURRENCY
from itinerary_ace.models.rates import (
    ExchangeRate,
    ExchangeRateIn,
    RefreshReport,
    SpecificMarkupIn,
    SpecificMarkupRate,
)
from itinerary_ace.services.currencies import all_currency_codes
from .base import RateProvider, RateProviderError
from .conversion import CurrencyConverter
from .providers import DEFAULT_RATES, make_rate_provider

if TYPE_CHECKING:  # pragma: no cover
    from itinerary_ace.core.config import Settings

logger = logging.getLogger("itinerary_ace.rates.store")


def _pair_key(item) -> str:
    return f"{item.from_currency}-{item.to_currency}"


# ------------- Base rates -------------


def list_rates(db: Database) -> List[ExchangeRate]:
    return sorted(db.read_collection(EXCHANGE_RATES_KEY, ExchangeRate), key=_pair_key)


def _save_rates(db: Database, rates: List[ExchangeRate]) -> None:
    db.write_collection(EXCHANGE_RATES_KEY, sorted(rates, key=_pair_key))


def add_rate(db: Database, payload: ExchangeRateIn) -> ExchangeRate:
    rates = list_rates(db)
    if any(_pair_key(r) == _pair_key(payload) for r in rates):
        raise ValueError(
            f"rate from {payload.from_currency} to {payload.to_currency} already exists"
        )
    rate = ExchangeRate(**payload.model_dump())
    _save_rates(db, rates + [rate])
    return rate


def update_rate(db: Database, rate_id: str, new_rate: float) -> Optional[ExchangeRate]:
    if new_rate <= 0:
        raise ValueError("rate must be positive")
    rates = list_rates(db)
    for i, r in enumerate(rates):
        if r.id == rate_id:
            rates[i] = r.model_copy(
                update={"rate": new_rate, "source": "manual", "updated_at": utc_now()}
            )
            _save_rates(db, rates)
            return rates[i]
    return None


def delete_rate(db: Database, rate_id: str) -> bool:
    rates = list_rates(db)
    remaining = [r for r in rates if r.id != rate_id]
    if len(remaining) == len(rates):
        return False
    _save_rates(db, remaining)
    return True


# ------------- Global markup -------------


def get_global_markup(db: Database) -> float:
    raw = db.read_scalar(EXCHANGE_MARKUP_KEY)
    if raw is None:
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        logger.warning("ignoring non-numeric global markup %r", raw)
        return 0.0
    return value if value >= 0 else 0.0


def set_global_markup(db: Database, value: float) -> float:
    if value < 0 or value > MAX_MARKUP_PERCENTAGE:
        raise ValueError(
            f"markup percentage must be between 0 and {MAX_MARKUP_PERCENTAGE:g}"
        )
    db.write_scalar(EXCHANGE_MARKUP_KEY, repr(float(value)))
    return float(value)


# ------------- Specific markups -------------


def list_specific_markups(db: Database) -> List[SpecificMarkupRate]:
    return sorted(
        db.read_collection(SPECIFIC_MARKUPS_KEY, SpecificMarkupRate), key=_pair_key
    )


def add_specific_markup(db: Database, payload: SpecificMarkupIn) -> SpecificMarkupRate:
    markups = list_specific_markups(db)
    if any(_pair_key(m) == _pair_key(payload) for m in markups):
        raise ValueError(
            f"specific markup for {payload.from_currency} to {payload.to_currency} already exists"
        )
    markup = SpecificMarkupRate(**payload.model_dump())
    db.write_collection(SPECIFIC_MARKUPS_KEY, markups + [markup])
    return markup


def update_specific_markup(
    db: Database, markup_id: str, markup_percentage: float
) -> Optional[SpecificMarkupRate]:
    if markup_percentage < 0 or markup_percentage > MAX_MARKUP_PERCENTAGE:
        raise ValueError(
            f"markup percentage must be between 0 and {MAX_MARKUP_PERCENTAGE:g}"
        )
    markups = list_specific_markups(db)
    for i, m in enumerate(markups):
        if m.id == markup_id:
            markups[i] = m.model_copy(
                update={"markup_percentage": markup_percentage, "updated_at": utc_now()}
            )
            db.write_collection(SPECIFIC_MARKUPS_KEY, markups)
            return markups[i]
    return None


def delete_specific_markup(db: Database, markup_id: str) -> bool:
    markups = list_specific_markups(db)
    remaining = [m for m in markups if m.id != markup_id]
    if len(remaining) == len(markups):
        return False
    db.write_collection(SPECIFIC_MARKUPS_KEY, remaining)
    return True


# ------------- Conversion -------------


def build_converter(db: Database, reference_currency: str = REFERENCE_CURRENCY) -> CurrencyConverter:
    """Snapshot current rates and markups into a converter."""
    return CurrencyConverter(
        list_rates(db),
        global_markup=get_global_markup(db),
        specific_markups=list_specific_markups(db),
        reference_currency=reference_currency,
    )


# ------------- Refresh -------------


def get_last_fetched(db: Database) -> Optional[datetime]:
    raw = db.read_scalar(API_RATES_LAST_FETCHED_KEY)
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("ignoring invalid last-fetched timestamp %r", raw)
        return None


def seed_default_rates(db: Database) -> bool:
    """Add DEFAULT_RATES pairs when no rate is quoted from USD.

    Returns True when defaults were written.
    """
    rates = list_rates(db)
    if any(r.from_currency == REFERENCE_CURRENCY for r in rates):
        return False
    existing = {_pair_key(r) for r in rates}
    for code, value in DEFAULT_RATES.items():
        key = f"{REFERENCE_CURRENCY}-{code}"
        if key not in existing:
            rates.append(
                ExchangeRate(from_currency=REFERENCE_CURRENCY, to_currency=code, rate=value)
            )
    _save_rates(db, rates)
    logger.info("seeded default exchange rates")
    return True


def _provider_for(settings: "Settings") -> Optional[RateProvider]:
    if settings.exchange_rate_provider == "static":
        return make_rate_provider("static")
    if not settings.has_exchange_api_key:
        return None
    return make_rate_provider(
        "exchangerate-api",
        base_url=str(settings.exchange_api_base_url),
        api_key=settings.exchangerate_api_key,
        timeout=settings.http_timeout_seconds,
    )


def refresh_rates(
    db: Database,
    settings: "Settings",
    provider: Optional[RateProvider] = None,
) -> RefreshReport:
    """Pull latest reference-currency rates and upsert them for managed currencies.

    Without a provider (no API key) or on provider failure the stored rates are
    kept; defaults are seeded only when no reference-based rate exists.
    """
    reference = settings.reference_currency
    provider = provider or _provider_for(settings)
    if provider is None:
        logger.warning("ExchangeRate-API key is not configured; using stored/default rates")
        seeded = seed_default_rates(db)
        return RefreshReport(
            status="fallback",
            seeded_defaults=seeded,
            last_fetched=get_last_fetched(db),
            message="API key not configured",
        )
    try:
        latest = provider.fetch_latest(reference)
    except RateProviderError as e:
        logger.warning("rate refresh failed: %s", e)
        seeded = seed_default_rates(db)
        return RefreshReport(
            status="fallback",
            seeded_defaults=seeded,
            last_fetched=get_last_fetched(db),
            message=str(e),
        )

    rates = list_rates(db)
    by_pair = {_pair_key(r): i for i, r in enumerate(rates)}
    now = utc_now()
    updated: List[str] = []
    for code in all_currency_codes(db):
        if code == reference or code not in latest.rates:
            continue
        key = f"{reference}-{code}"
        if key in by_pair:
            idx = by_pair[key]
            rates[idx] = rates[idx].model_copy(
                update={"rate": latest.rates[code], "source": "api", "updated_at": now}
            )
        else:
            rates.append(
                ExchangeRate(
                    from_currency=reference,
                    to_currency=code,
                    rate=latest.rates[code],
                    source="api",
                    updated_at=now,
                )
            )
        updated.append(code)
    _save_rates(db, rates)

    last_fetched = now
    if latest.last_update_unix:
        last_fetched = datetime.fromtimestamp(latest.last_update_unix, tz=timezone.utc)
    db.write_scalar(API_RATES_LAST_FETCHED_KEY, last_fetched.isoformat())
    logger.info("refreshed %d exchange rates from %s", len(updated), provider.name)
    return RefreshReport(
        status="success", updated_currencies=updated, last_fetched=last_fetched
    )
