"""Master service price list."""

from __future__ import annotations

import logging
from typing import List, Optional

from itinerary_ace.db.dal import SERVICE_PRICES_KEY, Database
from itinerary_ace.db.seed import default_service_prices
from itinerary_ace.models.pricing import ServicePriceIn, ServicePriceItem
from .currencies import all_currency_codes

logger = logging.getLogger("itinerary_ace.service_prices")


def list_service_prices(
    db: Database,
    category: Optional[str] = None,
    province: Optional[str] = None,
    currency: Optional[str] = None,
) -> List[ServicePriceItem]:
    items = db.read_collection(SERVICE_PRICES_KEY, ServicePriceItem, seed=default_service_prices)
    if category:
        items = [s for s in items if s.category == category]
    if province:
        wanted = province.lower()
        # province-less services apply everywhere
        items = [s for s in items if not s.province or s.province.lower() == wanted]
    if currency:
        items = [s for s in items if s.currency == currency.upper()]
    return items


def get_service_price(db: Database, service_id: str) -> Optional[ServicePriceItem]:
    return next((s for s in list_service_prices(db) if s.id == service_id), None)


def _require_managed_currency(db: Database, code: str) -> None:
    if code not in all_currency_codes(db):
        raise ValueError(f"currency '{code}' is not a system or custom currency")


def add_service_price(db: Database, payload: ServicePriceIn) -> ServicePriceItem:
    _require_managed_currency(db, payload.currency)
    items = list_service_prices(db)
    item = ServicePriceItem(**payload.model_dump())
    db.write_collection(SERVICE_PRICES_KEY, items + [item])
    logger.info("added %s service %s", item.category, item.id)
    return item


def update_service_price(
    db: Database, service_id: str, payload: ServicePriceIn
) -> Optional[ServicePriceItem]:
    items = list_service_prices(db)
    for i, s in enumerate(items):
        if s.id == service_id:
            _require_managed_currency(db, payload.currency)
            items[i] = ServicePriceItem(id=service_id, **payload.model_dump())
            db.write_collection(SERVICE_PRICES_KEY, items)
            return items[i]
    return None


def delete_service_price(db: Database, service_id: str) -> bool:
    items = list_service_prices(db)
    remaining = [s for s in items if s.id != service_id]
    if len(remaining) == len(items):
        return False
    db.write_collection(SERVICE_PRICES_KEY, remaining)
    return True
