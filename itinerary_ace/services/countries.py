"""Country master data."""

from __future__ import annotations

import logging
from typing import List, Optional

from itinerary_ace.core.errors import ReferenceInUseError
from itinerary_ace.db.dal import COUNTRIES_KEY, PROVINCES_KEY, Database
from itinerary_ace.db.seed import default_countries, default_provinces
from itinerary_ace.models.geo import CountryIn, CountryItem, ProvinceItem

logger = logging.getLogger("itinerary_ace.countries")


def list_countries(db: Database) -> List[CountryItem]:
    countries = db.read_collection(COUNTRIES_KEY, CountryItem, seed=default_countries)
    return sorted(countries, key=lambda c: c.name.lower())


def get_country(db: Database, country_id: str) -> Optional[CountryItem]:
    return next((c for c in list_countries(db) if c.id == country_id), None)


def get_country_by_name(db: Database, name: str) -> Optional[CountryItem]:
    wanted = name.strip().lower()
    return next((c for c in list_countries(db) if c.name.lower() == wanted), None)


def _ensure_unique_name(countries: List[CountryItem], name: str, own_id: Optional[str] = None) -> None:
    if any(c.name.lower() == name.lower() and c.id != own_id for c in countries):
        raise ValueError(f"country '{name}' already exists")


def add_country(db: Database, payload: CountryIn) -> CountryItem:
    countries = list_countries(db)
    _ensure_unique_name(countries, payload.name)
    country = CountryItem(**payload.model_dump())
    db.write_collection(COUNTRIES_KEY, countries + [country])
    return country


def update_country(db: Database, country_id: str, payload: CountryIn) -> Optional[CountryItem]:
    countries = list_countries(db)
    for i, c in enumerate(countries):
        if c.id == country_id:
            _ensure_unique_name(countries, payload.name, own_id=country_id)
            countries[i] = CountryItem(id=country_id, **payload.model_dump())
            db.write_collection(COUNTRIES_KEY, countries)
            return countries[i]
    return None


def delete_country(db: Database, country_id: str) -> bool:
    countries = list_countries(db)
    if not any(c.id == country_id for c in countries):
        return False
    provinces = db.read_collection(PROVINCES_KEY, ProvinceItem, seed=default_provinces)
    in_use = [p.name for p in provinces if p.country_id == country_id]
    if in_use:
        raise ReferenceInUseError(
            f"country is referenced by {len(in_use)} province(s): {', '.join(sorted(in_use))}"
        )
    db.write_collection(COUNTRIES_KEY, [c for c in countries if c.id != country_id])
    logger.info("deleted country %s", country_id)
    return True
