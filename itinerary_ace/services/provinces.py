"""Province master data."""

from __future__ import annotations

from typing import List, Optional

from itinerary_ace.db.dal import PROVINCES_KEY, Database
from itinerary_ace.db.seed import default_provinces
from itinerary_ace.models.geo import ProvinceIn, ProvinceItem
from .countries import get_country


def list_provinces(db: Database, country_id: Optional[str] = None) -> List[ProvinceItem]:
    provinces = db.read_collection(PROVINCES_KEY, ProvinceItem, seed=default_provinces)
    if country_id is not None:
        provinces = [p for p in provinces if p.country_id == country_id]
    return sorted(provinces, key=lambda p: p.name.lower())


def get_province(db: Database, province_id: str) -> Optional[ProvinceItem]:
    return next((p for p in list_provinces(db) if p.id == province_id), None)


def _validate(db: Database, provinces: List[ProvinceItem], payload: ProvinceIn, own_id: Optional[str] = None) -> None:
    if get_country(db, payload.country_id) is None:
        raise ValueError(f"country '{payload.country_id}' does not exist")
    for p in provinces:
        if p.id != own_id and p.country_id == payload.country_id and p.name.lower() == payload.name.lower():
            raise ValueError(f"province '{payload.name}' already exists in this country")


def add_province(db: Database, payload: ProvinceIn) -> ProvinceItem:
    provinces = list_provinces(db)
    _validate(db, provinces, payload)
    province = ProvinceItem(**payload.model_dump())
    db.write_collection(PROVINCES_KEY, provinces + [province])
    return province


def update_province(db: Database, province_id: str, payload: ProvinceIn) -> Optional[ProvinceItem]:
    provinces = list_provinces(db)
    for i, p in enumerate(provinces):
        if p.id == province_id:
            _validate(db, provinces, payload, own_id=province_id)
            provinces[i] = ProvinceItem(id=province_id, **payload.model_dump())
            db.write_collection(PROVINCES_KEY, provinces)
            return provinces[i]
    return None


def delete_province(db: Database, province_id: str) -> bool:
    provinces = list_provinces(db)
    remaining = [p for p in provinces if p.id != province_id]
    if len(remaining) == len(provinces):
        return False
    db.write_collection(PROVINCES_KEY, remaining)
    return True
