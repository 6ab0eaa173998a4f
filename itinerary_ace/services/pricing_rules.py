"""Date-dependent price selection for master service prices.

Weekday numbering follows the stored package data: 0=Sunday .. 6=Saturday.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from itinerary_ace.models.pricing import (
    ActivityPackageDefinition,
    HotelRoomTypeDefinition,
    RoomTypeSeasonalPrice,
    ServicePriceItem,
    SurchargePeriod,
)


def day_to_date(start_date: date, day: int) -> date:
    """Calendar date of itinerary day `day` (1-based)."""
    return start_date + timedelta(days=day - 1)


def sunday_based_weekday(d: date) -> int:
    return (d.weekday() + 1) % 7


def seasonal_price_for(
    room_type: HotelRoomTypeDefinition, on: date
) -> Optional[RoomTypeSeasonalPrice]:
    for season in room_type.seasonal_prices:
        if season.start_date <= on <= season.end_date:
            return season
    return None


def package_available(package: ActivityPackageDefinition, on: date) -> bool:
    if package.validity_start_date and on < package.validity_start_date:
        return False
    if package.validity_end_date and on > package.validity_end_date:
        return False
    if sunday_based_weekday(on) in package.closed_weekdays:
        return False
    return on not in package.specific_closed_dates


def select_package(
    service: ServicePriceItem, package_id: Optional[str], on: date
) -> Optional[ActivityPackageDefinition]:
    explicit = service.find_package(package_id)
    if explicit is not None:
        return explicit
    return next((p for p in service.activity_packages if package_available(p, on)), None)


def surcharge_for(periods: Iterable[SurchargePeriod], on: date) -> float:
    for period in periods:
        if period.start_date <= on <= period.end_date:
            return period.surcharge_amount
    return 0.0
