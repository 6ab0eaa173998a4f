from datetime import date

from itinerary_ace.models.pricing import (
    ActivityPackageDefinition,
    HotelRoomTypeDefinition,
    RoomTypeSeasonalPrice,
    ServicePriceItem,
    SurchargePeriod,
)
from itinerary_ace.services.pricing_rules import (
    day_to_date,
    package_available,
    seasonal_price_for,
    select_package,
    sunday_based_weekday,
    surcharge_for,
)


def test_day_to_date_is_one_based():
    assert day_to_date(date(2025, 3, 1), 1) == date(2025, 3, 1)
    assert day_to_date(date(2025, 3, 1), 3) == date(2025, 3, 3)


def test_weekday_numbering_starts_on_sunday():
    assert sunday_based_weekday(date(2025, 6, 1)) == 0  # Sunday
    assert sunday_based_weekday(date(2025, 6, 2)) == 1  # Monday
    assert sunday_based_weekday(date(2025, 6, 7)) == 6  # Saturday


def test_seasonal_price_boundaries_are_inclusive():
    room = HotelRoomTypeDefinition(
        name="Deluxe",
        seasonal_prices=[
            RoomTypeSeasonalPrice(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31), rate=100),
            RoomTypeSeasonalPrice(start_date=date(2025, 1, 15), end_date=date(2025, 2, 28), rate=200),
        ],
    )
    assert seasonal_price_for(room, date(2025, 1, 31)).rate == 100
    assert seasonal_price_for(room, date(2025, 2, 1)).rate == 200
    assert seasonal_price_for(room, date(2025, 3, 1)) is None


def test_package_availability_rules():
    pkg = ActivityPackageDefinition(
        name="Sunset",
        price1=10,
        validity_start_date=date(2025, 6, 1),
        validity_end_date=date(2025, 6, 30),
        closed_weekdays=[1],
        specific_closed_dates=[date(2025, 6, 10)],
    )
    assert package_available(pkg, date(2025, 6, 1))
    assert not package_available(pkg, date(2025, 5, 31))
    assert not package_available(pkg, date(2025, 7, 1))
    assert not package_available(pkg, date(2025, 6, 2))  # Monday
    assert not package_available(pkg, date(2025, 6, 10))


def test_select_package_prefers_explicit_choice_then_first_available():
    closed_monday = ActivityPackageDefinition(name="A", price1=10, closed_weekdays=[1])
    always = ActivityPackageDefinition(name="B", price1=20)
    service = ServicePriceItem(
        name="Cruise",
        category="activity",
        currency="THB",
        activity_packages=[closed_monday, always],
    )
    monday = date(2025, 6, 2)
    assert select_package(service, closed_monday.id, monday) is closed_monday
    assert select_package(service, None, monday) is always
    assert select_package(service, "missing", date(2025, 6, 3)) is closed_monday


def test_surcharge_uses_first_matching_period():
    periods = [
        SurchargePeriod(name="Peak", start_date=date(2025, 12, 20), end_date=date(2025, 12, 31), surcharge_amount=300),
        SurchargePeriod(name="NYE", start_date=date(2025, 12, 31), end_date=date(2025, 12, 31), surcharge_amount=900),
    ]
    assert surcharge_for(periods, date(2025, 12, 31)) == 300
    assert surcharge_for(periods, date(2025, 12, 1)) == 0.0
