"""Seed data factories for first-run collections.

Each factory returns fresh model instances; `Database.read_collection` writes
them when a collection key is missing or its stored value is corrupt. Ids of
countries, agencies and agents are fixed so other seeds can reference them.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import List

from itinerary_ace.models.agent import Agency, AgentAddress, AgentProfile
from itinerary_ace.models.common import utc_now
from itinerary_ace.models.geo import CountryItem, ProvinceItem
from itinerary_ace.models.pricing import (
    ActivityPackageDefinition,
    HotelDefinition,
    HotelRoomTypeDefinition,
    RoomTypeSeasonalPrice,
    ServicePriceItem,
    SurchargePeriod,
    VehicleOption,
)
from itinerary_ace.models.quotation import (
    AccommodationPrefs,
    ActivityPrefs,
    ClientInfo,
    FlightPrefs,
    MealPrefs,
    QuotationRequest,
    QuotationRequestIn,
    TripDetails,
    make_quotation_id,
)

THAILAND_ID = "country_thailand"
MALAYSIA_ID = "country_malaysia"
SINGAPORE_ID = "country_singapore"
VIETNAM_ID = "country_vietnam"
BANGLADESH_ID = "country_bangladesh"

AGENCY_GLOBAL_ID = "agency_fixed_global"
AGENCY_LOCAL_ID = "agency_fixed_local"
AGENCY_BENGAL_ID = "agency_fixed_bengal"

AGENT_JOHN_ID = "agent_fixed_john"
AGENT_ALICE_ID = "agent_fixed_alice"
AGENT_BOB_ID = "agent_fixed_bob"
AGENT_FATIMA_ID = "agent_fixed_fatima"

THAI_PROVINCES = (
    "Bangkok",
    "Chiang Mai",
    "Phuket",
    "Pattaya (Chonburi)",
    "Krabi",
    "Surat Thani (Koh Samui, Koh Phangan)",
    "Ayutthaya",
    "Sukhothai",
    "Chiang Rai",
    "Kanchanaburi",
)


def default_countries() -> List[CountryItem]:
    return [
        CountryItem(id=THAILAND_ID, name="Thailand", default_currency="THB"),
        CountryItem(id=MALAYSIA_ID, name="Malaysia", default_currency="MYR"),
        CountryItem(id=SINGAPORE_ID, name="Singapore", default_currency="USD"),
        CountryItem(id=VIETNAM_ID, name="Vietnam", default_currency="USD"),
        CountryItem(id=BANGLADESH_ID, name="Bangladesh", default_currency="BDT"),
    ]


def default_provinces() -> List[ProvinceItem]:
    return [ProvinceItem(name=name, country_id=THAILAND_ID) for name in THAI_PROVINCES]


def default_service_prices() -> List[ServicePriceItem]:
    year = date.today().year
    return [
        ServicePriceItem(
            id="svc_bkk_airport_transfer",
            name="Suvarnabhumi Airport (BKK) to Bangkok City Hotel",
            province="Bangkok",
            country_id=THAILAND_ID,
            category="transfer",
            transfer_mode="vehicle",
            currency="THB",
            unit_description="per vehicle",
            vehicle_options=[
                VehicleOption(vehicle_type="Sedan", price=1000, max_passengers=3, notes="2 luggage"),
                VehicleOption(vehicle_type="Van", price=1500, max_passengers=8, notes="5 luggage"),
            ],
            surcharge_periods=[
                SurchargePeriod(
                    name="New Year",
                    start_date=date(year, 12, 24),
                    end_date=date(year, 12, 31),
                    surcharge_amount=500,
                )
            ],
        ),
        ServicePriceItem(
            id="svc_bts_day_pass",
            name="BTS Skytrain Day Pass",
            province="Bangkok",
            country_id=THAILAND_ID,
            category="transfer",
            transfer_mode="ticket",
            currency="THB",
            unit_description="per person",
            price1=150,
            notes="Unlimited rides for 1 day",
        ),
        ServicePriceItem(
            id="svc_grand_palace",
            name="Grand Palace & Wat Phra Kaew Entrance",
            province="Bangkok",
            country_id=THAILAND_ID,
            category="activity",
            sub_category="Entrance Fee",
            currency="THB",
            unit_description="per person",
            price1=500,
            price2=250,
            notes="Child price for under 120cm",
        ),
        ServicePriceItem(
            id="svc_river_cruise",
            name="Chao Phraya River Cruise",
            province="Bangkok",
            country_id=THAILAND_ID,
            category="activity",
            sub_category="Cruise & Dinner",
            currency="THB",
            unit_description="per person",
            activity_packages=[
                ActivityPackageDefinition(
                    name="Evening Dinner Cruise",
                    price1=1800,
                    price2=1200,
                    notes="Includes international buffet",
                ),
                ActivityPackageDefinition(
                    name="Sunset Cocktail Cruise",
                    price1=1400,
                    closed_weekdays=[1],
                    notes="Closed on Mondays",
                ),
            ],
        ),
        ServicePriceItem(
            id="svc_riverside_hotel",
            name="Riverside Luxury Hotel",
            province="Bangkok",
            country_id=THAILAND_ID,
            category="hotel",
            currency="THB",
            unit_description="per night",
            notes="5-star, riverside location",
            hotel_details=HotelDefinition(
                name="Riverside Luxury Hotel",
                province="Bangkok",
                room_types=[
                    HotelRoomTypeDefinition(
                        name="Deluxe River View",
                        extra_bed_allowed=True,
                        seasonal_prices=[
                            RoomTypeSeasonalPrice(
                                season_name="High",
                                start_date=date(year, 11, 1),
                                end_date=date(year + 1, 2, 28),
                                rate=6500,
                                extra_bed_rate=1200,
                            ),
                            RoomTypeSeasonalPrice(
                                season_name="Low",
                                start_date=date(year, 5, 1),
                                end_date=date(year, 9, 30),
                                rate=4000,
                                extra_bed_rate=800,
                            ),
                        ],
                    ),
                    HotelRoomTypeDefinition(
                        name="Standard City View",
                        seasonal_prices=[
                            RoomTypeSeasonalPrice(
                                start_date=date(year, 1, 1),
                                end_date=date(year, 12, 31),
                                rate=3200,
                            )
                        ],
                    ),
                ],
            ),
        ),
        ServicePriceItem(
            id="svc_street_food_tour",
            name="Street Food Tour (Chinatown Evening)",
            province="Bangkok",
            country_id=THAILAND_ID,
            category="meal",
            sub_category="Guided Food Tour",
            currency="THB",
            unit_description="per person",
            price1=800,
            price2=500,
        ),
        ServicePriceItem(
            id="svc_thai_massage",
            name="Thai Massage (Traditional, 1 hour)",
            province="Bangkok",
            country_id=THAILAND_ID,
            category="misc",
            sub_category="Wellness",
            currency="THB",
            unit_description="per person",
            price1=300,
            cost_assignment="perPerson",
        ),
    ]


def default_agencies() -> List[Agency]:
    return [
        Agency(
            id=AGENCY_GLOBAL_ID,
            name="Global Travel Experts",
            main_address=AgentAddress(
                street="100 Sukhumvit Rd",
                city="Bangkok",
                state_province="Bangkok",
                postal_code="10110",
                country_id=THAILAND_ID,
            ),
            contact_email="contact@globaltravel.com",
            contact_phone="+66 2 555 0100",
        ),
        Agency(
            id=AGENCY_LOCAL_ID,
            name="Local Adventures Inc.",
            main_address=AgentAddress(
                street="50 Jalan Ampang",
                city="Kuala Lumpur",
                state_province="WP Kuala Lumpur",
                postal_code="50450",
                country_id=MALAYSIA_ID,
            ),
            contact_email="info@localadventures.my",
            contact_phone="+60 3 555 0200",
        ),
        Agency(
            id=AGENCY_BENGAL_ID,
            name="Bengal Voyager",
            main_address=AgentAddress(
                street="75 Gulshan Ave",
                city="Dhaka",
                state_province="Dhaka",
                postal_code="1212",
                country_id=BANGLADESH_ID,
            ),
            contact_email="support@bengalvoyager.com.bd",
            contact_phone="+880 2 555 0300",
        ),
    ]


def default_agents() -> List[AgentProfile]:
    return [
        AgentProfile(
            id=AGENT_JOHN_ID,
            agency_id=AGENCY_GLOBAL_ID,
            full_name="John Doe (GTE)",
            email="john.doe@globaltravel.com",
            phone_number="+66 81 123 4567",
            preferred_currency="THB",
            specializations="Luxury Travel, Thailand & SE Asia",
            years_of_experience=10,
        ),
        AgentProfile(
            id=AGENT_ALICE_ID,
            agency_id=AGENCY_GLOBAL_ID,
            full_name="Alice Smith (GTE)",
            email="alice.smith@globaltravel.com",
            preferred_currency="USD",
            specializations="Cultural Tours, Indochina",
            years_of_experience=7,
        ),
        AgentProfile(
            id=AGENT_BOB_ID,
            agency_id=AGENCY_LOCAL_ID,
            full_name="Bob Johnson (LAI)",
            email="bob.johnson@localadventures.my",
            preferred_currency="MYR",
            specializations="Adventure Tours, Malaysia & Borneo",
            years_of_experience=5,
        ),
        AgentProfile(
            id=AGENT_FATIMA_ID,
            agency_id=AGENCY_BENGAL_ID,
            full_name="Fatima Ahmed (BV)",
            email="fatima.ahmed@bengalvoyager.com.bd",
            preferred_currency="BDT",
            specializations="Heritage Tours, Bangladesh",
            years_of_experience=8,
        ),
    ]


def default_quotations() -> List[QuotationRequest]:
    now = utc_now()
    requests = [
        (
            "GTE",
            QuotationRequestIn(
                agent_id=AGENT_JOHN_ID,
                client_info=ClientInfo(adults=2),
                trip_details=TripDetails(
                    preferred_country_ids=[THAILAND_ID],
                    preferred_province_names=["Bangkok", "Phuket"],
                    preferred_start_date=(now + timedelta(days=30)).date(),
                    duration_days=7,
                    trip_type="Leisure",
                    budget_range="Mid-Range/Comfort",
                    budget_currency="THB",
                ),
                accommodation_prefs=AccommodationPrefs(
                    hotel_star_rating="4 Stars", room_preferences="King Bed, Sea View if possible"
                ),
                activity_prefs=ActivityPrefs(
                    requested_activities="Grand Palace Tour, Phi Phi Island Trip"
                ),
                flight_prefs=FlightPrefs(airport_transfers_required=True),
                meal_prefs=MealPrefs(meal_plan="Breakfast Only"),
            ),
        ),
        (
            "LAI",
            QuotationRequestIn(
                agent_id=AGENT_BOB_ID,
                client_info=ClientInfo(adults=2, children=2, child_ages="6,10"),
                trip_details=TripDetails(
                    preferred_country_ids=[THAILAND_ID, MALAYSIA_ID],
                    preferred_province_names=["Krabi", "Langkawi", "Kuala Lumpur"],
                    preferred_start_date=(now + timedelta(days=60)).date(),
                    duration_days=10,
                    trip_type="Family",
                    budget_range="Specific Amount (see notes)",
                    budget_amount=5000,
                    budget_currency="USD",
                ),
                accommodation_prefs=AccommodationPrefs(
                    hotel_star_rating="4 Stars", room_preferences="Family room or connecting rooms"
                ),
                flight_prefs=FlightPrefs(
                    airport_transfers_required=True, activity_transfers_required=True
                ),
            ),
        ),
        (
            "BV",
            QuotationRequestIn(
                agent_id=AGENT_FATIMA_ID,
                client_info=ClientInfo(adults=2),
                trip_details=TripDetails(
                    preferred_country_ids=[THAILAND_ID],
                    preferred_province_names=["Phuket", "Chiang Mai"],
                    preferred_start_date=(now + timedelta(days=90)).date(),
                    duration_days=14,
                    trip_type="Luxury",
                    budget_range="Luxury/Premium",
                    budget_currency="USD",
                ),
                accommodation_prefs=AccommodationPrefs(
                    hotel_star_rating="5 Stars", room_preferences="Villa with private pool, or suite"
                ),
                meal_prefs=MealPrefs(meal_plan="Breakfast and Lunch/Dinner"),
            ),
        ),
    ]
    seeded = []
    for index, (initials, payload) in enumerate(requests):
        # stagger request dates, oldest first
        submitted = now - timedelta(days=(len(requests) - index) * 10)
        seeded.append(
            QuotationRequest(
                id=make_quotation_id(initials, submitted),
                request_date=submitted,
                updated_at=submitted,
                **payload.model_dump(),
            )
        )
    return seeded
