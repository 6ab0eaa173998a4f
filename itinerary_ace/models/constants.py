"""Domain constants and enumerations for validation."""

from typing import Tuple

REFERENCE_CURRENCY = "USD"

# System currencies; admins may add custom three-letter codes on top.
CURRENCIES: Tuple[str, ...] = (
    "USD",
    "EUR",
    "GBP",
    "THB",
    "JPY",
    "MYR",
    "SGD",
    "VND",
    "BDT",
)

SERVICE_CATEGORIES: Tuple[str, ...] = ("transfer", "activity", "hotel", "meal", "misc")

CATEGORY_LABELS = {
    "transfer": "Transfers",
    "activity": "Activities",
    "hotel": "Hotels",
    "meal": "Meals",
    "misc": "Miscs",
}

VEHICLE_TYPES: Tuple[str, ...] = (
    "Sedan",
    "MPV",
    "SUV",
    "Van",
    "Minibus",
    "Bus",
    "Ferry",
    "Longtail Boat",
    "Speedboat",
    "Motorbike Taxi",
    "Tuk-tuk",
    "Other",
)

TRIP_TYPES: Tuple[str, ...] = (
    "Leisure",
    "Business",
    "Honeymoon",
    "Family",
    "Adventure",
    "Cultural",
    "Cruise",
    "Group Tour",
    "Backpacking",
    "Luxury",
    "Other",
)

SPECIFIC_BUDGET_RANGE = "Specific Amount (see notes)"
BUDGET_RANGES: Tuple[str, ...] = (
    "Economy/Budget",
    "Mid-Range/Comfort",
    "Luxury/Premium",
    SPECIFIC_BUDGET_RANGE,
)

HOTEL_STAR_RATINGS: Tuple[str, ...] = (
    "Any",
    "2 Stars",
    "3 Stars",
    "4 Stars",
    "5 Stars",
    "Boutique/Unrated",
)

MEAL_PLAN_OPTIONS: Tuple[str, ...] = (
    "No Meal",
    "Breakfast Only",
    "Breakfast and Lunch/Dinner",
    "Breakfast, Lunch and Dinner",
)

QUOTATION_STATUSES: Tuple[str, ...] = (
    "New Request Submitted",
    "Quoted: Revision In Progress",
    "Quoted: Waiting for TA Feedback",
    "Quoted: Revision Requested",
    "Quoted: Re-quoted",
    "Quoted: Awaiting TA Approval",
    "Confirmed",
    "Deposit Pending",
    "Booked",
    "Documents Sent",
    "Trip In Progress",
    "Completed",
    "Cancelled",
)

OVERALL_BOOKING_STATUSES: Tuple[str, ...] = (
    "NotStarted",
    "InProgress",
    "PartiallyBooked",
    "FullyBooked",
    "Cancelled",
)

# Markup percentages (global and specific pair) are capped.
MAX_MARKUP_PERCENTAGE = 50.0
MIN_RATE = 0.000001
