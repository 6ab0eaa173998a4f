from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import CurrencyCode, new_id, utc_now
from .constants import OVERALL_BOOKING_STATUSES


class Traveler(BaseModel):
    id: str  # e.g. "A1", "C1"
    label: str  # e.g. "Adult 1", "Child 1"
    type: Literal["adult", "child"]


class PaxDetails(BaseModel):
    adults: int = Field(2, ge=1)
    children: int = Field(0, ge=0)
    currency: CurrencyCode = "THB"  # billing currency


class TripSettings(BaseModel):
    num_days: int = Field(3, ge=1, le=365)
    start_date: date
    selected_countries: List[str] = Field(default_factory=list)
    selected_provinces: List[str] = Field(default_factory=list)
    budget: Optional[float] = Field(None, ge=0)


class BaseItem(BaseModel):
    id: str = Field(default_factory=new_id)
    day: int = Field(..., ge=1)
    name: str
    note: Optional[str] = None
    excluded_traveler_ids: List[str] = Field(default_factory=list)
    selected_service_price_id: Optional[str] = None
    province: Optional[str] = None
    country_id: Optional[str] = None
    # source currency for custom prices; defaults to the billing currency
    currency: Optional[CurrencyCode] = None


class TransferItem(BaseItem):
    type: Literal["transfer"] = "transfer"
    mode: Literal["ticket", "vehicle"] = "ticket"
    adult_ticket_price: Optional[float] = Field(None, ge=0)
    child_ticket_price: Optional[float] = Field(None, ge=0)
    vehicle_type: Optional[str] = None
    cost_per_vehicle: Optional[float] = Field(None, ge=0)
    vehicles: Optional[int] = Field(None, ge=1)
    selected_vehicle_option_id: Optional[str] = None


class ActivityItem(BaseItem):
    type: Literal["activity"] = "activity"
    adult_price: float = Field(0, ge=0)
    child_price: Optional[float] = Field(None, ge=0)
    end_day: Optional[int] = Field(None, ge=1)
    selected_package_id: Optional[str] = None

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "ActivityItem":
        if self.end_day is not None and self.end_day < self.day:
            raise ValueError("end_day cannot be before day")
        return self


class SelectedHotelRoomConfiguration(BaseModel):
    id: str = Field(default_factory=new_id)
    room_type_definition_id: Optional[str] = None
    room_type_name_cache: str = ""
    num_rooms: int = Field(1, ge=0)
    extra_beds: int = Field(0, ge=0)
    assigned_traveler_ids: List[str] = Field(default_factory=list)
    # manual nightly rates used when no seasonal price covers a night
    room_rate: Optional[float] = Field(None, ge=0)
    extra_bed_rate: Optional[float] = Field(None, ge=0)


class HotelItem(BaseItem):
    type: Literal["hotel"] = "hotel"
    checkout_day: int = Field(..., ge=1)
    hotel_definition_id: Optional[str] = None
    selected_rooms: List[SelectedHotelRoomConfiguration] = Field(default_factory=list)
    children_sharing_bed: bool = False


class MealItem(BaseItem):
    type: Literal["meal"] = "meal"
    adult_meal_price: float = Field(0, ge=0)
    child_meal_price: Optional[float] = Field(None, ge=0)
    total_meals: int = Field(1, ge=0)


class MiscItem(BaseItem):
    type: Literal["misc"] = "misc"
    unit_cost: float = Field(0, ge=0)
    quantity: int = Field(1, ge=1)
    cost_assignment: Literal["perPerson", "total"] = "perPerson"


ItineraryItem = Annotated[
    Union[TransferItem, ActivityItem, HotelItem, MealItem, MiscItem],
    Field(discriminator="type"),
]


class DayItinerary(BaseModel):
    items: List[ItineraryItem] = Field(default_factory=list)


OverallBookingStatus = Literal[OVERALL_BOOKING_STATUSES]  # type: ignore[valid-type]


class TripData(BaseModel):
    id: str
    itinerary_name: str
    client_name: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    settings: TripSettings
    pax: PaxDetails
    travelers: List[Traveler] = Field(default_factory=list)
    days: Dict[int, DayItinerary] = Field(default_factory=dict)
    quotation_request_id: Optional[str] = None
    version: int = Field(1, ge=1)
    overall_booking_status: OverallBookingStatus = "NotStarted"

    def iter_items(self):
        for day_number in sorted(self.days):
            yield from self.days[day_number].items

    def find_item(self, item_id: str):
        for day in self.days.values():
            for item in day.items:
                if item.id == item_id:
                    return item
        return None


class ItineraryMetadata(BaseModel):
    id: str
    itinerary_name: str
    client_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ItineraryCreate(BaseModel):
    itinerary_name: Optional[str] = None
    client_name: Optional[str] = None
    quotation_request_id: Optional[str] = None
    settings: Optional[TripSettings] = None
    pax: Optional[PaxDetails] = None


class TripSettingsUpdate(BaseModel):
    num_days: Optional[int] = Field(None, ge=1, le=365)
    start_date: Optional[date] = None
    selected_countries: Optional[List[str]] = None
    selected_provinces: Optional[List[str]] = None
    budget: Optional[float] = Field(None, ge=0)


class PaxUpdate(BaseModel):
    adults: Optional[int] = Field(None, ge=1)
    children: Optional[int] = Field(None, ge=0)
    currency: Optional[CurrencyCode] = None


class ItineraryUpdate(BaseModel):
    itinerary_name: Optional[str] = None
    client_name: Optional[str] = None
    overall_booking_status: Optional[OverallBookingStatus] = None
    version: Optional[int] = Field(None, ge=1)

    @field_validator("itinerary_name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("itinerary_name cannot be empty")
        return value.strip() if value is not None else None


# Cost summary ---------------------------------------------------------


class HotelOccupancyDetail(BaseModel):
    room_type_name: str
    num_rooms: int
    nights: int
    extra_beds: int = 0
    characteristics: Optional[str] = None
    assigned_traveler_labels: str
    total_room_block_cost: float


class DetailedSummaryItem(BaseModel):
    id: str
    type: str
    day: Optional[int] = None
    name: str
    note: Optional[str] = None
    province: Optional[str] = None
    configuration_details: str
    excluded_travelers: str
    adult_cost: float
    child_cost: float
    total_cost: float
    source_currency: str
    conversion_rate: float
    occupancy_details: Optional[List[HotelOccupancyDetail]] = None
    warnings: List[str] = Field(default_factory=list)


class CostSummary(BaseModel):
    billing_currency: str
    grand_total: float
    per_person_totals: Dict[str, float]
    category_totals: Dict[str, float]
    detailed_items: List[DetailedSummaryItem]
