"""Master service price list models.

A ServicePriceItem is discriminated by `category`; each category carries a
different price shape (seasonal room rates, activity packages with validity
windows, vehicle options with surcharge periods, simple adult/child prices).
"""

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import CurrencyCode, new_id
from .constants import SERVICE_CATEGORIES, VEHICLE_TYPES

ServiceCategory = Literal[SERVICE_CATEGORIES]  # type: ignore[valid-type]
VehicleType = Literal[VEHICLE_TYPES]  # type: ignore[valid-type]


def _end_not_before_start(start: Optional[date], end: Optional[date], label: str) -> None:
    if start and end and end < start:
        raise ValueError(f"{label} end date cannot be before start date")


class VehicleOption(BaseModel):
    id: str = Field(default_factory=new_id)
    vehicle_type: VehicleType
    price: float = Field(..., ge=0)
    max_passengers: int = Field(..., ge=1)
    notes: Optional[str] = None


class SurchargePeriod(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    start_date: date
    end_date: date
    surcharge_amount: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _range(self) -> "SurchargePeriod":
        _end_not_before_start(self.start_date, self.end_date, "surcharge period")
        return self


class ActivityPackageDefinition(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    price1: float = Field(..., ge=0)  # adult
    price2: Optional[float] = Field(None, ge=0)  # child
    notes: Optional[str] = None
    validity_start_date: Optional[date] = None
    validity_end_date: Optional[date] = None
    closed_weekdays: List[int] = Field(default_factory=list)  # 0=Sun .. 6=Sat
    specific_closed_dates: List[date] = Field(default_factory=list)

    @field_validator("closed_weekdays")
    @classmethod
    def _weekday_range(cls, days: List[int]) -> List[int]:
        if any(d < 0 or d > 6 for d in days):
            raise ValueError("closed weekdays must be between 0 (Sun) and 6 (Sat)")
        return sorted(set(days))

    @model_validator(mode="after")
    def _range(self) -> "ActivityPackageDefinition":
        _end_not_before_start(
            self.validity_start_date, self.validity_end_date, "package validity"
        )
        return self


class HotelCharacteristic(BaseModel):
    id: str = Field(default_factory=new_id)
    key: str
    value: str


class RoomTypeSeasonalPrice(BaseModel):
    id: str = Field(default_factory=new_id)
    season_name: Optional[str] = None
    start_date: date
    end_date: date
    rate: float = Field(..., ge=0)  # per night
    extra_bed_rate: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def _range(self) -> "RoomTypeSeasonalPrice":
        _end_not_before_start(self.start_date, self.end_date, "season")
        return self


class HotelRoomTypeDefinition(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    extra_bed_allowed: bool = False
    notes: Optional[str] = None
    seasonal_prices: List[RoomTypeSeasonalPrice] = Field(default_factory=list)
    characteristics: List[HotelCharacteristic] = Field(default_factory=list)


class HotelDefinition(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    province: Optional[str] = None
    room_types: List[HotelRoomTypeDefinition] = Field(default_factory=list)


class ServicePriceIn(BaseModel):
    name: str
    category: ServiceCategory
    currency: CurrencyCode
    unit_description: str = ""
    province: Optional[str] = None
    country_id: Optional[str] = None
    notes: Optional[str] = None
    sub_category: Optional[str] = None

    # ticket transfers and non-transfer services
    price1: Optional[float] = Field(None, ge=0)
    price2: Optional[float] = Field(None, ge=0)

    # transfers
    transfer_mode: Optional[Literal["ticket", "vehicle"]] = None
    vehicle_options: List[VehicleOption] = Field(default_factory=list)
    max_passengers: Optional[int] = Field(None, ge=1)
    surcharge_periods: List[SurchargePeriod] = Field(default_factory=list)

    # misc
    cost_assignment: Optional[Literal["perPerson", "total"]] = None

    hotel_details: Optional[HotelDefinition] = None
    activity_packages: List[ActivityPackageDefinition] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name cannot be empty")
        return value.strip()

    @model_validator(mode="after")
    def _category_shape(self) -> "ServicePriceIn":
        if self.category == "hotel":
            if self.hotel_details is None or not self.hotel_details.room_types:
                raise ValueError("hotel services need hotel_details with room types")
        elif self.category == "transfer":
            mode = self.transfer_mode or "ticket"
            if mode == "vehicle" and not self.vehicle_options:
                raise ValueError("vehicle transfers need at least one vehicle option")
            if mode == "ticket" and self.price1 is None:
                raise ValueError("ticket transfers need price1 (adult price)")
        elif self.category == "activity":
            if self.price1 is None and not self.activity_packages:
                raise ValueError("activities need price1 or at least one package")
        elif self.price1 is None:
            raise ValueError(f"{self.category} services need price1")
        return self

    def find_vehicle_option(self, option_id: Optional[str]) -> Optional[VehicleOption]:
        if not option_id:
            return None
        return next((v for v in self.vehicle_options if v.id == option_id), None)

    def find_package(self, package_id: Optional[str]) -> Optional[ActivityPackageDefinition]:
        if not package_id:
            return None
        return next((p for p in self.activity_packages if p.id == package_id), None)

    def find_room_type(self, room_type_id: str) -> Optional[HotelRoomTypeDefinition]:
        if self.hotel_details is None:
            return None
        return next((r for r in self.hotel_details.room_types if r.id == room_type_id), None)


class ServicePriceItem(ServicePriceIn):
    id: str = Field(default_factory=new_id)
