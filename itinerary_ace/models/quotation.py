"""Quotation request models submitted by travel agents."""

from __future__ import annotations

import secrets
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .common import CurrencyCode, utc_now
from .constants import (
    BUDGET_RANGES,
    HOTEL_STAR_RATINGS,
    MEAL_PLAN_OPTIONS,
    QUOTATION_STATUSES,
    SPECIFIC_BUDGET_RANGE,
    TRIP_TYPES,
)

QuotationStatus = Literal[QUOTATION_STATUSES]  # type: ignore[valid-type]


class ClientInfo(BaseModel):
    adults: int = Field(..., ge=1)
    children: int = Field(0, ge=0)
    child_ages: Optional[str] = None  # comma-separated, e.g. "5, 8"

    @model_validator(mode="after")
    def _ages_when_children(self) -> "ClientInfo":
        if self.children > 0 and not (self.child_ages or "").strip():
            raise ValueError(
                "please provide ages for children if number of children is greater than 0"
            )
        return self


class TripDetails(BaseModel):
    preferred_country_ids: List[str] = Field(..., min_length=1)
    preferred_province_names: List[str] = Field(default_factory=list)
    preferred_start_date: Optional[date] = None
    preferred_end_date: Optional[date] = None
    duration_days: Optional[int] = Field(None, ge=1)
    duration_nights: Optional[int] = Field(None, ge=0)
    trip_type: Optional[Literal[TRIP_TYPES]] = None  # type: ignore[valid-type]
    budget_range: Optional[Literal[BUDGET_RANGES]] = None  # type: ignore[valid-type]
    budget_amount: Optional[float] = Field(None, gt=0)
    budget_currency: CurrencyCode = "USD"

    @model_validator(mode="after")
    def _cross_field_rules(self) -> "TripDetails":
        start, end = self.preferred_start_date, self.preferred_end_date
        if start and end and end < start:
            raise ValueError("end date cannot be before start date")
        if self.budget_range == SPECIFIC_BUDGET_RANGE and self.budget_amount is None:
            raise ValueError(
                "please specify the budget amount if 'Specific Amount' is selected"
            )
        return self


class AccommodationPrefs(BaseModel):
    hotel_star_rating: Literal[HOTEL_STAR_RATINGS] = "3 Stars"  # type: ignore[valid-type]
    room_preferences: Optional[str] = None
    specific_hotel_requests: Optional[str] = None


class ActivityPrefs(BaseModel):
    requested_activities: Optional[str] = None


class FlightPrefs(BaseModel):
    airport_transfers_required: bool = False
    activity_transfers_required: bool = False


class MealPrefs(BaseModel):
    meal_plan: Optional[Literal[MEAL_PLAN_OPTIONS]] = None  # type: ignore[valid-type]


class QuotationRequestIn(BaseModel):
    agent_id: Optional[str] = None
    client_info: ClientInfo
    trip_details: TripDetails
    accommodation_prefs: Optional[AccommodationPrefs] = None
    activity_prefs: Optional[ActivityPrefs] = None
    flight_prefs: Optional[FlightPrefs] = None
    meal_prefs: Optional[MealPrefs] = None
    other_requirements: Optional[str] = None


class QuotationRequest(QuotationRequestIn):
    id: str
    request_date: datetime = Field(default_factory=utc_now)
    status: QuotationStatus = "New Request Submitted"
    linked_itinerary_id: Optional[str] = None
    updated_at: datetime = Field(default_factory=utc_now)
    agent_revision_notes: Optional[str] = None
    admin_revision_notes: Optional[str] = None
    version: int = Field(0, ge=0)  # 1 upon first quote sent


class QuotationStatusUpdate(BaseModel):
    status: QuotationStatus


class RevisionNotes(BaseModel):
    notes: Optional[str] = None


def make_quotation_id(initials: str, on: Optional[datetime] = None) -> str:
    """`<INITIALS>-YYMMDD-NNNN` with a random four digit suffix."""
    on = on or utc_now()
    return f"{initials}-{on:%y%m%d}-{secrets.randbelow(10000):04d}"
