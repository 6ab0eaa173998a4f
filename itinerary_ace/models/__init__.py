"""Pydantic domain models for the itinerary planner."""

from .constants import (
    CURRENCIES,
    SERVICE_CATEGORIES,
    QUOTATION_STATUSES,
    REFERENCE_CURRENCY,
)  # re-export
from .geo import CountryItem, ProvinceItem
from .rates import ExchangeRate, SpecificMarkupRate
from .pricing import ServicePriceItem
from .itinerary import TripData, CostSummary
from .agent import Agency, AgentProfile
from .quotation import QuotationRequest

__all__ = [
    "CURRENCIES",
    "SERVICE_CATEGORIES",
    "QUOTATION_STATUSES",
    "REFERENCE_CURRENCY",
    "CountryItem",
    "ProvinceItem",
    "ExchangeRate",
    "SpecificMarkupRate",
    "ServicePriceItem",
    "TripData",
    "CostSummary",
    "Agency",
    "AgentProfile",
    "QuotationRequest",
]
