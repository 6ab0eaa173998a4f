from __future__ import annotations
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .common import CurrencyCode, new_id, utc_now
from .constants import MAX_MARKUP_PERCENTAGE


class ExchangeRateIn(BaseModel):
    from_currency: CurrencyCode
    to_currency: CurrencyCode
    rate: float = Field(..., gt=0)

    @model_validator(mode="after")
    def _not_same(self) -> "ExchangeRateIn":
        if self.from_currency == self.to_currency:
            raise ValueError("cannot set an exchange rate from a currency to itself")
        return self


class ExchangeRate(ExchangeRateIn):
    id: str = Field(default_factory=new_id)
    source: Literal["manual", "api"] = "manual"
    updated_at: datetime = Field(default_factory=utc_now)


class SpecificMarkupIn(BaseModel):
    from_currency: CurrencyCode
    to_currency: CurrencyCode
    markup_percentage: float = Field(..., ge=0, le=MAX_MARKUP_PERCENTAGE)

    @model_validator(mode="after")
    def _not_same(self) -> "SpecificMarkupIn":
        if self.from_currency == self.to_currency:
            raise ValueError("cannot set specific markup for same currency")
        return self


class SpecificMarkupRate(SpecificMarkupIn):
    id: str = Field(default_factory=new_id)
    updated_at: datetime = Field(default_factory=utc_now)


class ManagedCurrency(BaseModel):
    code: str
    is_custom: bool = False


class CustomCurrencyIn(BaseModel):
    code: CurrencyCode


class GlobalMarkup(BaseModel):
    markup_percentage: float = Field(..., ge=0, le=MAX_MARKUP_PERCENTAGE)


class RateUpdate(BaseModel):
    rate: float = Field(..., gt=0)


class MarkupUpdate(BaseModel):
    markup_percentage: float = Field(..., ge=0, le=MAX_MARKUP_PERCENTAGE)


class ConversionOut(BaseModel):
    original_amount: float
    from_currency: str
    to_currency: str
    base_rate: float
    final_rate: float
    markup_applied: float
    markup_type: Literal["global", "specific", "none"]
    converted_amount: float


class RefreshReport(BaseModel):
    status: Literal["success", "fallback"]
    updated_currencies: List[str] = Field(default_factory=list)
    seeded_defaults: bool = False
    last_fetched: Optional[datetime] = None
    message: Optional[str] = None
