from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .common import CurrencyCode, new_id


class CountryIn(BaseModel):
    name: str
    default_currency: CurrencyCode

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name cannot be empty")
        return value.strip()


class CountryItem(CountryIn):
    id: str = Field(default_factory=new_id)


class ProvinceIn(BaseModel):
    name: str
    country_id: str

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name cannot be empty")
        return value.strip()


class ProvinceItem(ProvinceIn):
    id: str = Field(default_factory=new_id)
