from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator

from .common import CurrencyCode, new_id


class AgentAddress(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state_province: Optional[str] = None
    postal_code: str = Field(..., min_length=1)
    country_id: str = Field(..., min_length=1)


class AgencyIn(BaseModel):
    name: str = Field(..., min_length=2)
    main_address: AgentAddress
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    def initials(self) -> str:
        """Up to three upper-case letters used as the quotation id prefix."""
        words = [w for w in self.name.split(" ") if w]
        if not words:
            return "AGY"
        if len(words) == 1:
            return words[0][:3].upper()
        return "".join(w[0] for w in words[:3]).upper()


class Agency(AgencyIn):
    id: str = Field(default_factory=lambda: f"agency_{new_id()}")


class AgentProfileIn(BaseModel):
    agency_id: str
    full_name: str = Field(..., min_length=2)
    email: EmailStr
    phone_number: Optional[str] = None
    agency_name: Optional[str] = None
    agency_address: Optional[AgentAddress] = None
    preferred_currency: CurrencyCode
    specializations: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0)
    bio: Optional[str] = Field(None, max_length=500)
    profile_picture_url: Optional[HttpUrl] = None


class AgentProfile(AgentProfileIn):
    id: str = Field(default_factory=lambda: f"agent_{new_id()}")
