from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Literal, Optional, Protocol, Tuple

from itinerary_ace.core.errors import RateUnavailableError
from itinerary_ace.models.constants import MIN_RATE, REFERENCE_CURRENCY
from itinerary_ace.models.rates import ExchangeRate, SpecificMarkupRate
from itinerary_ace.services.money import round2

"""Currency conversion with layered markups.

Base rate lookup order for an ordered pair (from, to):
    1. a direct rate from -> to
    2. the inverse of a reverse-direction rate to -> from
    3. composition through the reference currency (from -> USD -> to),
       each leg resolved with steps 1-2
A markup percentage (pair-specific if defined, else global) is then applied
multiplicatively to the base rate.
"""

MarkupType = Literal["global", "specific", "none"]

logger = logging.getLogger("itinerary_ace.rates.conversion")


class SupportsRateLookup(Protocol):
    def get_rate(self, from_currency: str, to_currency: str) -> "ConversionRateDetails": ...


@dataclass(frozen=True)
class ConversionRateDetails:
    base_rate: float
    final_rate: float
    markup_applied: float
    markup_type: MarkupType


@dataclass(frozen=True)
class ConversionResult:
    original_amount: float
    from_currency: str
    to_currency: str
    base_rate: float
    final_rate: float
    markup_applied: float
    markup_type: MarkupType
    converted_amount: float


def find_base_rate(
    rates: Iterable[ExchangeRate], from_currency: str, to_currency: str
) -> Optional[float]:
    """Direct rate, else inverse of the reverse pair, else None."""
    if from_currency == to_currency:
        return 1.0
    inverse: Optional[float] = None
    for r in rates:
        if r.from_currency == from_currency and r.to_currency == to_currency:
            return r.rate
        if r.from_currency == to_currency and r.to_currency == from_currency and r.rate != 0:
            inverse = 1 / r.rate
    return inverse


class CurrencyConverter:
    """Snapshot of base rates and markups able to answer conversion queries."""

    def __init__(
        self,
        rates: Iterable[ExchangeRate],
        global_markup: float = 0.0,
        specific_markups: Iterable[SpecificMarkupRate] = (),
        reference_currency: str = REFERENCE_CURRENCY,
    ):
        self._rates = list(rates)
        self._global_markup = max(global_markup, 0.0)
        self._specific: Dict[Tuple[str, str], float] = {
            (m.from_currency, m.to_currency): m.markup_percentage for m in specific_markups
        }
        self._reference = reference_currency

    def base_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        direct = find_base_rate(self._rates, from_currency, to_currency)
        if direct is not None:
            return direct
        to_ref = find_base_rate(self._rates, from_currency, self._reference)
        if to_ref is None:
            logger.warning(
                "no base rate from %s to %s", from_currency, self._reference
            )
            return None
        from_ref = find_base_rate(self._rates, self._reference, to_currency)
        if from_ref is None:
            logger.warning("no base rate from %s to %s", self._reference, to_currency)
            return None
        return to_ref * from_ref

    def markup_for(self, from_currency: str, to_currency: str) -> Tuple[float, MarkupType]:
        specific = self._specific.get((from_currency, to_currency))
        if specific is not None:
            return specific, ("specific" if specific > 0 else "none")
        if self._global_markup > 0:
            return self._global_markup, "global"
        return 0.0, "none"

    def get_rate(self, from_currency: str, to_currency: str) -> ConversionRateDetails:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()
        if from_currency == to_currency:
            return ConversionRateDetails(1.0, 1.0, 0.0, "none")
        base = self.base_rate(from_currency, to_currency)
        if base is None:
            raise RateUnavailableError(from_currency, to_currency)
        base = max(MIN_RATE, base)
        markup, markup_type = self.markup_for(from_currency, to_currency)
        final = max(MIN_RATE, base * (1 + markup / 100))
        return ConversionRateDetails(
            base_rate=base,
            final_rate=final,
            markup_applied=markup,
            markup_type=markup_type,
        )

    def convert_amount(self, amount: float, from_currency: str, to_currency: str) -> ConversionResult:
        details = self.get_rate(from_currency, to_currency)
        return ConversionResult(
            original_amount=amount,
            from_currency=from_currency.upper(),
            to_currency=to_currency.upper(),
            base_rate=details.base_rate,
            final_rate=details.final_rate,
            markup_applied=details.markup_applied,
            markup_type=details.markup_type,
            converted_amount=round2(amount * details.final_rate),
        )
