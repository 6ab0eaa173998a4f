"""Managed currencies: fixed system codes plus admin-added custom codes."""

from __future__ import annotations

import logging
from typing import List

from itinerary_ace.db.dal import CUSTOM_CURRENCIES_KEY, Database
from itinerary_ace.models.constants import CURRENCIES
from itinerary_ace.models.rates import ManagedCurrency

logger = logging.getLogger("itinerary_ace.currencies")


def list_custom_currencies(db: Database) -> List[str]:
    try:
        raw = db.read_json(CUSTOM_CURRENCIES_KEY)
    except ValueError:
        logger.warning("custom currencies value is not valid JSON; resetting")
        db.remove_item(CUSTOM_CURRENCIES_KEY)
        return []
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(
        isinstance(c, str) and len(c) == 3 for c in raw
    ):
        logger.warning("invalid custom currencies found in storage; resetting")
        db.remove_item(CUSTOM_CURRENCIES_KEY)
        return []
    return sorted(raw)


def list_managed_currencies(db: Database) -> List[ManagedCurrency]:
    managed = {code: ManagedCurrency(code=code) for code in CURRENCIES}
    for code in list_custom_currencies(db):
        # system entry wins on clash
        managed.setdefault(code, ManagedCurrency(code=code, is_custom=True))
    return sorted(managed.values(), key=lambda m: m.code)


def all_currency_codes(db: Database) -> List[str]:
    return [m.code for m in list_managed_currencies(db)]


def add_custom_currency(db: Database, code: str) -> ManagedCurrency:
    code = code.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError("currency code must be 3 letters")
    custom = list_custom_currencies(db)
    if code in CURRENCIES or code in custom:
        raise ValueError(f'currency code "{code}" already exists')
    db.write_json(CUSTOM_CURRENCIES_KEY, sorted(custom + [code]))
    logger.info("custom currency %s added", code)
    return ManagedCurrency(code=code, is_custom=True)


def delete_custom_currency(db: Database, code: str) -> bool:
    code = code.strip().upper()
    custom = list_custom_currencies(db)
    if code not in custom:
        return False
    db.write_json(CUSTOM_CURRENCIES_KEY, [c for c in custom if c != code])
    return True
