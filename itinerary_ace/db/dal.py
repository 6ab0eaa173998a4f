"""Data Access Layer over the key/value store.

Responsibilities
----------------
- Provide `get_item` / `set_item` / `remove_item` primitives over flat string keys.
- Read and write whole collections: every caller loads the full list, mutates it
  in memory and writes it back; there is no partial update or indexing.
- Recover from corrupted values: unparseable JSON or records failing validation
  are logged, discarded and replaced with seed data.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import sqlite3
from typing import Any, Callable, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

# Storage keys ---------------------------------------------------------
ITINERARY_INDEX_KEY = "itineraryAce_index"
ITINERARY_DATA_PREFIX = "itineraryAce_data_"
LAST_ACTIVE_ITINERARY_KEY = "lastActiveItineraryId"
QUOTATION_REQUESTS_KEY = "itineraryAce_agentQuotationRequests"
AGENCIES_KEY = "itineraryAceAgencies"
AGENTS_KEY = "itineraryAceAgents"
EXCHANGE_RATES_KEY = "itineraryAceExchangeRates"
EXCHANGE_MARKUP_KEY = "itineraryAceExchangeMarkup"
SPECIFIC_MARKUPS_KEY = "itineraryAceSpecificMarkups"
API_RATES_LAST_FETCHED_KEY = "itineraryAceApiRatesLastFetched"
CUSTOM_CURRENCIES_KEY = "itineraryAce_customCurrencies"
COUNTRIES_KEY = "itineraryAceCountries"
PROVINCES_KEY = "itineraryAceProvinces"
SERVICE_PRICES_KEY = "itineraryAceServicePrices"

M = TypeVar("M", bound=BaseModel)
SeedFactory = Callable[[], List[M]]

logger = logging.getLogger("itinerary_ace.db")


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Raw key/value primitives
    def get_item(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM local_storage WHERE key = ?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO local_storage (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = ({UTC_NOW_SQL})
                """,
                (key, value),
            )
            conn.commit()

    def remove_item(self, key: str) -> bool:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM local_storage WHERE key = ?", (key,))
            conn.commit()
            return cur.rowcount > 0

    def keys(self, prefix: str = "") -> List[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT key FROM local_storage WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            )
            return [r[0] for r in cur.fetchall()]

    # ------------------------------------------------------------------
    # JSON documents
    def read_json(self, key: str) -> Any:
        """Return the decoded JSON at key, None when absent.

        Raises ValueError (json.JSONDecodeError) when the stored value is corrupt.
        """
        raw = self.get_item(key)
        if raw is None:
            return None
        return json.loads(raw)

    def write_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, ensure_ascii=False))

    # ------------------------------------------------------------------
    # Collections
    def read_collection(
        self,
        key: str,
        model: Type[M],
        seed: Optional[SeedFactory] = None,
    ) -> List[M]:
        """Load the whole collection stored at key.

        Missing key: seed data (if any) is persisted and returned.
        Corrupted value: logged, discarded and replaced with seed data.
        """
        adapter = TypeAdapter(List[model])  # type: ignore[valid-type]
        raw = self.get_item(key)
        if raw is not None:
            try:
                return adapter.validate_json(raw)
            except ValidationError:
                logger.exception("discarding corrupted collection %s", key)
        items = seed() if seed is not None else []
        self.write_collection(key, items)
        return items

    def write_collection(self, key: str, items: Sequence[BaseModel]) -> None:
        payload = "[" + ",".join(item.model_dump_json() for item in items) + "]"
        self.set_item(key, payload)

    # ------------------------------------------------------------------
    # Single documents (one itinerary per key)
    def read_model(self, key: str, model: Type[M]) -> Optional[M]:
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError:
            logger.exception("discarding corrupted document %s", key)
            self.remove_item(key)
            return None

    def write_model(self, key: str, value: BaseModel) -> None:
        self.set_item(key, value.model_dump_json())

    # ------------------------------------------------------------------
    # Scalars
    def read_scalar(self, key: str, default: Optional[str] = None) -> Optional[str]:
        raw = self.get_item(key)
        return default if raw is None else raw

    def write_scalar(self, key: str, value: str) -> None:
        self.set_item(key, value)
