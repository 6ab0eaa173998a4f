from __future__ import annotations

"""Rate provider abstraction.

A provider answers one question: the latest rates quoted against a base
currency. Storage, markups and conversion live elsewhere.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class LatestRates:
    base_currency: str
    rates: Dict[str, float] = field(default_factory=dict)  # quote -> units per 1 base
    last_update_unix: Optional[int] = None


class RateProviderError(Exception):
    """Raised when a provider cannot produce rates (network, payload, config)."""


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    def fetch_latest(self, base_currency: str) -> LatestRates:
        raise NotImplementedError
