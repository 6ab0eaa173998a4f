from __future__ import annotations

"""Outbound GET JSON helper used by the rate providers.

Retries transient failures (network errors, timeouts, 5xx) with exponential
backoff. Client errors (4xx) are not retried; ExchangeRate-API still sends a
JSON body for those, so it is decoded and returned to the caller.
"""
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger("itinerary_ace.http")

USER_AGENT = "itinerary-ace/0.1 (+rates)"


class HttpError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


def redact(url: str, secrets: Iterable[str]) -> str:
    for secret in secrets:
        if secret:
            url = url.replace(secret, "***")
    return url


def _decode(raw: bytes) -> Dict[str, Any]:
    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


def get_json(
    url: str,
    *,
    timeout: float = 5.0,
    retries: int = 2,
    backoff: float = 0.5,
    redact_values: Iterable[str] = (),
) -> Dict[str, Any]:
    safe_url = redact(url, redact_values)
    request = urllib.request.Request(
        url, headers={"Accept": "application/json", "User-Agent": USER_AGENT}
    )
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                return _decode(resp.read())
        except urllib.error.HTTPError as e:
            if e.code < 500:
                try:
                    return _decode(e.read())
                except ValueError:
                    raise HttpError(f"HTTP {e.code} from {safe_url}", status=e.code) from e
            last_err = e
        except (urllib.error.URLError, TimeoutError, ValueError) as e:  # ValueError: bad JSON
            last_err = e
        logger.debug("GET %s attempt %d failed: %s", safe_url, attempt + 1, last_err)
        if attempt < retries:
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {safe_url}: {last_err}")
