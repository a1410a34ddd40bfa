from __future__ import annotations

import math
from typing import Any, Mapping

import requests

from networth.logging_setup import get_logger

log = get_logger("networth.prices")

ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"


def parse_global_quote(payload: Mapping[str, Any] | None) -> int | None:
    """Price from an Alpha Vantage GLOBAL_QUOTE response, in minor units."""
    if not isinstance(payload, Mapping):
        return None
    quote = payload.get("Global Quote")
    if not isinstance(quote, Mapping) or not quote.get("05. price"):
        return None
    try:
        price = float(quote["05. price"])
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price):
        return None
    return int(round(price * 100))


def fetch_quote(
    ticker: str,
    api_key: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 10.0,
) -> int | None:
    """Latest price for ``ticker`` in minor units, or None when unavailable.

    A missing quote is an expected outcome (unknown ticker, rate limit); the
    dashboard then asks for a manual value. No retries.
    """
    http = session or requests.Session()
    params = {"function": "GLOBAL_QUOTE", "symbol": ticker, "apikey": api_key}
    try:
        resp = http.get(ALPHAVANTAGE_URL, params=params, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except (requests.RequestException, ValueError) as e:
        log.warning("quote lookup for %s failed: %s", ticker, e)
        return None

    price = parse_global_quote(payload)
    if price is None:
        log.info("no quote for %s in response", ticker)
    return price
