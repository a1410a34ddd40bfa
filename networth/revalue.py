import asyncio
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from networth.domain import Asset, AssetCategory, parse_category
from networth.transforms import holding_value

Fetch = Callable[[str], Optional[int]]

PRICED_CATEGORIES = (AssetCategory.EQUITY, AssetCategory.CRYPTO)


def is_priced(a: Asset) -> bool:
    return (
        parse_category(a.category) in PRICED_CATEGORIES
        and bool(a.ticker)
        and isinstance(a.quantity, (int, float))
        and a.quantity > 0
    )


async def quotes_for(tickers: List[str], fetch: Fetch) -> Dict[str, Optional[int]]:
    """Look up each distinct ticker once, concurrently.

    ``fetch`` is blocking (e.g. ``functools.partial(fetch_quote, api_key=...)``)
    and runs in worker threads.
    """
    unique = sorted(set(tickers))
    prices = await asyncio.gather(*(asyncio.to_thread(fetch, t) for t in unique))
    return dict(zip(unique, prices))


async def revalue_holdings(assets: List[Asset], fetch: Fetch) -> List[Asset]:
    """Re-price ticker-backed holdings; others, and those without a quote,
    are returned unchanged. Order is preserved."""
    quotes = await quotes_for([a.ticker for a in assets if is_priced(a)], fetch)

    out = []
    for a in assets:
        price = quotes.get(a.ticker) if is_priced(a) else None
        out.append(replace(a, value=holding_value(price, a.quantity)) if price else a)
    return out
