import heapq
from typing import Callable, Iterable, Iterator

from networth.domain import Asset, AssetCategory, parse_category


def iter_assets(
    assets: Iterable[Asset], pred: Callable[[Asset], bool]
) -> Iterator[Asset]:
    for a in assets:
        if pred(a):
            yield a


def by_category(category: AssetCategory | str):
    wanted = parse_category(category)

    def _filter(a: Asset) -> bool:
        return parse_category(a.category) == wanted

    return _filter


def liabilities_only(a: Asset) -> bool:
    return parse_category(a.category) is AssetCategory.LIABILITY


def assets_only(a: Asset) -> bool:
    return not liabilities_only(a)


def lazy_top_holdings(assets: Iterable[Asset], k: int) -> Iterator[tuple[str, int]]:
    """Largest non-liability holdings as ``(name, value)``, biggest first."""
    top = heapq.nlargest(max(0, k), iter_assets(assets, assets_only), key=lambda a: a.value)
    for a in top:
        yield a.name, a.value
