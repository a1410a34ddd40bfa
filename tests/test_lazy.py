from itertools import islice
from typing import Iterable

from networth.domain import Asset, AssetCategory
from networth.lazy import (
    assets_only, by_category, iter_assets, lazy_top_holdings, liabilities_only,
)


def make_sample():
    return (
        Asset("a1", "Current account", AssetCategory.CASH, 300),
        Asset("a2", "Index fund", AssetCategory.EQUITY, 900),
        Asset("a3", "Mortgage", AssetCategory.LIABILITY, 5000),
        Asset("a4", "Car", AssetCategory.VEHICLE, 700),
        Asset("a5", "Savings", AssetCategory.CASH, 100),
    )


def test_iter_assets_filters_by_category():
    result = list(iter_assets(make_sample(), by_category(AssetCategory.CASH)))
    assert [a.id for a in result] == ["a1", "a5"]


def test_by_category_accepts_plain_string():
    assert len(list(iter_assets(make_sample(), by_category("CASH")))) == 2


def test_iter_assets_is_lazy_stop_early():
    assets = make_sample()
    calls = {"n": 0}

    def pred(a: Asset) -> bool:
        calls["n"] += 1
        return assets_only(a)

    first_two = list(islice(iter_assets(assets, pred), 2))
    assert len(first_two) == 2
    assert calls["n"] < len(assets)


def test_partition_predicates():
    assets = make_sample()
    liab = [a.id for a in iter_assets(assets, liabilities_only)]
    rest = [a.id for a in iter_assets(assets, assets_only)]
    assert liab == ["a3"]
    assert set(liab).isdisjoint(rest)
    assert len(liab) + len(rest) == len(assets)


def test_top_holdings_order_and_excludes_liabilities():
    result = list(lazy_top_holdings(make_sample(), k=2))
    assert result == [("Index fund", 900), ("Car", 700)]


def test_top_holdings_accepts_generator_input():
    def stream() -> Iterable[Asset]:
        yield from make_sample()

    assert list(lazy_top_holdings(stream(), k=1)) == [("Index fund", 900)]


def test_top_holdings_k_bigger_than_collection():
    assert len(list(lazy_top_holdings(make_sample(), k=10))) == 4
    assert list(lazy_top_holdings(make_sample(), k=0)) == []
