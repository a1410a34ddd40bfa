import itertools
from dataclasses import replace
from datetime import date

import pytest

from networth.domain import Asset, AssetCategory
from networth.errors import AssetNotFoundError, InvalidRecordError
from networth.events import ASSET_ADDED, ASSET_DELETED, SNAPSHOT_TAKEN, EventBus, register_default_handlers
from networth.services import NetWorthService
from networth.transforms import Totals


def make_clock(start=1000):
    counter = itertools.count(start)
    return lambda: next(counter)


def make_service(assets=(), **kw):
    kw.setdefault("bus", register_default_handlers(EventBus()))
    kw.setdefault("clock", make_clock())
    return NetWorthService(assets, **kw)


def cash(id="c1", value=500000):
    return Asset(id, "Current account", AssetCategory.CASH, value)


def card(id="l1", value=120000):
    return Asset(id, "Credit card", AssetCategory.LIABILITY, value)


def test_add_produces_one_snapshot_per_event():
    svc = make_service()
    s1 = svc.upsert(cash())
    s2 = svc.upsert(card())
    assert svc.history() == (s1, s2)
    assert (s1.total_assets, s1.total_liabilities, s1.net_worth) == (500000, 0, 500000)
    assert (s2.total_assets, s2.total_liabilities, s2.net_worth) == (500000, 120000, 380000)
    assert s1.timestamp < s2.timestamp


def test_upsert_stamps_last_updated():
    svc = make_service(clock=lambda: 1234)
    svc.upsert(cash())
    assert svc.assets[0].last_updated == 1234


def test_upsert_normalises_string_category():
    svc = make_service()
    svc.upsert(Asset("c", "Cash", "CASH", 5))
    svc.upsert(Asset("l", "Loan", "LIABILITY", 2))
    assert svc.assets[0].category is AssetCategory.CASH
    assert svc.assets[1].category.is_liability
    assert svc.current() == Totals(5, 2, 3)


def test_update_archives_previous_version():
    svc = make_service()
    svc.upsert(cash(value=100))
    svc.upsert(cash(value=250))

    assert len(svc.assets) == 1
    assert svc.assets[0].value == 250
    archived = svc.archive("c1")
    assert len(archived) == 1
    assert archived[0].asset.value == 100
    assert svc.history()[-1].total_assets == 250


def test_snapshots_are_never_rewritten():
    svc = make_service()
    first = svc.upsert(cash(value=100))
    svc.upsert(cash(value=999))
    assert svc.history()[0] is first
    assert first.total_assets == 100


def test_delete():
    svc = make_service([cash(), card()])
    snap = svc.delete("l1")
    assert snap.net_worth == 500000
    assert [a.id for a in svc.assets] == ["c1"]
    assert len(svc.history()) == 1


def test_delete_unknown_id():
    svc = make_service([cash()])
    with pytest.raises(AssetNotFoundError):
        svc.delete("nope")
    with pytest.raises(KeyError):
        svc.delete("nope")
    assert svc.history() == ()


@pytest.mark.parametrize("bad", [
    Asset("x", "Zero", AssetCategory.CASH, 0),
    Asset("x", "Negative", AssetCategory.CASH, -5),
    Asset("x", "Unknown", "UNKNOWN", 5),
    Asset("x", "House", AssetCategory.REAL_ESTATE, 100, market_value=500, loan_value=200),
])
def test_rejected_record_leaves_state_untouched(bad):
    svc = make_service([cash()])
    with pytest.raises(InvalidRecordError):
        svc.upsert(bad)
    assert svc.assets == (cash(),)
    assert svc.history() == ()
    assert svc.archive("x") == ()


def test_real_estate_consistent_value_is_accepted():
    svc = make_service()
    snap = svc.upsert(Asset("h", "Villa", AssetCategory.REAL_ESTATE, 300, market_value=500, loan_value=200))
    assert snap.total_assets == 300


def test_current_matches_latest_snapshot():
    svc = make_service([cash()])
    snap = svc.upsert(card())
    assert svc.current() == Totals(snap.total_assets, snap.total_liabilities, snap.net_worth)


def test_events_published_in_order():
    bus = register_default_handlers(EventBus())
    seen = []
    bus.subscribe(ASSET_ADDED, lambda e, p: seen.append(e.name) or {})
    bus.subscribe(ASSET_DELETED, lambda e, p: seen.append(e.name) or {})
    bus.subscribe(SNAPSHOT_TAKEN, lambda e, p: seen.append(e.name) or {})

    svc = make_service(bus=bus)
    svc.upsert(cash())
    svc.delete("c1")
    assert seen == [ASSET_ADDED, SNAPSHOT_TAKEN, ASSET_DELETED, SNAPSHOT_TAKEN]


def test_snapshot_without_default_handler():
    svc = make_service(bus=EventBus(), clock=lambda: 7)
    snap = svc.upsert(cash())
    assert snap.timestamp == 7
    assert svc.history() == (snap,)


def test_add_eosb_records_accrual_as_asset():
    svc = make_service()
    # 2192 days / 365.25 = 6.0014 years: 35000 + 1.0014 * 30 * (10000 / 30)
    snap = svc.add_eosb("Gratuity", 100, date(2015, 1, 1), date(2021, 1, 1), asset_id="e1")
    asset = svc.assets[0]
    assert asset.category is AssetCategory.EOSB
    assert asset.value == 45013
    assert snap.total_assets == 45013


def test_add_eosb_respects_cap():
    svc = make_service(eosb_cap=True)
    svc.add_eosb("Gratuity", 300, "1990-01-01", "2020-01-01", asset_id="e1")
    assert svc.assets[0].value == 30000 * 24


def test_add_eosb_under_one_year_is_rejected():
    svc = make_service()
    with pytest.raises(InvalidRecordError) as exc:
        svc.add_eosb("Gratuity", 25000, "2024-01-01", "2024-06-01")
    assert exc.value.code == "invalid_value"
    assert svc.assets == ()


def test_from_seed(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text('{"assets": [{"id": "c", "name": "Cash", "category": "CASH", "value": 10}]}', encoding="utf-8")
    svc = NetWorthService.from_seed(str(path), bus=EventBus())
    assert svc.current() == Totals(10, 0, 10)
    assert svc.history() == ()


def test_edit_keeps_position():
    svc = make_service([cash("a", 1), cash("b", 2), cash("c", 3)])
    svc.upsert(replace(cash("b", 20)))
    assert [a.id for a in svc.assets] == ["a", "b", "c"]
