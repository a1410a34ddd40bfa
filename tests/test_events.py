from datetime import datetime

from networth.domain import Asset, AssetCategory, Snapshot
from networth.events import (
    ASSET_ADDED, ASSET_DELETED, ASSET_EVENTS, ASSET_UPDATED,
    Event, EventBus, event_bus, register_default_handlers, snapshot_handler,
)


def test_event_creation():
    event = Event(name=ASSET_ADDED, ts=datetime.now().isoformat(), payload={"asset_id": "a1"})
    assert event.name == ASSET_ADDED
    assert event.payload["asset_id"] == "a1"


def test_subscribe_publish_unsubscribe():
    bus = EventBus()
    received = []

    def handler(event: Event, payload: dict) -> dict:
        received.append(payload)
        return {"processed": True}

    bus.subscribe(ASSET_UPDATED, handler)
    assert bus.publish(ASSET_UPDATED, {"asset_id": "a1"}) == [{"processed": True}]
    assert received == [{"asset_id": "a1"}]

    bus.unsubscribe(ASSET_UPDATED, handler)
    assert bus.publish(ASSET_UPDATED, {"asset_id": "a1"}) == []


def test_publish_without_subscribers():
    assert EventBus().publish("NOBODY", {}) == []


def test_unsubscribe_unknown_handler_is_noop():
    bus = EventBus()
    bus.unsubscribe(ASSET_ADDED, lambda e, p: {})


def test_snapshot_handler():
    assets = (
        Asset("c", "Cash", AssetCategory.CASH, 500000),
        Asset("l", "Loan", AssetCategory.LIABILITY, 120000),
    )
    event = Event(ASSET_DELETED, "2025-01-01T00:00:00", {})
    result = snapshot_handler(event, {"assets": assets, "clock": lambda: 99})
    snap = result["snapshot"]
    assert isinstance(snap, Snapshot)
    assert (snap.timestamp, snap.net_worth) == (99, 380000)


def test_default_handlers_cover_every_asset_event():
    bus = register_default_handlers(EventBus())
    for name in ASSET_EVENTS:
        results = bus.publish(name, {"assets": (), "clock": lambda: 1})
        assert len(results) == 1
        assert results[0]["snapshot"].net_worth == 0


def test_module_bus_is_wired():
    results = event_bus.publish(ASSET_ADDED, {"assets": (Asset("c", "Cash", AssetCategory.CASH, 5),)})
    assert any("snapshot" in r for r in results)
