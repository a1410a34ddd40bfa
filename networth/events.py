from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from networth.logging_setup import get_logger
from networth.transforms import aggregate, now_ms

__all__ = [
    'event_bus', 'ASSET_ADDED', 'ASSET_UPDATED', 'ASSET_DELETED', 'SNAPSHOT_TAKEN',
    'ASSET_EVENTS', 'Event', 'EventBus', 'snapshot_handler',
]

log = get_logger("networth.events")


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        log.debug("publish %s to %d handler(s)", name, len(handlers))
        return [handler(event, payload) for handler in list(handlers)]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


ASSET_ADDED = "ASSET_ADDED"
ASSET_UPDATED = "ASSET_UPDATED"
ASSET_DELETED = "ASSET_DELETED"
SNAPSHOT_TAKEN = "SNAPSHOT_TAKEN"

ASSET_EVENTS = (ASSET_ADDED, ASSET_UPDATED, ASSET_DELETED)


def snapshot_handler(event: Event, payload: dict) -> dict:
    """Reduce the post-change asset collection into a snapshot.

    payload: ``assets`` (the full current collection) and optionally
    ``clock`` (callable returning epoch ms).
    """
    clock = payload.get("clock") or now_ms
    snap = aggregate(payload["assets"], clock=clock)
    log.info(
        "%s %s -> net worth %d (assets %d, liabilities %d)",
        event.name, payload.get("asset_id", "-"), snap.net_worth, snap.total_assets, snap.total_liabilities,
    )
    return {"snapshot": snap}


def register_default_handlers(bus: EventBus) -> EventBus:
    for name in ASSET_EVENTS:
        bus.subscribe(name, snapshot_handler)
    return bus


event_bus = register_default_handlers(EventBus())
