from dataclasses import replace
from datetime import date
from typing import Callable, Optional, Sequence, Tuple
from uuid import uuid4

from networth.domain import ArchivedAsset, Asset, AssetCategory, Snapshot, parse_category
from networth.eosb import DateLike, accrual_for_dates, to_minor_units
from networth.errors import AssetNotFoundError, InvalidRecordError
from networth.events import (
    ASSET_ADDED,
    ASSET_DELETED,
    ASSET_UPDATED,
    SNAPSHOT_TAKEN,
    EventBus,
    event_bus,
)
from networth.functional import check_real_estate, safe_asset, validate_asset
from networth.logging_setup import get_logger
from networth.transforms import (
    Totals,
    add_asset,
    aggregate,
    append_snapshot,
    load_seed,
    now_ms,
    remove_asset,
    replace_asset,
    totals,
)

log = get_logger("networth.services")


class NetWorthService:
    """Facade over one user's asset collection and snapshot history.

    Every add, edit or delete produces exactly one new snapshot, appended to
    ``history()``. A rejected record leaves assets, history and archive
    untouched. Instances are meant to be owned by a single session and are
    not thread-safe.
    """

    def __init__(
        self,
        assets: Sequence[Asset] = (),
        *,
        bus: Optional[EventBus] = None,
        clock: Callable[[], int] = now_ms,
        eosb_cap: bool = False,
    ):
        self.bus = bus if bus is not None else event_bus
        self.clock = clock
        self.eosb_cap = eosb_cap
        self._assets: Tuple[Asset, ...] = tuple(assets)
        self._history: Tuple[Snapshot, ...] = ()
        self._archive: Tuple[ArchivedAsset, ...] = ()

    @classmethod
    def from_seed(cls, path: str, **kwargs) -> "NetWorthService":
        return cls(load_seed(path), **kwargs)

    @property
    def assets(self) -> Tuple[Asset, ...]:
        return self._assets

    def current(self) -> Totals:
        return totals(self._assets)

    def history(self) -> Tuple[Snapshot, ...]:
        return self._history

    def archive(self, asset_id: str) -> Tuple[ArchivedAsset, ...]:
        return tuple(a for a in self._archive if a.asset.id == asset_id)

    def _publish_change(self, name: str, asset_id: str, assets: Tuple[Asset, ...]) -> Snapshot:
        payload = {"asset_id": asset_id, "assets": assets, "clock": self.clock}
        snap = next(
            (r["snapshot"] for r in self.bus.publish(name, payload) if isinstance(r, dict) and "snapshot" in r),
            None,
        )
        if snap is None:
            snap = aggregate(assets, clock=self.clock)
        return snap

    def upsert(self, asset: Asset) -> Snapshot:
        result = validate_asset(asset).bind(check_real_estate)
        if result.is_left():
            error = result.get_error()
            log.warning("rejected asset %s: %s", asset.id, error["message"])
            raise InvalidRecordError(error)

        now = self.clock()
        previous = safe_asset(self._assets, asset.id).get_or_else(None)
        stored = replace(asset, category=parse_category(asset.category), last_updated=now)

        if previous is None:
            event, assets, archive = ASSET_ADDED, add_asset(self._assets, stored), self._archive
        else:
            event = ASSET_UPDATED
            assets = replace_asset(self._assets, stored)
            archive = self._archive + (ArchivedAsset(asset=previous, archived_at=now),)

        snap = self._publish_change(event, asset.id, assets)

        self._assets, self._archive = assets, archive
        self._history = append_snapshot(self._history, snap)
        self.bus.publish(SNAPSHOT_TAKEN, {"snapshot": snap})
        log.info("%s %s (%s, %d)", event, stored.id, stored.category.value, stored.value)
        return snap

    def delete(self, asset_id: str) -> Snapshot:
        if safe_asset(self._assets, asset_id).is_none():
            raise AssetNotFoundError(asset_id)

        assets = remove_asset(self._assets, asset_id)
        snap = self._publish_change(ASSET_DELETED, asset_id, assets)

        self._assets = assets
        self._history = append_snapshot(self._history, snap)
        self.bus.publish(SNAPSHOT_TAKEN, {"snapshot": snap})
        log.info("%s %s", ASSET_DELETED, asset_id)
        return snap

    def add_eosb(
        self,
        name: str,
        monthly_salary: float,
        start: DateLike,
        end: Optional[DateLike] = None,
        *,
        asset_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Snapshot:
        """Record an end-of-service benefit accrual as an ordinary asset.

        ``monthly_salary`` is in major units (e.g. AED) and ``end`` defaults
        to today. Under one year of service the accrual is zero, which is
        not a storable asset value, so the record is rejected.
        """
        value = accrual_for_dates(
            to_minor_units(monthly_salary),
            start,
            end if end is not None else date.today(),
            cap=self.eosb_cap,
        )
        return self.upsert(Asset(
            id=asset_id or str(uuid4()),
            name=name,
            category=AssetCategory.EOSB,
            value=value,
            notes=notes,
        ))
