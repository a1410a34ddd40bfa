import json
import time
import uuid
from functools import reduce
from typing import Callable, Iterable, NamedTuple, Tuple

from networth.domain import Asset, AssetCategory, Snapshot, asset_from_dict, parse_category
from networth.errors import InvalidInputError, InvalidRecordError
from networth.functional import Record, field, is_positive_int, validate_asset


class Totals(NamedTuple):
    total_assets: int
    total_liabilities: int
    net_worth: int


def now_ms() -> int:
    return int(time.time() * 1000)


def _validated(records: Iterable[Record]) -> Tuple[Record, ...]:
    # every record is checked before any is summed: all-or-nothing
    checked = []
    for r in records:
        result = validate_asset(r)
        if result.is_left():
            raise InvalidRecordError(result.get_error())
        checked.append(r)
    return tuple(checked)


def _value(record: Record) -> int:
    return field(record, "value")


def _is_liability(record: Record) -> bool:
    return parse_category(field(record, "category")) is AssetCategory.LIABILITY


def totals(records: Iterable[Record]) -> Totals:
    """Reduce asset records into integer totals.

    A record is a liability iff its category is LIABILITY; every other
    category counts towards assets. The reduction is order independent and
    reflects exactly the records passed in; callers mutating the underlying
    store concurrently must hand over a consistent copy.
    """
    checked = _validated(records)
    assets, liabilities = reduce(
        lambda acc, r: (acc[0], acc[1] + _value(r)) if _is_liability(r) else (acc[0] + _value(r), acc[1]),
        checked,
        (0, 0),
    )
    return Totals(assets, liabilities, assets - liabilities)


def aggregate(
    records: Iterable[Record],
    *,
    clock: Callable[[], int] = now_ms,
    snapshot_id: str | None = None,
) -> Snapshot:
    t = totals(records)
    return Snapshot(
        id=snapshot_id or uuid.uuid4().hex,
        timestamp=clock(),
        total_assets=t.total_assets,
        total_liabilities=t.total_liabilities,
        net_worth=t.net_worth,
    )


def category_totals(records: Iterable[Record]) -> dict[AssetCategory, int]:
    out: dict[AssetCategory, int] = {}
    for r in _validated(records):
        cat = parse_category(field(r, "category"))
        out[cat] = out.get(cat, 0) + _value(r)
    return out


def real_estate_value(market_value: int, loan_value: int) -> int:
    for name, amount in (("market value", market_value), ("loan value", loan_value)):
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise InvalidInputError(f"{name} must be a non-negative integer in minor units, got {amount!r}")
    return market_value - loan_value


def holding_value(unit_price_minor: int, quantity: float) -> int:
    if not is_positive_int(unit_price_minor):
        raise InvalidInputError(f"unit price must be a positive integer in minor units, got {unit_price_minor!r}")
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)) or quantity <= 0:
        raise InvalidInputError(f"quantity must be a positive number, got {quantity!r}")
    return int(round(unit_price_minor * quantity))


def load_seed(path: str) -> Tuple[Asset, ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return tuple(asset_from_dict(a) for a in data["assets"])


def add_asset(assets: Tuple[Asset, ...], a: Asset) -> Tuple[Asset, ...]:
    return assets + (a,)


def replace_asset(assets: Tuple[Asset, ...], a: Asset) -> Tuple[Asset, ...]:
    return tuple(a if existing.id == a.id else existing for existing in assets)


def remove_asset(assets: Tuple[Asset, ...], asset_id: str) -> Tuple[Asset, ...]:
    return tuple(filter(lambda a: a.id != asset_id, assets))


def append_snapshot(history: Tuple[Snapshot, ...], snap: Snapshot) -> Tuple[Snapshot, ...]:
    return history + (snap,)
