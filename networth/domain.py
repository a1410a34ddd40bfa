from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union


class AssetCategory(str, Enum):
    CASH = "CASH"
    EQUITY = "EQUITY"
    REAL_ESTATE = "REAL_ESTATE"
    CRYPTO = "CRYPTO"
    VEHICLE = "VEHICLE"
    EOSB = "EOSB"
    LIABILITY = "LIABILITY"

    @property
    def is_liability(self) -> bool:
        return self is AssetCategory.LIABILITY


@dataclass(frozen=True)
class Asset:
    id: str
    name: str
    category: Union[AssetCategory, str]
    value: int                              # minor units (fils/cents), always > 0
    quantity: Optional[float] = None        # equities / crypto
    ticker: Optional[str] = None
    market_value: Optional[int] = None      # real estate, minor units
    loan_value: Optional[int] = None        # real estate, minor units
    account_number: Optional[str] = None
    notes: Optional[str] = None
    last_updated: int = 0                   # epoch ms


@dataclass(frozen=True)
class Snapshot:
    id: str
    timestamp: int       # epoch ms
    total_assets: int
    total_liabilities: int
    net_worth: int


@dataclass(frozen=True)
class ArchivedAsset:
    asset: Asset
    archived_at: int     # epoch ms


# document keys as the web client stores them -> field names
_CAMEL_KEYS = {
    "qty": "quantity",
    "marketValue": "market_value",
    "loanValue": "loan_value",
    "accountNumber": "account_number",
    "lastUpdated": "last_updated",
}

_FIELDS = set(Asset.__dataclass_fields__)


def parse_category(raw: Any) -> Union[AssetCategory, Any]:
    """Return the enum member for ``raw``; unknown tags come back unchanged
    so that validation can reject them instead of guessing."""
    if isinstance(raw, AssetCategory):
        return raw
    if isinstance(raw, str) and raw in AssetCategory._value2member_map_:
        return AssetCategory(raw)
    return raw


def asset_from_dict(data: Mapping[str, Any]) -> Asset:
    kwargs = {}
    for key, val in data.items():
        name = _CAMEL_KEYS.get(key, key)
        if name in _FIELDS:
            kwargs[name] = val
    kwargs["category"] = parse_category(kwargs.get("category"))
    return Asset(**kwargs)


_DOC_KEYS = {field: key for key, field in _CAMEL_KEYS.items()}


def asset_to_dict(asset: Asset) -> dict:
    """Document shape of ``asset``, the inverse of ``asset_from_dict``."""
    d = asdict(asset)
    if isinstance(asset.category, AssetCategory):
        d["category"] = asset.category.value
    return {_DOC_KEYS.get(k, k): v for k, v in d.items() if v is not None}
