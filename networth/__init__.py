"""Net-worth tracking: EOSB accrual and ledger aggregation."""

from networth.domain import Asset, AssetCategory, Snapshot
from networth.eosb import compute_accrual, years_of_service
from networth.errors import InvalidInputError, InvalidRecordError
from networth.transforms import aggregate, totals

__all__ = [
    "Asset",
    "AssetCategory",
    "Snapshot",
    "compute_accrual",
    "years_of_service",
    "aggregate",
    "totals",
    "InvalidInputError",
    "InvalidRecordError",
]
