from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Mapping, TypeVar, Union

from networth.domain import Asset, AssetCategory, parse_category

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f):
        return Some(f(self._value))

    def bind(self, f):
        return f(self._value)

    def get_or_else(self, default):
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f):
        return self

    def bind(self, f):
        return self

    def get_or_else(self, default):
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f):
        return Right(f(self._value))

    def bind(self, f):
        return f(self._value)

    def get_or_else(self, default):
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self):
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f):
        return self

    def bind(self, f):
        return self

    def get_or_else(self, default):
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self):
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


Record = Union[Asset, Mapping[str, Any]]


def field(record: Record, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def safe_asset(assets: tuple[Asset, ...], asset_id: str) -> Maybe[Asset]:
    for a in assets:
        if a.id == asset_id:
            return Some(a)
    return Nothing()


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_asset(record: Record) -> Either[dict, Record]:
    """Check the two facts aggregation depends on: a known category tag and
    a strictly positive integer value."""
    asset_id = field(record, "id")
    category = parse_category(field(record, "category"))
    if not isinstance(category, AssetCategory):
        return Left({
            "error": "invalid_category",
            "message": f"Unknown asset category {category!r}",
            "asset_id": asset_id,
            "category": category,
        })

    value = field(record, "value")
    if not is_positive_int(value):
        return Left({
            "error": "invalid_value",
            "message": f"Asset value must be a positive integer in minor units, got {value!r}",
            "asset_id": asset_id,
            "value": value,
        })

    return Right(record)


def check_real_estate(asset: Asset) -> Either[dict, Asset]:
    """Writer-side rule: when both sub-fields are present, ``value`` must be
    market value minus outstanding loan."""
    if asset.market_value is None or asset.loan_value is None:
        return Right(asset)

    expected = asset.market_value - asset.loan_value
    if asset.value != expected:
        return Left({
            "error": "real_estate_mismatch",
            "message": (
                f"Asset {asset.name} value {asset.value} does not equal "
                f"market value {asset.market_value} minus loan {asset.loan_value}"
            ),
            "asset_id": asset.id,
            "expected": expected,
            "value": asset.value,
        })
    return Right(asset)
