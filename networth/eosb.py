"""End-of-service benefit (gratuity) accrual.

The benefit accrues at 21 days of basic salary for each of the first five
years of service and 30 days for every year after that. Nothing vests
before one full year. All amounts are integers in minor currency units; the
daily rate is kept as a float and the result is floored exactly once.
"""

import math
from datetime import date, datetime
from typing import Union

from networth.errors import InvalidInputError

DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365.25
FIRST_TIER_YEARS = 5
FIRST_TIER_DAYS = 21
SECOND_TIER_DAYS = 30
CAP_MONTHS = 24

DateLike = Union[date, datetime, str]


def _check_monthly_base(monthly_base) -> None:
    if isinstance(monthly_base, bool) or not isinstance(monthly_base, int):
        raise InvalidInputError(
            f"monthly base must be an integer amount in minor units, got {monthly_base!r}"
        )
    if monthly_base < 0:
        raise InvalidInputError(f"monthly base cannot be negative: {monthly_base}")


def _check_years(years) -> None:
    if isinstance(years, bool) or not isinstance(years, (int, float)):
        raise InvalidInputError(f"years of service must be a number, got {years!r}")
    if not math.isfinite(years) or years < 0:
        raise InvalidInputError(f"years of service must be a finite non-negative number: {years}")


def compute_accrual(monthly_base: int, years_of_service: float, *, cap: bool = False) -> int:
    """Accrued benefit for ``years_of_service`` at ``monthly_base`` per month.

    ``monthly_base`` must already be in minor units (multiply a salary in
    major units by 100 first, see ``to_minor_units``). No ceiling applies
    unless ``cap`` is set, in which case the result is limited to 24 months
    of basic salary.

    >>> compute_accrual(10000, 6)
    45000
    """
    _check_monthly_base(monthly_base)
    _check_years(years_of_service)

    if years_of_service < 1:
        return 0

    daily_rate = monthly_base / DAYS_PER_MONTH

    if years_of_service <= FIRST_TIER_YEARS:
        gratuity = years_of_service * FIRST_TIER_DAYS * daily_rate
    else:
        gratuity = FIRST_TIER_YEARS * FIRST_TIER_DAYS * daily_rate
        gratuity += (years_of_service - FIRST_TIER_YEARS) * SECOND_TIER_DAYS * daily_rate

    result = math.floor(gratuity)
    if cap:
        result = min(result, monthly_base * CAP_MONTHS)
    return result


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as e:
            raise InvalidInputError(f"not an ISO date (YYYY-MM-DD): {value!r}") from e
    raise InvalidInputError(f"expected a date, got {value!r}")


def years_of_service(start: DateLike, end: DateLike) -> float:
    """Elapsed years between two calendar dates, in 365.25-day years.

    The order of ``start`` and ``end`` does not matter; swapped dates give
    the same magnitude.
    """
    elapsed_days = abs((_as_date(end) - _as_date(start)).days)
    return elapsed_days / DAYS_PER_YEAR


def to_minor_units(major) -> int:
    if isinstance(major, bool) or not isinstance(major, (int, float)):
        raise InvalidInputError(f"amount must be a number, got {major!r}")
    if not math.isfinite(major) or major < 0:
        raise InvalidInputError(f"amount must be a finite non-negative number: {major}")
    return int(round(major * 100))


def accrual_for_dates(
    monthly_base: int, start: DateLike, end: DateLike, *, cap: bool = False
) -> int:
    return compute_accrual(monthly_base, years_of_service(start, end), cap=cap)
