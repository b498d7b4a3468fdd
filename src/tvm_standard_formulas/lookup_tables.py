# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .outcomes import CalculationOutcome, Success, invalid, is_non_negative, is_number

__version__ = "0.1.0"


# =============================================================================
# Bounded integer-keyed lookup
# =============================================================================

def lookup(table: Mapping[int, float], key: int, max_key: int) -> float:
    """
    Look up key in an integer-keyed table, clamping missing keys to max_key.

    Used for published tables whose last row covers "this age and older".

    Args:
        table: Integer-keyed table
        key: Key to look up
        max_key: Key whose value is used when key is not in the table

    Returns:
        table[key] if present, else table[max_key]

    Raises:
        KeyError: If neither key nor max_key is in the table
    """
    if key in table:
        return table[key]
    return table[max_key]


# =============================================================================
# Required Minimum Distribution (IRS Uniform Lifetime Table)
# =============================================================================

RMD_START_AGE = 73      # SECURE 2.0 Act
RMD_MAX_AGE = 120       # last row applies to 120 and older

# Age -> distribution period.
UNIFORM_LIFETIME_TABLE: dict[int, float] = {
    73: 26.5, 74: 25.5, 75: 24.6, 76: 23.7, 77: 22.9, 78: 22.0, 79: 21.1,
    80: 20.2, 81: 19.4, 82: 18.5, 83: 17.7, 84: 16.8, 85: 16.0, 86: 15.2,
    87: 14.4, 88: 13.7, 89: 12.9, 90: 12.2, 91: 11.5, 92: 10.8, 93: 10.1,
    94: 9.5, 95: 8.9, 96: 8.4, 97: 7.8, 98: 7.3, 99: 6.8, 100: 6.4,
    101: 6.0, 102: 5.6, 103: 5.2, 104: 4.9, 105: 4.6, 106: 4.3, 107: 4.1,
    108: 3.9, 109: 3.7, 110: 3.5, 111: 3.4, 112: 3.3, 113: 3.1, 114: 3.0,
    115: 2.9, 116: 2.8, 117: 2.7, 118: 2.5, 119: 2.3, 120: 2.0,
}


@dataclass(frozen=True)
class RmdResult:
    amount: float
    distribution_period: float


def required_minimum_distribution(account_balance: float, age: int) -> CalculationOutcome:
    """
    Estimate this year's Required Minimum Distribution.

    Formula:
        RMD = prior year-end balance / distribution period(age)

    The distribution period comes from the Uniform Lifetime Table; ages above
    the table use the age-120 row.

    Args:
        account_balance: Balance at Dec 31 of the previous year (>= 0)
        age: Account owner's age this year (integer >= 73)

    Returns:
        Success(RmdResult) or Failure(INVALID_INPUT)
    """
    if not is_non_negative(account_balance):
        return invalid(f"account_balance must be non-negative, got {account_balance}")
    if not is_number(age) or not float(age).is_integer() or age < RMD_START_AGE:
        return invalid(f"age must be an integer of at least {RMD_START_AGE}, got {age}")

    period = lookup(UNIFORM_LIFETIME_TABLE, int(age), RMD_MAX_AGE)
    return Success(RmdResult(amount=account_balance / period, distribution_period=period))
