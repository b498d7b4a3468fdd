# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
from enum import Enum

import numpy as np

from .outcomes import CalculationOutcome, Success, invalid, is_non_negative

__version__ = "0.1.0"


# =============================================================================
# Frequencies
# =============================================================================

class Frequency(Enum):
    """Compounding / payment / contribution frequency tags."""
    ANNUALLY = "annually"
    SEMI_ANNUALLY = "semi-annually"
    QUARTERLY = "quarterly"
    MONTHLY = "monthly"
    DAILY = "daily"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    Frequency.ANNUALLY: 1,
    Frequency.SEMI_ANNUALLY: 2,
    Frequency.QUARTERLY: 4,
    Frequency.MONTHLY: 12,
    Frequency.DAILY: 365,
}


def as_frequency(frequency: Frequency | str) -> Frequency:
    """
    Coerce a Frequency member or its form tag ("semi-annually") to a Frequency.

    Raises:
        ValueError: If the tag is not one of the supported frequencies
    """
    if isinstance(frequency, Frequency):
        return frequency
    try:
        return Frequency(frequency)
    except ValueError:
        raise ValueError(f"unknown frequency, got {frequency!r}") from None


def periods_per_year(frequency: Frequency | str) -> int:
    """Number of periods per year for a frequency (1, 2, 4, 12 or 365)."""
    return as_frequency(frequency).periods_per_year


# =============================================================================
# Rate conversion
# =============================================================================

def effective_annual_rate(
        nominal_annual_rate: float,
        compounding_frequency: Frequency | str
) -> float:
    """
    Convert a nominal annual rate to its effective annual rate (EAR).

    Formula:
        EAR = (1 + j/m)^m - 1

    Where:
        j = nominal annual rate as decimal (0.05 for 5%)
        m = compounding periods per year

    Args:
        nominal_annual_rate: Nominal annual rate as decimal
        compounding_frequency: How often the lender/bank compounds

    Returns:
        Effective annual rate as decimal
    """
    m = periods_per_year(compounding_frequency)
    return math.expm1(m * math.log1p(nominal_annual_rate / m))


def _rate_per_period(
        nominal_annual_rate: float,
        compounding_frequency: Frequency | str,
        target_frequency: Frequency | str
) -> float:
    # Inputs already validated by the caller.
    if nominal_annual_rate == 0:
        return 0.0
    ear = effective_annual_rate(nominal_annual_rate, compounding_frequency)
    return math.expm1(math.log1p(ear) / periods_per_year(target_frequency))


def effective_rate_per_period(
        nominal_annual_rate: float,
        compounding_frequency: Frequency | str,
        target_frequency: Frequency | str
) -> CalculationOutcome:
    """
    Convert a nominal annual rate compounded at one frequency into the
    equivalent rate per period of another frequency.

    Compounding frequency (how the bank compounds) and target frequency (how
    the user pays or contributes) are independent. The conversion always goes
    through the effective annual rate:

        EAR = (1 + j/m)^m - 1
        i   = (1 + EAR)^(1/p) - 1

    Where:
        j = nominal annual rate
        m = compounding periods per year
        p = target periods per year

    When p == m this equals j/m up to floating-point rounding. A zero rate
    returns exactly 0.0 so downstream formulas can branch on rate == 0.

    Args:
        nominal_annual_rate: Nominal annual rate as decimal (>= 0)
        compounding_frequency: Compounding frequency
        target_frequency: Payment/contribution frequency

    Returns:
        Success(rate per target period) or Failure(INVALID_INPUT)

    Example:
        >>> effective_rate_per_period(0.06, "monthly", "monthly").value
        0.005  # up to rounding
        >>> effective_rate_per_period(0.06, "quarterly", "monthly").value
        0.0049752...
    """
    if not is_non_negative(nominal_annual_rate):
        return invalid(f"nominal_annual_rate must be non-negative, got {nominal_annual_rate}")
    try:
        as_frequency(compounding_frequency)
        as_frequency(target_frequency)
    except ValueError as e:
        return invalid(str(e))
    return Success(_rate_per_period(nominal_annual_rate, compounding_frequency, target_frequency))


def effective_rate_per_period_vector(
        nominal_rates: list[float] | np.ndarray,
        compounding_frequency: Frequency | str,
        target_frequency: Frequency | str
) -> np.ndarray:
    """
    Vectorized rate conversion. See effective_rate_per_period for details.

    Args:
        nominal_rates: Nominal annual rates as decimals, any shape
        compounding_frequency: Compounding frequency
        target_frequency: Payment/contribution frequency

    Returns:
        Array of rates per target period, same shape as input.
        NaN/inf inputs will produce NaN/inf outputs (natural numpy propagation).

    Raises:
        ValueError: If either frequency tag is unknown
    """
    if not isinstance(nominal_rates, np.ndarray):
        nominal_rates = np.array(nominal_rates, dtype=float)

    m = periods_per_year(compounding_frequency)
    p = periods_per_year(target_frequency)
    # Same as (1 + j/m)^(m/p) - 1 without cancellation near zero
    rates = np.expm1(m / p * np.log1p(nominal_rates / m))
    return np.where(nominal_rates == 0.0, 0.0, rates)
