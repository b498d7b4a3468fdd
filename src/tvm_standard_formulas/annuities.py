# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

from .outcomes import CalculationOutcome, Success, invalid, is_non_negative, is_positive
from .rates import Frequency, _rate_per_period, as_frequency
from .scheduled_payments import _check_loan_terms, annuity_factor

__version__ = "0.1.0"


# =============================================================================
# Annuity payout (pool draining)
# =============================================================================

def periodic_payout(
        present_value_pool: float,
        rate_per_period: float,
        total_periods: int
) -> CalculationOutcome:
    """
    Calculate the level payout that drains a pool over a fixed number of periods.

    Formula:
        PAYOUT = PV * r(1+r)^n / ((1+r)^n - 1)
        PAYOUT = PV / n                          when r == 0

    Mathematically the same annuity factor as a loan payment: the pool plays
    the role of the principal and the payout the role of the payment, with the
    pool earning r per period while it is drawn down.

    Args:
        present_value_pool: Amount available at the start of the payout (> 0)
        rate_per_period: Rate earned per payout period as decimal (>= 0)
        total_periods: Number of payouts (positive integer)

    Returns:
        Success(payout per period) or Failure(INVALID_INPUT)
    """
    failure = _check_loan_terms(present_value_pool, rate_per_period, total_periods,
                                principal_name="present_value_pool")
    if failure is not None:
        return failure
    return Success(present_value_pool * annuity_factor(rate_per_period, int(total_periods)))


def annuity_payout(
        present_value_pool: float,
        nominal_annual_rate: float,
        years: int,
        payout_frequency: Frequency | str = Frequency.MONTHLY
) -> CalculationOutcome:
    """
    Payout per period from calculator-style inputs.

    The pool is assumed to compound at the payout frequency, so the rate per
    payout period is j/p (computed through the effective annual rate).

    Args:
        present_value_pool: Amount available (> 0)
        nominal_annual_rate: Nominal annual rate as decimal (>= 0)
        years: Payout duration in years
        payout_frequency: Payout frequency (default monthly)

    Returns:
        Success(payout per period) or Failure(INVALID_INPUT)
    """
    try:
        periods_per_year = as_frequency(payout_frequency).periods_per_year
    except ValueError as e:
        return invalid(str(e))
    if not is_non_negative(nominal_annual_rate):
        return invalid(f"nominal_annual_rate must be non-negative, got {nominal_annual_rate}")
    if not is_positive(years):
        return invalid(f"years must be positive, got {years}")

    rate = _rate_per_period(nominal_annual_rate, payout_frequency, payout_frequency)
    return periodic_payout(present_value_pool, rate, years * periods_per_year)
