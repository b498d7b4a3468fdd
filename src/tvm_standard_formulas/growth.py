# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
from dataclasses import dataclass

from .outcomes import (
    CalculationOutcome,
    Success,
    domain_error,
    invalid,
    is_non_negative,
    is_positive,
    non_converging,
)
from .rates import Frequency, _rate_per_period, as_frequency

__version__ = "0.1.0"

# 150 years of monthly deposits.
GOAL_MAX_MONTHS = 12 * 150


# =============================================================================
# Future value of a lump sum plus periodic contributions
# =============================================================================

@dataclass(frozen=True)
class GrowthResult:
    """Future value breakdown."""
    future_value: float
    present_value: float
    total_contributions: float      # contributions made, excluding the initial amount
    total_interest: float           # future_value - present_value - total_contributions

    @property
    def principal_and_contributions(self) -> float:
        return self.present_value + self.total_contributions


def future_value(
        present_value: float,
        nominal_annual_rate: float,
        years: float,
        compounding_frequency: Frequency | str,
        contribution: float = 0.0,
        contribution_frequency: Frequency | str | None = None
) -> CalculationOutcome:
    """
    Future value of an initial amount plus an ordinary annuity of contributions.

    Formula:
        FV_principal = PV * (1 + j/m)^(m*t)
        FV_contrib   = PMT * ((1 + i)^N - 1) / i      (PMT * N when i == 0)
        FV           = FV_principal + FV_contrib

    Where:
        j = nominal annual rate, m = compounding periods per year
        i = effective rate per contribution period (rates.effective_rate_per_period)
        N = p * t, p = contribution periods per year

    Contributions are made at the end of each contribution period. Using the
    contribution-frequency effective rate values a monthly contribution under
    quarterly compounding correctly. The same routine backs the future value,
    compound interest and investment growth calculators.

    Args:
        present_value: Initial amount (>= 0)
        nominal_annual_rate: Nominal annual rate as decimal (>= 0)
        years: Horizon in years (> 0, may be fractional)
        compounding_frequency: Compounding frequency
        contribution: Amount contributed each contribution period (>= 0)
        contribution_frequency: Contribution frequency; may be None only when
            contribution is 0

    Returns:
        Success(GrowthResult) or Failure(INVALID_INPUT)
    """
    if not is_non_negative(present_value):
        return invalid(f"present_value must be non-negative, got {present_value}")
    if not is_non_negative(nominal_annual_rate):
        return invalid(f"nominal_annual_rate must be non-negative, got {nominal_annual_rate}")
    if not is_positive(years):
        return invalid(f"years must be positive, got {years}")
    if not is_non_negative(contribution):
        return invalid(f"contribution must be non-negative, got {contribution}")
    if contribution > 0 and contribution_frequency is None:
        return invalid("contribution_frequency is required when contribution is positive")
    try:
        m = as_frequency(compounding_frequency).periods_per_year
        p = as_frequency(contribution_frequency).periods_per_year if contribution_frequency is not None else 0
    except ValueError as e:
        return invalid(str(e))

    fv_principal = present_value * (1.0 + nominal_annual_rate / m) ** (m * years)

    fv_contributions = 0.0
    if contribution > 0 and p > 0:
        i = _rate_per_period(nominal_annual_rate, compounding_frequency, contribution_frequency)
        n = p * years
        if i == 0:
            fv_contributions = contribution * n
        else:
            fv_contributions = contribution * math.expm1(n * math.log1p(i)) / i

    total = fv_principal + fv_contributions
    contributed = contribution * p * years
    return Success(GrowthResult(
        future_value=total,
        present_value=float(present_value),
        total_contributions=contributed,
        total_interest=total - present_value - contributed,
    ))


def sip_future_value(
        monthly_investment: float,
        nominal_annual_rate: float,
        years: float,
        compounding_frequency: Frequency | str = Frequency.MONTHLY
) -> CalculationOutcome:
    """Systematic investment plan: future_value with no lump sum and monthly contributions."""
    if not is_positive(monthly_investment):
        return invalid(f"monthly_investment must be positive, got {monthly_investment}")
    return future_value(0.0, nominal_annual_rate, years, compounding_frequency,
                        contribution=monthly_investment,
                        contribution_frequency=Frequency.MONTHLY)


# =============================================================================
# Present value
# =============================================================================

def present_value(
        future_value: float,
        rate_per_period: float,
        periods: float
) -> CalculationOutcome:
    """
    Discount a single future amount.

    Formula:
        PV = FV / (1 + r)^n

    Args:
        future_value: Amount to discount (>= 0)
        rate_per_period: Discount rate per period as decimal (>= 0)
        periods: Number of periods (> 0)

    Returns:
        Success(present value) or Failure(INVALID_INPUT)
    """
    if not is_non_negative(future_value):
        return invalid(f"future_value must be non-negative, got {future_value}")
    if not is_non_negative(rate_per_period):
        return invalid(f"rate_per_period must be non-negative, got {rate_per_period}")
    if not is_positive(periods):
        return invalid(f"periods must be positive, got {periods}")
    return Success(future_value / (1.0 + rate_per_period) ** periods)


# =============================================================================
# Time to reach a savings goal
# =============================================================================

@dataclass(frozen=True)
class GoalResult:
    months: int
    final_balance: float
    total_contributions: float
    total_interest: float


def time_to_goal(
        goal: float,
        initial_deposit: float,
        monthly_contribution: float,
        nominal_annual_rate: float,
        compounding_frequency: Frequency | str = Frequency.MONTHLY,
        max_months: int = GOAL_MAX_MONTHS
) -> CalculationOutcome:
    """
    Number of months of deposits needed to reach a savings goal.

    The balance grows at the effective monthly rate implied by the
    compounding frequency and the contribution is added at the end of each
    month:

        BALANCE(k) = BALANCE(k-1) * (1 + i) + PMT

    With a zero rate the answer is closed form: ceil((GOAL - P) / PMT).

    Args:
        goal: Target balance (> 0)
        initial_deposit: Starting balance (>= 0)
        monthly_contribution: Deposit at each month end (>= 0)
        nominal_annual_rate: Nominal annual rate as decimal (>= 0)
        compounding_frequency: Compounding frequency (default monthly)
        max_months: Simulation cap

    Returns:
        Success(GoalResult), Failure(INVALID_INPUT), Failure(DOMAIN_ERROR) if
        the goal is already met, or Failure(NON_CONVERGING) if the goal can
        never be met or is not met within max_months
    """
    if not is_positive(goal):
        return invalid(f"goal must be positive, got {goal}")
    if not is_non_negative(initial_deposit):
        return invalid(f"initial_deposit must be non-negative, got {initial_deposit}")
    if not is_non_negative(monthly_contribution):
        return invalid(f"monthly_contribution must be non-negative, got {monthly_contribution}")
    if not is_non_negative(nominal_annual_rate):
        return invalid(f"nominal_annual_rate must be non-negative, got {nominal_annual_rate}")
    try:
        as_frequency(compounding_frequency)
    except ValueError as e:
        return invalid(str(e))

    if goal <= initial_deposit:
        return domain_error(f"goal {goal} is already covered by the initial deposit {initial_deposit}")
    if monthly_contribution == 0 and (nominal_annual_rate == 0 or initial_deposit == 0):
        return non_converging("balance cannot grow without contributions or interest")

    if nominal_annual_rate == 0:
        months = math.ceil((goal - initial_deposit) / monthly_contribution)
        if months > max_months:
            return non_converging(f"goal not reached within {max_months} months")
        contributed = months * monthly_contribution
        return Success(GoalResult(months, initial_deposit + contributed, contributed, 0.0))

    i = _rate_per_period(nominal_annual_rate, compounding_frequency, Frequency.MONTHLY)
    balance = float(initial_deposit)
    months = 0
    while balance < goal:
        if months >= max_months:
            return non_converging(f"goal not reached within {max_months} months")
        balance = balance * (1.0 + i) + monthly_contribution
        months += 1

    contributed = months * monthly_contribution
    return Success(GoalResult(
        months=months,
        final_balance=balance,
        total_contributions=contributed,
        total_interest=balance - initial_deposit - contributed,
    ))
