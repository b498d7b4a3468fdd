# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .outcomes import (
    CalculationOutcome,
    Failure,
    Success,
    invalid,
    is_non_negative,
    is_period_count,
    is_positive,
)
from .rates import Frequency, _rate_per_period, as_frequency

__version__ = "0.1.0"

# Balances below this are treated as fully paid (absorbs floating-point drift).
BALANCE_EPSILON = 0.005


# =============================================================================
# Level payment (fully amortizing loan)
# =============================================================================

def annuity_factor(rate_per_period: float, total_periods: int) -> float:
    """
    Payment per unit of principal that fully amortizes a loan.

    Formula:
        AF = r(1+r)^n / ((1+r)^n - 1)    (r > 0)
        AF = 1/n                         (r == 0)

    Evaluated as AF = r / (1 - (1+r)^-n), the reciprocal of the present
    value annuity factor, with (1+r)^-n taken through log1p/expm1 so rates
    too small to change 1 + r still give a finite factor close to 1/n.

    Args:
        rate_per_period: Periodic rate as decimal
        total_periods: Number of level payments

    Returns:
        Level payment per unit of principal
    """
    if rate_per_period == 0:
        return 1.0 / total_periods
    return rate_per_period / -math.expm1(-total_periods * math.log1p(rate_per_period))


def _check_loan_terms(principal, rate_per_period, total_periods, principal_name="principal") -> Failure | None:
    if not is_positive(principal):
        return invalid(f"{principal_name} must be positive, got {principal}")
    if not is_non_negative(rate_per_period):
        return invalid(f"rate_per_period must be non-negative, got {rate_per_period}")
    if not is_period_count(total_periods):
        return invalid(f"total_periods must be a positive integer, got {total_periods}")
    return None


def level_payment(
        principal: float,
        rate_per_period: float,
        total_periods: int
) -> CalculationOutcome:
    """
    Calculate the level payment of a fully amortizing loan.

    Formula:
        PAYMENT = P * r(1+r)^n / ((1+r)^n - 1)
        PAYMENT = P / n                          when r == 0

    Where:
        P = principal
        r = rate per payment period (see rates.effective_rate_per_period)
        n = number of payments (years x periods per year)

    This routine underlies the mortgage, personal loan, student loan, EMI
    and auto loan calculators; they differ only in how principal, rate and
    term are assembled.

    Args:
        principal: Loan amount (> 0)
        rate_per_period: Periodic rate as decimal (>= 0)
        total_periods: Number of payments (positive integer)

    Returns:
        Success(payment) or Failure(INVALID_INPUT)

    Example:
        200,000 at 6% nominal compounded monthly for 30 years:
        >>> level_payment(200_000, 0.005, 360).value
        1199.10...
    """
    failure = _check_loan_terms(principal, rate_per_period, total_periods)
    if failure is not None:
        return failure
    return Success(principal * annuity_factor(rate_per_period, int(total_periods)))


def loan_payment(
        principal: float,
        nominal_annual_rate: float,
        years: int,
        payment_frequency: Frequency | str = Frequency.MONTHLY,
        compounding_frequency: Frequency | str | None = None
) -> CalculationOutcome:
    """
    Level payment from calculator-style inputs (annual rate, years, frequency).

    The nominal rate is converted to a rate per payment period through the
    effective annual rate. compounding_frequency defaults to the payment
    frequency, which gives the familiar j/12 monthly rate for mortgages.

    Args:
        principal: Loan amount (> 0)
        nominal_annual_rate: Nominal annual rate as decimal (>= 0)
        years: Loan term in years; years x periods per year must be whole
        payment_frequency: Payment frequency (default monthly)
        compounding_frequency: Compounding frequency (default = payment frequency)

    Returns:
        Success(payment per period) or Failure(INVALID_INPUT)
    """
    if compounding_frequency is None:
        compounding_frequency = payment_frequency
    try:
        periods_per_year = as_frequency(payment_frequency).periods_per_year
        as_frequency(compounding_frequency)
    except ValueError as e:
        return invalid(str(e))
    if not is_non_negative(nominal_annual_rate):
        return invalid(f"nominal_annual_rate must be non-negative, got {nominal_annual_rate}")
    if not is_positive(years):
        return invalid(f"years must be positive, got {years}")

    rate = _rate_per_period(nominal_annual_rate, compounding_frequency, payment_frequency)
    return level_payment(principal, rate, years * periods_per_year)


# =============================================================================
# Amortization schedule
# =============================================================================

@dataclass(frozen=True)
class ScheduleEntry:
    """One period of an amortization or payoff schedule."""
    period: int
    payment: float
    interest: float
    principal: float
    remaining_balance: float


@dataclass
class AmortizationSchedule:
    """
    Container for an amortization schedule.

    All arrays have one element per payment period (period 1..n). The last
    period's payment is adjusted so ending_balance[-1] is exactly zero.
    """
    level_payment: float
    period: np.ndarray
    beginning_balance: np.ndarray
    payment: np.ndarray
    interest: np.ndarray
    principal: np.ndarray
    ending_balance: np.ndarray

    @property
    def total_interest(self) -> float:
        return float(self.interest.sum())

    @property
    def total_paid(self) -> float:
        return float(self.payment.sum())

    def __len__(self) -> int:
        return len(self.period)

    def entries(self) -> list[ScheduleEntry]:
        return [
            ScheduleEntry(
                period=int(self.period[i]),
                payment=float(self.payment[i]),
                interest=float(self.interest[i]),
                principal=float(self.principal[i]),
                remaining_balance=float(self.ending_balance[i]),
            )
            for i in range(len(self.period))
        ]


def amortization_schedule(
        principal: float,
        rate_per_period: float,
        total_periods: int
) -> CalculationOutcome:
    """
    Generate the period-by-period schedule of a level-payment loan.

    Each period:
        INTEREST  = BALANCE(i-1) * r
        PRINCIPAL = PAYMENT - INTEREST
        BALANCE(i) = BALANCE(i-1) - PRINCIPAL

    In the final period PRINCIPAL is set to the remaining balance (and the
    payment to balance + interest) to absorb rounding drift. An ending
    balance below BALANCE_EPSILON is recorded as zero and the schedule stops.

    Args:
        principal: Loan amount (> 0)
        rate_per_period: Periodic rate as decimal (>= 0)
        total_periods: Number of payments (positive integer)

    Returns:
        Success(AmortizationSchedule) or Failure(INVALID_INPUT)
    """
    outcome = level_payment(principal, rate_per_period, total_periods)
    if isinstance(outcome, Failure):
        return outcome
    payment_amount = outcome.value
    n = int(total_periods)

    period = np.arange(1, n + 1)
    beginning_balance = np.zeros(n)
    payment = np.zeros(n)
    interest = np.zeros(n)
    principal_paid = np.zeros(n)
    ending_balance = np.zeros(n)

    balance = float(principal)
    last = n
    for i in range(n):
        beginning_balance[i] = balance
        interest[i] = balance * rate_per_period
        if i == n - 1:
            principal_paid[i] = balance
            payment[i] = balance + interest[i]
        else:
            principal_paid[i] = payment_amount - interest[i]
            payment[i] = payment_amount
        balance -= principal_paid[i]
        if balance < BALANCE_EPSILON:
            balance = 0.0
        ending_balance[i] = balance
        if balance == 0.0:
            last = i + 1
            break

    return Success(AmortizationSchedule(
        level_payment=payment_amount,
        period=period[:last],
        beginning_balance=beginning_balance[:last],
        payment=payment[:last],
        interest=interest[:last],
        principal=principal_paid[:last],
        ending_balance=ending_balance[:last],
    ))


# =============================================================================
# Auto lease
# =============================================================================

@dataclass(frozen=True)
class LeasePayment:
    """Monthly lease payment breakdown."""
    depreciation: float         # (cap cost - residual) / term
    finance_charge: float       # (cap cost + residual) * money factor
    monthly_payment: float      # pre-tax
    monthly_payment_with_tax: float
    total_cost: float           # payments with tax + down payment


def lease_payment(
        vehicle_price: float,
        residual_percent: float,
        term_months: int,
        money_factor: float,
        down_payment: float = 0.0,
        trade_in: float = 0.0,
        sales_tax_rate: float = 0.0
) -> CalculationOutcome:
    """
    Calculate a vehicle lease payment.

    Formula:
        CAP COST     = PRICE - DOWN - TRADE IN
        RESIDUAL     = PRICE * residual_percent
        DEPRECIATION = (CAP COST - RESIDUAL) / TERM
        FINANCE      = (CAP COST + RESIDUAL) * MONEY FACTOR
        PAYMENT      = DEPRECIATION + FINANCE
        WITH TAX     = PAYMENT * (1 + sales_tax_rate)

    Args:
        vehicle_price: Negotiated price / MSRP (> 0)
        residual_percent: Residual value as decimal of price (0.55 for 55%)
        term_months: Lease term in months (positive integer)
        money_factor: Monthly lease rate (>= 0, e.g. 0.00125)
        down_payment: Cash down (>= 0)
        trade_in: Trade-in credit (>= 0)
        sales_tax_rate: Tax on the monthly payment as decimal (>= 0)

    Returns:
        Success(LeasePayment) or Failure(INVALID_INPUT)
    """
    if not is_positive(vehicle_price):
        return invalid(f"vehicle_price must be positive, got {vehicle_price}")
    if not is_non_negative(residual_percent):
        return invalid(f"residual_percent must be non-negative, got {residual_percent}")
    if not is_period_count(term_months):
        return invalid(f"term_months must be a positive integer, got {term_months}")
    for name, value in (("money_factor", money_factor), ("down_payment", down_payment),
                        ("trade_in", trade_in), ("sales_tax_rate", sales_tax_rate)):
        if not is_non_negative(value):
            return invalid(f"{name} must be non-negative, got {value}")

    capitalized_cost = vehicle_price - down_payment - trade_in
    if capitalized_cost <= 0:
        return invalid(f"down payment and trade-in must be below the vehicle price, got cap cost {capitalized_cost}")

    residual_value = vehicle_price * residual_percent
    depreciation = (capitalized_cost - residual_value) / term_months
    finance_charge = (capitalized_cost + residual_value) * money_factor
    monthly = depreciation + finance_charge
    monthly_with_tax = monthly * (1.0 + sales_tax_rate)

    return Success(LeasePayment(
        depreciation=depreciation,
        finance_charge=finance_charge,
        monthly_payment=monthly,
        monthly_payment_with_tax=monthly_with_tax,
        total_cost=monthly_with_tax * term_months + down_payment,
    ))
