# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from .outcomes import (
    CalculationOutcome,
    Success,
    invalid,
    is_non_negative,
    is_positive,
    non_converging,
)
from .scheduled_payments import BALANCE_EPSILON, ScheduleEntry

__version__ = "0.1.0"

# 100 years of monthly payments.
PAYOFF_MAX_MONTHS = 12 * 100


# =============================================================================
# Single balance, fixed payment
# =============================================================================

@dataclass(frozen=True)
class PayoffResult:
    """Outcome of paying a balance down with a fixed monthly payment."""
    months: int
    total_interest: float
    total_paid: float
    schedule: list[ScheduleEntry] | None = None


def simulate_payoff(
        balance: float,
        annual_rate: float,
        fixed_payment: float,
        include_schedule: bool = False,
        max_months: int = PAYOFF_MAX_MONTHS
) -> CalculationOutcome:
    """
    Simulate month-by-month paydown of a revolving balance under a fixed payment.

    Unlike a level-payment loan the payment is given and the number of months
    is the unknown, so the payment may be too small to ever clear the debt.

    PRE-CHECK:
    ----------
    With r = annual_rate / 12, if r > 0 and PAYMENT <= BALANCE * r the first
    month's interest absorbs the whole payment and the balance never shrinks:
    Failure(NON_CONVERGING).

    ZERO RATE:
    ----------
        MONTHS = ceil(BALANCE / PAYMENT), interest 0, total paid = BALANCE
    max_months does not apply to the closed form.

    GENERAL CASE:
    -------------
    Each month:
        INTEREST = BALANCE * r
        if PAYMENT > BALANCE + INTEREST: final month, pay BALANCE + INTEREST
        else: BALANCE -= PAYMENT - INTEREST
    A balance below BALANCE_EPSILON (0.005) counts as paid. More than
    max_months months returns Failure(NON_CONVERGING).

    Args:
        balance: Outstanding balance (> 0)
        annual_rate: APR as decimal (>= 0), compounded monthly
        fixed_payment: Monthly payment (> 0)
        include_schedule: Also return the month-by-month ScheduleEntry list
        max_months: Safety cap on simulated months (positive rate only)

    Returns:
        Success(PayoffResult), Failure(INVALID_INPUT) or Failure(NON_CONVERGING)

    Example:
        >>> simulate_payoff(1000, 0.20, 100).value.months
        12
    """
    if not is_positive(balance):
        return invalid(f"balance must be positive, got {balance}")
    if not is_non_negative(annual_rate):
        return invalid(f"annual_rate must be non-negative, got {annual_rate}")
    if not is_positive(fixed_payment):
        return invalid(f"fixed_payment must be positive, got {fixed_payment}")

    r = annual_rate / 12.0
    first_interest = balance * r
    if r > 0 and fixed_payment <= first_interest:
        return non_converging(
            f"payment {fixed_payment} does not exceed the first month's interest {first_interest}"
        )

    if r == 0:
        return _zero_rate_payoff(balance, fixed_payment, include_schedule)

    schedule = [] if include_schedule else None
    remaining = float(balance)
    months = 0
    total_interest = 0.0
    total_paid = 0.0
    while remaining > 0:
        if months >= max_months:
            return non_converging(f"balance not paid off within {max_months} months")
        interest = remaining * r
        if fixed_payment > remaining + interest:
            payment = remaining + interest
            principal = remaining
        else:
            payment = fixed_payment
            principal = fixed_payment - interest
        total_interest += interest
        total_paid += payment
        remaining -= principal
        months += 1
        if remaining < BALANCE_EPSILON:
            remaining = 0.0
        if schedule is not None:
            schedule.append(ScheduleEntry(months, payment, interest, principal, remaining))

    return Success(PayoffResult(months, total_interest, total_paid, schedule))


def _zero_rate_payoff(balance, payment, include_schedule):
    months = math.ceil(balance / payment)

    schedule = None
    if include_schedule:
        schedule = []
        remaining = float(balance)
        for month in range(1, months + 1):
            paid = min(payment, remaining)
            remaining = max(remaining - paid, 0.0)
            schedule.append(ScheduleEntry(month, paid, 0.0, paid, remaining))
    return Success(PayoffResult(months, 0.0, float(balance), schedule))


# =============================================================================
# Multiple debts (avalanche / snowball)
# =============================================================================

class PayoffStrategy(Enum):
    AVALANCHE = "avalanche"     # highest rate first
    SNOWBALL = "snowball"       # lowest balance first


@dataclass(frozen=True)
class Debt:
    name: str
    balance: float
    annual_rate: float
    minimum_payment: float


@dataclass(frozen=True)
class DebtPayoffResult:
    months: int
    total_interest: float
    total_paid: float
    payoff_order: list[tuple[str, int]] = field(default_factory=list)   # (name, month paid off)


def simulate_debt_payoff(
        debts: list[Debt],
        additional_payment: float = 0.0,
        strategy: PayoffStrategy | str = PayoffStrategy.AVALANCHE,
        max_months: int = PAYOFF_MAX_MONTHS
) -> CalculationOutcome:
    """
    Pay off several debts with a fixed monthly budget.

    The budget is the sum of all minimum payments plus additional_payment and
    stays constant, so the minimum of a paid-off debt rolls over to the next
    target. Each month every open debt accrues interest and receives its
    minimum, then whatever is left of the budget goes to the open debts in
    strategy order:

        avalanche: highest annual_rate first
        snowball:  lowest starting balance first

    No debt is paid more than its balance plus the month's interest.

    Args:
        debts: Debts to pay off (at least one)
        additional_payment: Monthly amount above the sum of minimums (>= 0)
        strategy: PayoffStrategy or its tag ("avalanche", "snowball")
        max_months: Safety cap on simulated months

    Returns:
        Success(DebtPayoffResult), Failure(INVALID_INPUT), or
        Failure(NON_CONVERGING) if a minimum payment does not cover its
        debt's first month interest or the cap is reached
    """
    if not debts:
        return invalid("at least one debt is required")
    if not is_non_negative(additional_payment):
        return invalid(f"additional_payment must be non-negative, got {additional_payment}")
    try:
        strategy = PayoffStrategy(strategy)
    except ValueError:
        return invalid(f"unknown payoff strategy, got {strategy!r}")
    for debt in debts:
        if not is_positive(debt.balance):
            return invalid(f"{debt.name}: balance must be positive, got {debt.balance}")
        if not is_non_negative(debt.annual_rate):
            return invalid(f"{debt.name}: annual_rate must be non-negative, got {debt.annual_rate}")
        if not is_positive(debt.minimum_payment):
            return invalid(f"{debt.name}: minimum_payment must be positive, got {debt.minimum_payment}")
        first_interest = debt.balance * debt.annual_rate / 12.0
        if debt.annual_rate > 0 and debt.minimum_payment <= first_interest:
            return non_converging(
                f"{debt.name}: minimum payment {debt.minimum_payment} does not exceed "
                f"the first month's interest {first_interest}"
            )

    if strategy is PayoffStrategy.AVALANCHE:
        ordered = sorted(debts, key=lambda d: -d.annual_rate)
    else:
        ordered = sorted(debts, key=lambda d: d.balance)

    budget = sum(d.minimum_payment for d in ordered) + additional_payment
    balances = [float(d.balance) for d in ordered]
    payoff_order = []
    total_interest = 0.0
    total_paid = 0.0
    month = 0

    while any(b > 0 for b in balances):
        if month >= max_months:
            return non_converging(f"debts not paid off within {max_months} months")
        month += 1

        open_idx = [i for i, b in enumerate(balances) if b > 0]
        interest = {i: balances[i] * ordered[i].annual_rate / 12.0 for i in open_idx}
        payments = {i: min(ordered[i].minimum_payment, balances[i] + interest[i]) for i in open_idx}
        available = budget - sum(payments.values())
        for i in open_idx:
            if available <= 0:
                break
            extra = min(available, balances[i] + interest[i] - payments[i])
            payments[i] += extra
            available -= extra

        for i in open_idx:
            total_interest += interest[i]
            total_paid += payments[i]
            balances[i] -= payments[i] - interest[i]
            if balances[i] < BALANCE_EPSILON:
                balances[i] = 0.0
                payoff_order.append((ordered[i].name, month))

    return Success(DebtPayoffResult(month, total_interest, total_paid, payoff_order))
