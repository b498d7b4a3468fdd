# Requires Python 3.12+
"""
TVM Standard Formulas: time value of money and iterative solvers for the calculator hub.

Loan payments, amortization schedules, future/present value, annuity
payouts, APR approximation, revolving-balance payoff and table lookups.
Every formula returns Success(value) or Failure(reason, detail).
"""

from __future__ import annotations

__version__ = "0.1.0"

# Outcomes
from tvm_standard_formulas.outcomes import (
    FailureReason,
    Success,
    Failure,
    CalculationOutcome,
    CalculationError,
    unwrap,
)

# Rate conversion
from tvm_standard_formulas.rates import (
    Frequency,
    periods_per_year,
    effective_annual_rate,
    effective_rate_per_period,
    effective_rate_per_period_vector,
)

# Level payments and schedules
from tvm_standard_formulas.scheduled_payments import (
    annuity_factor,
    level_payment,
    loan_payment,
    ScheduleEntry,
    AmortizationSchedule,
    amortization_schedule,
    LeasePayment,
    lease_payment,
)

# Annuity payouts
from tvm_standard_formulas.annuities import (
    periodic_payout,
    annuity_payout,
)

# Growth
from tvm_standard_formulas.growth import (
    GrowthResult,
    future_value,
    sip_future_value,
    present_value,
    GoalResult,
    time_to_goal,
)

# APR, IRR and bond yield
from tvm_standard_formulas.rate_solver import (
    AprEstimate,
    present_value_of_payments,
    approximate_rate,
    npv,
    irr,
    bond_price,
    YtmEstimate,
    yield_to_maturity,
)

# Payoff
from tvm_standard_formulas.payoff import (
    PayoffResult,
    simulate_payoff,
    PayoffStrategy,
    Debt,
    DebtPayoffResult,
    simulate_debt_payoff,
)

# Lookup tables
from tvm_standard_formulas.lookup_tables import (
    lookup,
    UNIFORM_LIFETIME_TABLE,
    RmdResult,
    required_minimum_distribution,
)

# Body metrics
from tvm_standard_formulas.body_metrics import (
    navy_body_fat_percentage,
    blood_alcohol_content,
)

# Reference scenarios (optional; worked calculator cases)
from tvm_standard_formulas.examples import (
    ReferenceScenario,
    REFERENCE_SCENARIOS,
)

__all__ = [
    "__version__",
    # Outcomes
    "FailureReason",
    "Success",
    "Failure",
    "CalculationOutcome",
    "CalculationError",
    "unwrap",
    # Rate conversion
    "Frequency",
    "periods_per_year",
    "effective_annual_rate",
    "effective_rate_per_period",
    "effective_rate_per_period_vector",
    # Level payments and schedules
    "annuity_factor",
    "level_payment",
    "loan_payment",
    "ScheduleEntry",
    "AmortizationSchedule",
    "amortization_schedule",
    "LeasePayment",
    "lease_payment",
    # Annuity payouts
    "periodic_payout",
    "annuity_payout",
    # Growth
    "GrowthResult",
    "future_value",
    "sip_future_value",
    "present_value",
    "GoalResult",
    "time_to_goal",
    # APR, IRR and bond yield
    "AprEstimate",
    "present_value_of_payments",
    "approximate_rate",
    "npv",
    "irr",
    "bond_price",
    "YtmEstimate",
    "yield_to_maturity",
    # Payoff
    "PayoffResult",
    "simulate_payoff",
    "PayoffStrategy",
    "Debt",
    "DebtPayoffResult",
    "simulate_debt_payoff",
    # Lookup tables
    "lookup",
    "UNIFORM_LIFETIME_TABLE",
    "RmdResult",
    "required_minimum_distribution",
    # Body metrics
    "navy_body_fat_percentage",
    "blood_alcohol_content",
    # Reference scenarios
    "ReferenceScenario",
    "REFERENCE_SCENARIOS",
]
