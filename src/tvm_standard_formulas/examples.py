"""
TVM Standard Formulas - Reference Scenarios

**Version**: 0.1.0
**Last Updated**: 2026-10-18
**Status**: Draft

Worked calculator scenarios with published or hand-checked results, one per
calculator family. Each scenario records the formula, its keyword inputs and
the expected fields of the Success value.

Structure:
  ReferenceScenario - id, description, formula, inputs, expected, places

  expected maps a field name to its value. The special key "value" refers to
  the Success value itself (formulas returning a plain number).
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from .annuities import annuity_payout
from .growth import future_value, present_value, sip_future_value
from .lookup_tables import required_minimum_distribution
from .payoff import simulate_payoff
from .rate_solver import approximate_rate, irr, yield_to_maturity
from .scheduled_payments import loan_payment


@dataclass
class ReferenceScenario:
    """Calculator inputs and the expected result."""
    id: str
    description: str
    formula: Callable[..., Any]
    inputs: Dict[str, Any]
    expected: Dict[str, float]
    places: int = 2                                 # decimal places compared
    notes: str = field(default="")

    def run(self):
        return self.formula(**self.inputs)


# =============================================================================
# SCENARIOS
# =============================================================================

MORTGAGE_30Y = ReferenceScenario(
    id="MORTGAGE_30Y",
    description="30-year fixed mortgage, 200,000 at 6% nominal, monthly payments and compounding.",
    formula=loan_payment,
    inputs=dict(principal=200_000, nominal_annual_rate=0.06, years=30),
    expected={"value": 1199.10},
)

MORTGAGE_15Y = ReferenceScenario(
    id="MORTGAGE_15Y",
    description="15-year fixed mortgage, 200,000 at 6% nominal.",
    formula=loan_payment,
    inputs=dict(principal=200_000, nominal_annual_rate=0.06, years=15),
    expected={"value": 1687.71},
)

AUTO_LOAN_5Y = ReferenceScenario(
    id="AUTO_LOAN_5Y",
    description="Auto loan, 25,000 at 5% over 60 months.",
    formula=loan_payment,
    inputs=dict(principal=25_000, nominal_annual_rate=0.05, years=5),
    expected={"value": 471.78},
)

LUMP_SUM_FV = ReferenceScenario(
    id="LUMP_SUM_FV",
    description="10,000 compounded annually at 5% for 10 years, no contributions.",
    formula=future_value,
    inputs=dict(present_value=10_000, nominal_annual_rate=0.05, years=10,
                compounding_frequency="annually"),
    expected={"future_value": 16288.95, "total_contributions": 0.0, "total_interest": 6288.95},
)

SIP_10Y = ReferenceScenario(
    id="SIP_10Y",
    description="SIP of 1,000 per month at 12% compounded monthly for 10 years.",
    formula=sip_future_value,
    inputs=dict(monthly_investment=1_000, nominal_annual_rate=0.12, years=10),
    expected={"future_value": 230038.69, "total_contributions": 120000.0, "total_interest": 110038.69},
)

DISCOUNTED_1000 = ReferenceScenario(
    id="DISCOUNTED_1000",
    description="1,000 due in 10 periods discounted at 5% per period.",
    formula=present_value,
    inputs=dict(future_value=1_000, rate_per_period=0.05, periods=10),
    expected={"value": 613.91},
)

ANNUITY_PAYOUT_20Y = ReferenceScenario(
    id="ANNUITY_PAYOUT_20Y",
    description="100,000 pool paid out monthly over 20 years at 5%.",
    formula=annuity_payout,
    inputs=dict(present_value_pool=100_000, nominal_annual_rate=0.05, years=20),
    expected={"value": 659.96},
)

CREDIT_CARD_PAYOFF = ReferenceScenario(
    id="CREDIT_CARD_PAYOFF",
    description="1,000 card balance at 20% APR paid down 100 per month.",
    formula=simulate_payoff,
    inputs=dict(balance=1_000, annual_rate=0.20, fixed_payment=100),
    expected={"months": 12},
    notes="Eleven full payments and a smaller twelfth.",
)

APR_NO_FEES = ReferenceScenario(
    id="APR_NO_FEES",
    description="Without fees the APR equals the nominal rate.",
    formula=approximate_rate,
    inputs=dict(gross_principal=50_000, nominal_rate=0.07, fees=0, term_years=5),
    expected={"apr": 0.07},
    places=8,
)

IRR_THREE_PERIOD = ReferenceScenario(
    id="IRR_THREE_PERIOD",
    description="1,000 invested, 1,331 returned after three periods.",
    formula=irr,
    inputs=dict(cash_flows=[-1_000, 0, 0, 1_331]),
    expected={"value": 0.10},
    places=8,
)

BOND_AT_PAR = ReferenceScenario(
    id="BOND_AT_PAR",
    description="10-year 5% semi-annual bond priced at par yields its coupon.",
    formula=yield_to_maturity,
    inputs=dict(price=1_000, face_value=1_000, coupon_rate=0.05, years=10),
    expected={"ytm": 0.05, "current_yield": 0.05},
    places=8,
)

RMD_AGE_75 = ReferenceScenario(
    id="RMD_AGE_75",
    description="RMD at age 75 on a 100,000 prior year-end balance (period 24.6).",
    formula=required_minimum_distribution,
    inputs=dict(account_balance=100_000, age=75),
    expected={"amount": 4065.04, "distribution_period": 24.6},
)


REFERENCE_SCENARIOS = {
    # Level payments
    "MORTGAGE_30Y": MORTGAGE_30Y,
    "MORTGAGE_15Y": MORTGAGE_15Y,
    "AUTO_LOAN_5Y": AUTO_LOAN_5Y,

    # Growth and discounting
    "LUMP_SUM_FV": LUMP_SUM_FV,
    "SIP_10Y": SIP_10Y,
    "DISCOUNTED_1000": DISCOUNTED_1000,

    # Payouts
    "ANNUITY_PAYOUT_20Y": ANNUITY_PAYOUT_20Y,

    # Iterative
    "CREDIT_CARD_PAYOFF": CREDIT_CARD_PAYOFF,
    "APR_NO_FEES": APR_NO_FEES,
    "IRR_THREE_PERIOD": IRR_THREE_PERIOD,
    "BOND_AT_PAR": BOND_AT_PAR,

    # Tables
    "RMD_AGE_75": RMD_AGE_75,
}


# =============================================================================
# QUICK TEST
# =============================================================================
if __name__ == "__main__":
    print("TVM Reference Scenarios")
    print("=" * 70)

    for name, scenario in REFERENCE_SCENARIOS.items():
        outcome = scenario.run()
        print(f"\n{name}: {scenario.description[:60]}")
        if not outcome.ok:
            print(f"  FAILED: {outcome.reason.value} {outcome.detail}")
            continue
        for key, expected in scenario.expected.items():
            actual = outcome.value if key == "value" else getattr(outcome.value, key)
            print(f"  {key}: expected={expected}, actual={actual:.{scenario.places}f}")
