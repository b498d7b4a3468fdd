# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
import warnings
from dataclasses import dataclass

import numpy as np
from scipy.optimize import brentq

from .outcomes import (
    CalculationOutcome,
    Failure,
    Success,
    domain_error,
    invalid,
    is_non_negative,
    is_number,
    is_period_count,
    is_positive,
    non_converging,
)
from .rates import Frequency, as_frequency
from .scheduled_payments import annuity_factor

__version__ = "0.1.0"

# Convergence tolerance on the present value residual (currency units).
SOLVER_TOLERANCE = 1e-5
SOLVER_MAX_ITERATIONS = 100

# Upper bracket doublings before giving up (2^60 x 1% per month).
_MAX_BRACKET_EXPANSIONS = 60

# Initial IRR bracket per period; the upper bound doubles until NPV changes sign.
IRR_LOWER_BOUND = -0.99
IRR_UPPER_BOUND = 1.0

# Initial upper bound on the yield per coupon period.
YTM_UPPER_BOUND = 1.0


# =============================================================================
# APR approximation
# =============================================================================

@dataclass(frozen=True)
class AprEstimate:
    """
    Result of approximate_rate.

    apr is the annualized borrowing rate as decimal. When converged is False
    the solver did not meet its tolerance and apr holds the fallback
    approximation nominal_rate + fees / (principal * term_years).
    """
    apr: float
    periodic_rate: float
    payment: float
    converged: bool
    iterations: int = 0


def present_value_of_payments(payment: float, rate_per_period: float, periods: int) -> float:
    """
    Present value of an ordinary annuity of level payments.

    Formula:
        PV = PMT * (1 - (1+i)^-n) / i       (PMT * n when i == 0)
    """
    if rate_per_period == 0:
        return payment * periods
    return payment * -math.expm1(-periods * math.log1p(rate_per_period)) / rate_per_period


def _pv_residual(i, payment, periods, net_principal):
    return present_value_of_payments(payment, i, periods) - net_principal


def _check_solver_limits(tolerance, max_iterations) -> Failure | None:
    if not is_non_negative(tolerance):
        return invalid(f"tolerance must be non-negative, got {tolerance}")
    if not is_period_count(max_iterations):
        return invalid(f"max_iterations must be a positive integer, got {max_iterations}")
    return None


def approximate_rate(
        gross_principal: float,
        nominal_rate: float,
        fees: float,
        term_years: int,
        tolerance: float = SOLVER_TOLERANCE,
        max_iterations: int = SOLVER_MAX_ITERATIONS
) -> CalculationOutcome:
    """
    Approximate the APR of a loan whose upfront fees reduce the amount received.

    The monthly payment is fixed by the nominal rate on the gross principal.
    The APR is the monthly rate i (annualized as 12i) at which those payments
    are worth exactly the net amount received:

        g(i) = PMT * (1 - (1+i)^-n) / i - (P - FEES) = 0

    ALGORITHM:
    ----------
    1. Start at i0 = nominal_rate / 12. If |g(i0)| < tolerance (no fees) stop.
    2. g is decreasing in i and g(i0) = FEES > 0, so double an upper bound
       until g(hi) < 0.
    3. Solve on [i0, hi] with Brent's method (scipy.optimize.brentq), capped at
       max_iterations.
    4. Accept the root only if brentq converged and |g(root)| < tolerance.
       Otherwise return the fallback approximation

           APR = nominal_rate + FEES / (P * term_years)

       with converged=False and a RuntimeWarning. The fallback is a
       best-effort value, not an error.

    Args:
        gross_principal: Loan amount before fees (> 0)
        nominal_rate: Nominal annual rate as decimal (>= 0)
        fees: Upfront fees deducted from the amount received (>= 0)
        term_years: Loan term in years (12 x term_years must be whole)
        tolerance: Maximum |g(i)| accepted as converged
        max_iterations: Iteration cap passed to brentq

    Returns:
        Success(AprEstimate), Failure(INVALID_INPUT), or Failure(DOMAIN_ERROR)
        when fees >= principal

    Example:
        100,000 at 6% for 30 years with 3,000 of fees:
        >>> approximate_rate(100_000, 0.06, 3_000, 30).value.apr
        0.0629...
    """
    if not is_positive(gross_principal):
        return invalid(f"gross_principal must be positive, got {gross_principal}")
    if not is_non_negative(nominal_rate):
        return invalid(f"nominal_rate must be non-negative, got {nominal_rate}")
    if not is_non_negative(fees):
        return invalid(f"fees must be non-negative, got {fees}")
    if not is_positive(term_years) or not is_period_count(term_years * 12):
        return invalid(f"term_years must be positive with a whole number of months, got {term_years}")
    failure = _check_solver_limits(tolerance, max_iterations)
    if failure is not None:
        return failure

    net_principal = gross_principal - fees
    if net_principal <= 0:
        return domain_error(f"fees ({fees}) must be below the loan amount ({gross_principal})")

    n = int(term_years * 12)
    guess = nominal_rate / 12.0
    if 1.0 + guess <= 0:
        return domain_error(f"discount base 1 + i must be positive, got i={guess}")
    payment = gross_principal * annuity_factor(guess, n)
    args = (payment, n, net_principal)

    if abs(_pv_residual(guess, *args)) < tolerance:
        return Success(AprEstimate(apr=guess * 12.0, periodic_rate=guess, payment=payment, converged=True))

    root, converged, iterations = _solve_bracketed(guess, args, max_iterations)
    if converged and abs(_pv_residual(root, *args)) < tolerance:
        return Success(AprEstimate(apr=root * 12.0, periodic_rate=root, payment=payment,
                                   converged=True, iterations=iterations))

    fallback = nominal_rate + fees / (gross_principal * term_years)
    warnings.warn(
        f"APR search did not converge within {max_iterations} iterations "
        f"(tolerance {tolerance}); returning approximation {fallback:.6f}",
        RuntimeWarning,
    )
    return Success(AprEstimate(apr=fallback, periodic_rate=fallback / 12.0, payment=payment,
                               converged=False, iterations=iterations))


def _solve_bracketed(lo: float, args: tuple, max_iterations: int) -> tuple[float, bool, int]:
    hi = max(2.0 * lo, 0.01)
    for _ in range(_MAX_BRACKET_EXPANSIONS):
        if _pv_residual(hi, *args) < 0:
            break
        hi *= 2.0
    else:
        return lo, False, 0
    return _brent(_pv_residual, lo, hi, args, max_iterations)


def _brent(f, lo: float, hi: float, args: tuple, max_iterations: int) -> tuple[float, bool, int]:
    """Run brentq on [lo, hi]; report (root, converged, iterations) instead of raising."""
    try:
        root, info = brentq(
            f,
            lo, hi,
            args=args,
            xtol=1e-15,
            maxiter=int(max_iterations),
            full_output=True,
            disp=False,
        )
    except ValueError:
        # f(lo) and f(hi) share a sign: f(lo) is rounding noise around zero
        return lo, False, 0
    return root, info.converged, info.iterations


# =============================================================================
# Internal rate of return
# =============================================================================

def npv(rate: float, cash_flows: list[float] | np.ndarray) -> float:
    """
    Net present value of cash flows at periods 0, 1, 2, ...

    Formula:
        NPV = sum_t CF(t) / (1 + rate)^t

    Discount factors that overflow near rate = -1 come out as inf rather
    than raising; zero flows contribute zero regardless.
    """
    flows = np.asarray(cash_flows, dtype=float)
    t = np.arange(len(flows))
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        terms = flows * np.power(1.0 + rate, -t)
    return float(np.sum(np.where(flows == 0.0, 0.0, terms)))


def irr(
        cash_flows: list[float] | np.ndarray,
        tolerance: float = SOLVER_TOLERANCE,
        max_iterations: int = SOLVER_MAX_ITERATIONS
) -> CalculationOutcome:
    """
    Internal rate of return: the rate per period at which NPV is zero.

    ALGORITHM:
    ----------
    1. Bracket the root on [IRR_LOWER_BOUND, IRR_UPPER_BOUND] (-99% to 100%
       per period), doubling the upper bound while NPV keeps the sign it has
       at the lower bound.
    2. Solve with Brent's method, capped at max_iterations.
    3. Accept the root only if brentq converged and |NPV(root)| < tolerance.

    There is no approximate fallback: a rate that cannot be bracketed or
    does not meet the tolerance is Failure(NON_CONVERGING).

    Args:
        cash_flows: Flow at period 0 (the investment, < 0) followed by later
            flows, at least one of them positive
        tolerance: Maximum |NPV| accepted as converged
        max_iterations: Iteration cap passed to brentq

    Returns:
        Success(rate per period), Failure(INVALID_INPUT), Failure(DOMAIN_ERROR)
        for a flow pattern without an initial outflow and a later inflow, or
        Failure(NON_CONVERGING)

    Example:
        >>> irr([-100, 110]).value
        0.1
    """
    flows = list(cash_flows)
    if len(flows) < 2:
        return invalid(f"at least two cash flows are required, got {len(flows)}")
    for t, flow in enumerate(flows):
        if not is_number(flow):
            return invalid(f"cash flow {t} must be a finite number, got {flow!r}")
    failure = _check_solver_limits(tolerance, max_iterations)
    if failure is not None:
        return failure
    if flows[0] >= 0 or not any(flow > 0 for flow in flows[1:]):
        return domain_error("cash flows must start with an outflow and contain a later inflow")

    lo, hi = IRR_LOWER_BOUND, IRR_UPPER_BOUND
    npv_lo = npv(lo, flows)
    for _ in range(_MAX_BRACKET_EXPANSIONS):
        if npv_lo * npv(hi, flows) < 0:
            break
        hi *= 2.0
    else:
        return non_converging(f"NPV does not change sign between {lo} and {hi}")

    root, converged, iterations = _brent(npv, lo, hi, (flows,), max_iterations)
    if not converged or abs(npv(root, flows)) >= tolerance:
        return non_converging(
            f"IRR search did not converge within {max_iterations} iterations (tolerance {tolerance})"
        )
    return Success(root)


# =============================================================================
# Bond price and yield to maturity
# =============================================================================

def _check_bond_terms(face_value, coupon_rate, years, frequency) -> Failure | None:
    if not is_positive(face_value):
        return invalid(f"face_value must be positive, got {face_value}")
    if not is_non_negative(coupon_rate):
        return invalid(f"coupon_rate must be non-negative, got {coupon_rate}")
    try:
        p = as_frequency(frequency).periods_per_year
    except ValueError as e:
        return invalid(str(e))
    if not is_positive(years) or not is_period_count(years * p):
        return invalid(f"years must be positive with a whole number of coupon periods, got {years}")
    return None


def _price_at_yield(y: float, face_value: float, coupon: float, periods: int) -> float:
    if y == 0:
        return coupon * periods + face_value
    log_growth = periods * math.log1p(y)
    return coupon * -math.expm1(-log_growth) / y + face_value * math.exp(-log_growth)


def _price_residual(y, face_value, coupon, periods, price):
    return _price_at_yield(y, face_value, coupon, periods) - price


def bond_price(
        face_value: float,
        coupon_rate: float,
        years: float,
        yield_rate: float,
        frequency: Frequency | str = Frequency.SEMI_ANNUALLY
) -> CalculationOutcome:
    """
    Price of a fixed-coupon bond from its annual yield.

    Formula:
        PRICE = C * (1 - (1+y)^-N) / y + F / (1+y)^N
        PRICE = C * N + F                             when y == 0

    Where:
        F = face value
        C = F * coupon_rate / p      (coupon per period)
        y = yield_rate / p           (yield per period)
        N = years * p
        p = coupon periods per year

    Args:
        face_value: Redemption amount (> 0)
        coupon_rate: Annual coupon rate as decimal (>= 0)
        years: Years to maturity; years x periods per year must be whole
        yield_rate: Annual yield as decimal (>= 0)
        frequency: Coupon frequency (default semi-annually)

    Returns:
        Success(price) or Failure(INVALID_INPUT)
    """
    failure = _check_bond_terms(face_value, coupon_rate, years, frequency)
    if failure is not None:
        return failure
    if not is_non_negative(yield_rate):
        return invalid(f"yield_rate must be non-negative, got {yield_rate}")

    p = as_frequency(frequency).periods_per_year
    coupon = face_value * coupon_rate / p
    return Success(_price_at_yield(yield_rate / p, face_value, coupon, int(years * p)))


@dataclass(frozen=True)
class YtmEstimate:
    """
    Result of yield_to_maturity.

    method is "solved" when the price equation was solved within tolerance.
    Otherwise converged is False and ytm holds a fallback:
        "current_yield"  annual coupon / price (the yield could not be bracketed
                         at or above zero)
        "approximation"  (annual coupon + (F - price) / years) / ((F + price) / 2)
    """
    ytm: float
    periodic_yield: float
    current_yield: float
    converged: bool
    method: str
    iterations: int = 0


def yield_to_maturity(
        price: float,
        face_value: float,
        coupon_rate: float,
        years: float,
        frequency: Frequency | str = Frequency.SEMI_ANNUALLY,
        tolerance: float = SOLVER_TOLERANCE,
        max_iterations: int = SOLVER_MAX_ITERATIONS
) -> CalculationOutcome:
    """
    Annual yield to maturity implied by a bond's market price.

    Solves PRICE(y) = price for the yield per coupon period y (see bond_price)
    and annualizes it as y * p. PRICE(y) decreases in y, so the root is
    bracketed on [0, YTM_UPPER_BOUND], doubling the upper bound while the
    model price is still above the market price, and solved with brentq.

    FALLBACKS:
    ----------
    - price above the undiscounted cash flows (negative yield) or no bracket:
      current yield, annual coupon / price
    - brentq not converged or |PRICE(root) - price| >= tolerance:
      approximate YTM, (annual coupon + (F - price) / years) / ((F + price) / 2)
    Both return converged=False and emit a RuntimeWarning.

    Args:
        price: Market price (> 0)
        face_value: Redemption amount (> 0)
        coupon_rate: Annual coupon rate as decimal (>= 0)
        years: Years to maturity; years x periods per year must be whole
        frequency: Coupon frequency (default semi-annually)
        tolerance: Maximum price residual accepted as converged
        max_iterations: Iteration cap passed to brentq

    Returns:
        Success(YtmEstimate) or Failure(INVALID_INPUT)
    """
    if not is_positive(price):
        return invalid(f"price must be positive, got {price}")
    failure = _check_bond_terms(face_value, coupon_rate, years, frequency)
    if failure is not None:
        return failure
    failure = _check_solver_limits(tolerance, max_iterations)
    if failure is not None:
        return failure

    p = as_frequency(frequency).periods_per_year
    n = int(years * p)
    coupon = face_value * coupon_rate / p
    current_yield = coupon_rate * face_value / price
    args = (face_value, coupon, n, price)

    at_zero = _price_residual(0.0, *args)
    if abs(at_zero) < tolerance:
        return Success(YtmEstimate(0.0, 0.0, current_yield, converged=True, method="solved"))

    # at_zero < 0: the price exceeds the undiscounted cash flows
    bracketed = False
    hi = YTM_UPPER_BOUND
    if at_zero > 0:
        for _ in range(_MAX_BRACKET_EXPANSIONS):
            if _price_residual(hi, *args) < 0:
                bracketed = True
                break
            hi *= 2.0
    if not bracketed:
        warnings.warn(
            f"yield to maturity could not be bracketed for price {price}; "
            f"returning current yield {current_yield:.6f}",
            RuntimeWarning,
        )
        return Success(YtmEstimate(current_yield, current_yield / p, current_yield,
                                   converged=False, method="current_yield"))

    root, converged, iterations = _brent(_price_residual, 0.0, hi, args, max_iterations)
    if converged and abs(_price_residual(root, *args)) < tolerance:
        return Success(YtmEstimate(root * p, root, current_yield, converged=True,
                                   method="solved", iterations=iterations))

    approximation = (coupon_rate * face_value + (face_value - price) / years) / ((face_value + price) / 2.0)
    warnings.warn(
        f"yield to maturity did not converge within {max_iterations} iterations "
        f"(tolerance {tolerance}); returning approximation {approximation:.6f}",
        RuntimeWarning,
    )
    return Success(YtmEstimate(approximation, approximation / p, current_yield,
                               converged=False, method="approximation", iterations=iterations))
