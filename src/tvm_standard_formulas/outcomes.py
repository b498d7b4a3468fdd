# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any

__version__ = "0.1.0"


# =============================================================================
# Calculation outcomes
# =============================================================================
#
# Every public formula returns either Success(value) or Failure(reason, detail).
# A numerically invalid domain (payment below interest, fees above principal,
# log of a non-positive circumference) is part of the normal result type so
# the caller can render a specific message instead of catching exceptions.
# =============================================================================

class FailureReason(Enum):
    """Machine-readable failure taxonomy."""
    INVALID_INPUT = "InvalidInput"      # precondition violated (negative rate, zero term, NaN)
    DOMAIN_ERROR = "DomainError"        # valid inputs, undefined combination
    NON_CONVERGING = "NonConverging"    # iterative process cannot finish


@dataclass(frozen=True)
class Success:
    """Successful calculation carrying a number or a small result bundle."""
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed calculation with a reason and a plain-text detail for logs."""
    reason: FailureReason
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


CalculationOutcome = Success | Failure


class CalculationError(ValueError):
    """Raised by unwrap() when a Failure is forced into a value."""

    def __init__(self, failure: Failure):
        super().__init__(f"{failure.reason.value}: {failure.detail}")
        self.reason = failure.reason
        self.detail = failure.detail


def unwrap(outcome: CalculationOutcome) -> Any:
    """
    Return the value of a Success or raise CalculationError for a Failure.

    Args:
        outcome: Result of any formula in this package

    Returns:
        The wrapped value

    Raises:
        CalculationError: If outcome is a Failure
    """
    if isinstance(outcome, Failure):
        raise CalculationError(outcome)
    return outcome.value


# -----------------------------------------------------------------------------
# Precondition helpers
# -----------------------------------------------------------------------------

def invalid(detail: str) -> Failure:
    return Failure(FailureReason.INVALID_INPUT, detail)


def domain_error(detail: str) -> Failure:
    return Failure(FailureReason.DOMAIN_ERROR, detail)


def non_converging(detail: str) -> Failure:
    return Failure(FailureReason.NON_CONVERGING, detail)


def is_number(x: Any) -> bool:
    """True for finite real numbers (bool excluded)."""
    if isinstance(x, bool) or not isinstance(x, numbers.Real):
        return False
    return math.isfinite(x)


def is_positive(x: Any) -> bool:
    return is_number(x) and x > 0


def is_non_negative(x: Any) -> bool:
    return is_number(x) and x >= 0


def is_period_count(x: Any) -> bool:
    """True for a positive whole number of periods (3 or 3.0, not 3.5)."""
    return is_positive(x) and float(x).is_integer()
