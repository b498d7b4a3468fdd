# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math

from .outcomes import (
    CalculationOutcome,
    Success,
    domain_error,
    invalid,
    is_non_negative,
    is_positive,
)

__version__ = "0.1.0"

CM_PER_INCH = 2.54
GRAMS_PER_POUND = 453.592
GRAMS_PER_STANDARD_DRINK = 14.0

# Widmark body water distribution ratios.
MALE_DISTRIBUTION_RATIO = 0.68
FEMALE_DISTRIBUTION_RATIO = 0.55

# BAC percentage points eliminated per hour (population average).
METABOLISM_RATE = 0.015


def _check_sex_and_unit(sex, unit):
    if sex not in ("male", "female"):
        return invalid(f"sex must be 'male' or 'female', got {sex!r}")
    if unit not in ("imperial", "metric"):
        return invalid(f"unit must be 'imperial' or 'metric', got {unit!r}")
    return None


# =============================================================================
# U.S. Navy circumference method
# =============================================================================

def navy_body_fat_percentage(
        sex: str,
        height: float,
        neck: float,
        waist: float,
        hip: float | None = None,
        unit: str = "imperial"
) -> CalculationOutcome:
    """
    Estimate body fat percentage from circumference measurements.

    Formula (measurements in inches):
        male:   86.010 * log10(waist - neck) - 70.041 * log10(height) + 36.76
        female: 163.205 * log10(waist + hip - neck) - 97.684 * log10(height) - 78.387

    The log argument is checked before evaluation: waist <= neck (or
    waist + hip <= neck) is a DomainError, not a NaN. Negative estimates are
    reported as 0.

    Args:
        sex: "male" or "female"
        height: Height (> 0)
        neck: Neck circumference (> 0)
        waist: Waist circumference (> 0)
        hip: Hip circumference, required for female
        unit: "imperial" (inches) or "metric" (centimetres)

    Returns:
        Success(body fat %), Failure(INVALID_INPUT) or Failure(DOMAIN_ERROR)
    """
    failure = _check_sex_and_unit(sex, unit)
    if failure is not None:
        return failure
    for name, value in (("height", height), ("neck", neck), ("waist", waist)):
        if not is_positive(value):
            return invalid(f"{name} must be positive, got {value}")
    if sex == "female" and not is_positive(hip):
        return invalid(f"hip must be positive for the female formula, got {hip}")

    scale = 1.0 / CM_PER_INCH if unit == "metric" else 1.0
    height_in = height * scale
    neck_in = neck * scale
    waist_in = waist * scale

    if sex == "male":
        circumference = waist_in - neck_in
        if circumference <= 0:
            return domain_error(f"waist ({waist}) must exceed neck ({neck})")
        bfp = 86.010 * math.log10(circumference) - 70.041 * math.log10(height_in) + 36.76
    else:
        circumference = waist_in + hip * scale - neck_in
        if circumference <= 0:
            return domain_error(f"waist + hip ({waist} + {hip}) must exceed neck ({neck})")
        bfp = 163.205 * math.log10(circumference) - 97.684 * math.log10(height_in) - 78.387

    return Success(max(0.0, bfp))


# =============================================================================
# Blood alcohol content (Widmark)
# =============================================================================

def blood_alcohol_content(
        weight: float,
        drinks: int,
        hours: float,
        sex: str,
        unit: str = "imperial"
) -> CalculationOutcome:
    """
    Estimate blood alcohol content as a percentage.

    Formula:
        BAC = grams alcohol / (body weight g * r) * 100 - 0.015 * hours

    One standard drink is 14 g of alcohol; r is 0.68 for men and 0.55 for
    women. The result never goes below 0.

    Args:
        weight: Body weight, pounds (imperial) or kilograms (metric) (> 0)
        drinks: Standard drinks consumed (>= 0)
        hours: Hours since the first drink (>= 0)
        sex: "male" or "female"
        unit: "imperial" or "metric"

    Returns:
        Success(BAC %) or Failure(INVALID_INPUT)
    """
    failure = _check_sex_and_unit(sex, unit)
    if failure is not None:
        return failure
    if not is_positive(weight):
        return invalid(f"weight must be positive, got {weight}")
    if not is_non_negative(drinks):
        return invalid(f"drinks must be non-negative, got {drinks}")
    if not is_non_negative(hours):
        return invalid(f"hours must be non-negative, got {hours}")

    weight_grams = weight * 1000.0 if unit == "metric" else weight * GRAMS_PER_POUND
    ratio = MALE_DISTRIBUTION_RATIO if sex == "male" else FEMALE_DISTRIBUTION_RATIO
    peak = drinks * GRAMS_PER_STANDARD_DRINK / (weight_grams * ratio) * 100.0
    return Success(max(0.0, peak - METABOLISM_RATE * hours))
