"""
Unit tests for level payments, amortization schedules and lease payments.

Version: 0.1.0
Last Updated: 2026-10-18
Status: Active

================================================================================
FUNCTIONS UNDER TEST:
================================================================================
- level_payment(principal, rate_per_period, total_periods)
- loan_payment(principal, nominal_annual_rate, years, payment_frequency, compounding_frequency)
- amortization_schedule(principal, rate_per_period, total_periods)
- lease_payment(vehicle_price, residual_percent, term_months, money_factor, ...)

Amortization identities checked for every schedule:
    * payment = principal + interest (per period and in total)
    * ending balance of the last period is exactly zero
    * interest(1) = P * r
    * all but the last payment equal the level payment
================================================================================
"""

import math
import unittest

import numpy as np

from tvm_standard_formulas.outcomes import FailureReason
from tvm_standard_formulas.rates import effective_rate_per_period
from tvm_standard_formulas.scheduled_payments import (
    AmortizationSchedule,
    ScheduleEntry,
    amortization_schedule,
    lease_payment,
    level_payment,
    loan_payment,
)

DECIMAL_PLACES_FOR_ASSERTIONS: int = 6
RANDOM_SEED = 42

# Module-level shared data (populated by setUpModule)
TEST_LOANS: list[dict[str, int | float]] = []


def setUpModule():
    """Build a reproducible set of loans: fixed grid plus random draws."""
    for principal in [1_000.0, 25_000.0, 200_000.0]:
        for annual_rate in [0.0, 0.035, 0.06, 0.18]:
            for n in [1, 12, 60, 360]:
                TEST_LOANS.append({'principal': principal, 'rate': annual_rate / 12, 'n': n})

    rng = np.random.RandomState(RANDOM_SEED)
    for _ in range(25):
        TEST_LOANS.append({
            'principal': float(rng.uniform(500, 1_000_000)),
            'rate': float(rng.uniform(0.0, 0.24)) / 12,
            'n': int(rng.choice([24, 36, 48, 60, 120, 180, 240, 300, 360])),
        })

    if not TEST_LOANS:
        raise RuntimeError("setUpModule failed: No test loans were created")


def tearDownModule():
    TEST_LOANS.clear()


# =============================================================================
# Level payment
# =============================================================================

class TestLevelPayment(unittest.TestCase):

    def test_thirty_year_mortgage(self):
        """200,000 at 6% nominal (monthly via rate conversion), 360 payments -> 1199.10."""
        rate = effective_rate_per_period(0.06, "monthly", "monthly").value
        payment = level_payment(200_000, rate, 360).value
        self.assertAlmostEqual(payment, 1199.10, places=2)

    def test_zero_rate_is_straight_line(self):
        for principal in [1.0, 999.99, 25_000.0, 1_234_567.0]:
            for n in [1, 7, 12, 360]:
                with self.subTest(principal=principal, n=n):
                    self.assertAlmostEqual(level_payment(principal, 0.0, n).value, principal / n,
                                           places=10)

    def test_single_period_repays_principal_plus_interest(self):
        self.assertAlmostEqual(level_payment(1_000, 0.01, 1).value, 1_010.0, places=9)

    def test_tiny_rates_stay_finite(self):
        """Rates too small to change 1 + r still give a payment close to P/n."""
        for rate in [1e-17, 1e-13]:
            with self.subTest(rate=rate):
                outcome = level_payment(1_000, rate, 12)
                self.assertTrue(outcome.ok)
                self.assertTrue(math.isfinite(outcome.value))
                self.assertAlmostEqual(outcome.value, 1_000 / 12, places=9)

    def test_tiny_nominal_rate_through_loan_payment(self):
        self.assertAlmostEqual(loan_payment(120_000, 1e-16, 10).value, 1_000.0, places=9)

    def test_payment_increases_with_rate(self):
        previous = 0.0
        for rate in [0.0, 0.001, 0.005, 0.01, 0.02]:
            payment = level_payment(100_000, rate, 120).value
            self.assertGreater(payment, previous)
            previous = payment

    def test_present_value_of_payments_equals_principal(self):
        for loan in TEST_LOANS:
            principal, r, n = loan['principal'], loan['rate'], loan['n']
            if r == 0:
                continue
            with self.subTest(**loan):
                payment = level_payment(principal, r, n).value
                pv = payment * (1 - (1 + r) ** (-n)) / r
                self.assertAlmostEqual(pv / principal, 1.0, places=10)

    def test_invalid_inputs(self):
        cases = [
            (0, 0.005, 360),
            (-100, 0.005, 360),
            (float("nan"), 0.005, 360),
            (100_000, -0.001, 360),
            (100_000, float("nan"), 360),
            (100_000, 0.005, 0),
            (100_000, 0.005, -12),
            (100_000, 0.005, 12.5),
            (100_000, 0.005, True),
        ]
        for args in cases:
            with self.subTest(args=args):
                outcome = level_payment(*args)
                self.assertFalse(outcome.ok)
                self.assertEqual(outcome.reason, FailureReason.INVALID_INPUT)


class TestLoanPayment(unittest.TestCase):

    def test_matches_level_payment_with_monthly_rate(self):
        for principal, rate, years in [(200_000, 0.06, 30), (15_000, 0.089, 4), (40_000, 0.0, 10)]:
            with self.subTest(principal=principal, rate=rate, years=years):
                expected = level_payment(principal, rate / 12, years * 12).value
                self.assertAlmostEqual(loan_payment(principal, rate, years).value, expected, places=6)

    def test_payment_frequency(self):
        quarterly = loan_payment(100_000, 0.08, 10, payment_frequency="quarterly").value
        expected = level_payment(100_000, 0.02, 40).value
        self.assertAlmostEqual(quarterly, expected, places=6)

    def test_less_frequent_compounding_lowers_payment(self):
        monthly = loan_payment(200_000, 0.06, 30).value
        quarterly = loan_payment(200_000, 0.06, 30, compounding_frequency="quarterly").value
        annual = loan_payment(200_000, 0.06, 30, compounding_frequency="annually").value
        self.assertLess(quarterly, monthly)
        self.assertLess(annual, quarterly)

    def test_invalid_inputs(self):
        cases = [
            dict(principal=100_000, nominal_annual_rate=0.05, years=10, payment_frequency="weekly"),
            dict(principal=100_000, nominal_annual_rate=0.05, years=10, compounding_frequency="hourly"),
            dict(principal=100_000, nominal_annual_rate=-0.05, years=10),
            dict(principal=100_000, nominal_annual_rate=0.05, years=0),
            dict(principal=100_000, nominal_annual_rate=0.05, years=2.51),
            dict(principal=0, nominal_annual_rate=0.05, years=10),
        ]
        for kwargs in cases:
            with self.subTest(**kwargs):
                outcome = loan_payment(**kwargs)
                self.assertFalse(outcome.ok)
                self.assertEqual(outcome.reason, FailureReason.INVALID_INPUT)


# =============================================================================
# Amortization schedule
# =============================================================================

class TestAmortizationSchedule(unittest.TestCase):

    def test_schedule_closes_to_zero(self):
        for loan in TEST_LOANS:
            with self.subTest(**loan):
                schedule = amortization_schedule(loan['principal'], loan['rate'], loan['n']).value
                self.assertIsInstance(schedule, AmortizationSchedule)
                self.assertEqual(len(schedule), loan['n'])
                self.assertAlmostEqual(schedule.ending_balance[-1], 0.0, places=6)

    def test_interest_plus_principal_equals_payment(self):
        for loan in TEST_LOANS:
            with self.subTest(**loan):
                schedule = amortization_schedule(loan['principal'], loan['rate'], loan['n']).value
                np.testing.assert_allclose(schedule.interest + schedule.principal, schedule.payment,
                                           rtol=0, atol=1e-9)
                self.assertAlmostEqual(schedule.interest.sum() + schedule.principal.sum(),
                                       schedule.total_paid, places=DECIMAL_PLACES_FOR_ASSERTIONS)
                self.assertAlmostEqual(schedule.principal.sum(), loan['principal'],
                                       places=DECIMAL_PLACES_FOR_ASSERTIONS)

    def test_balance_rollforward(self):
        for loan in TEST_LOANS:
            with self.subTest(**loan):
                schedule = amortization_schedule(loan['principal'], loan['rate'], loan['n']).value
                self.assertEqual(schedule.beginning_balance[0], loan['principal'])
                np.testing.assert_allclose(schedule.beginning_balance[1:], schedule.ending_balance[:-1])
                np.testing.assert_allclose(schedule.interest, schedule.beginning_balance * loan['rate'])

    def test_level_payments_until_final_period(self):
        for loan in TEST_LOANS:
            with self.subTest(**loan):
                schedule = amortization_schedule(loan['principal'], loan['rate'], loan['n']).value
                level = level_payment(loan['principal'], loan['rate'], loan['n']).value
                self.assertEqual(schedule.level_payment, level)
                np.testing.assert_allclose(schedule.payment[:-1], level)
                # Final payment only absorbs rounding drift
                self.assertLess(abs(schedule.payment[-1] - level), 0.01)

    def test_zero_rate_schedule(self):
        schedule = amortization_schedule(1_200, 0.0, 12).value
        np.testing.assert_allclose(schedule.payment, 100.0)
        np.testing.assert_allclose(schedule.interest, 0.0)
        self.assertEqual(schedule.total_interest, 0.0)
        self.assertAlmostEqual(schedule.total_paid, 1_200.0, places=9)

    def test_entries(self):
        schedule = amortization_schedule(10_000, 0.01, 6).value
        entries = schedule.entries()
        self.assertEqual(len(entries), 6)
        self.assertTrue(all(isinstance(e, ScheduleEntry) for e in entries))
        self.assertEqual([e.period for e in entries], [1, 2, 3, 4, 5, 6])
        self.assertAlmostEqual(entries[0].interest, 100.0, places=9)
        self.assertEqual(entries[-1].remaining_balance, 0.0)

    def test_invalid_inputs_propagate(self):
        outcome = amortization_schedule(-1, 0.01, 12)
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.reason, FailureReason.INVALID_INPUT)


# =============================================================================
# Lease
# =============================================================================

class TestLeasePayment(unittest.TestCase):

    def test_payment_components(self):
        lease = lease_payment(vehicle_price=30_000, residual_percent=0.55, term_months=36,
                              money_factor=0.00125, down_payment=2_000, sales_tax_rate=0.07).value
        cap_cost = 28_000.0
        residual = 16_500.0
        self.assertAlmostEqual(lease.depreciation, (cap_cost - residual) / 36, places=9)
        self.assertAlmostEqual(lease.finance_charge, (cap_cost + residual) * 0.00125, places=9)
        self.assertAlmostEqual(lease.monthly_payment, lease.depreciation + lease.finance_charge, places=9)
        self.assertAlmostEqual(lease.monthly_payment_with_tax, lease.monthly_payment * 1.07, places=9)
        self.assertAlmostEqual(lease.total_cost, lease.monthly_payment_with_tax * 36 + 2_000, places=9)
        self.assertAlmostEqual(lease.depreciation, 319.44, places=2)

    def test_trade_in_reduces_payment(self):
        base = lease_payment(35_000, 0.6, 36, 0.0015).value
        traded = lease_payment(35_000, 0.6, 36, 0.0015, trade_in=5_000).value
        self.assertLess(traded.monthly_payment, base.monthly_payment)

    def test_zero_money_factor_is_pure_depreciation(self):
        lease = lease_payment(24_000, 0.5, 24, 0.0).value
        self.assertEqual(lease.finance_charge, 0.0)
        self.assertAlmostEqual(lease.monthly_payment, 500.0, places=9)

    def test_invalid_inputs(self):
        cases = [
            dict(vehicle_price=0, residual_percent=0.5, term_months=36, money_factor=0.001),
            dict(vehicle_price=30_000, residual_percent=-0.1, term_months=36, money_factor=0.001),
            dict(vehicle_price=30_000, residual_percent=0.5, term_months=0, money_factor=0.001),
            dict(vehicle_price=30_000, residual_percent=0.5, term_months=36, money_factor=-0.001),
            dict(vehicle_price=30_000, residual_percent=0.5, term_months=36, money_factor=0.001,
                 down_payment=30_000),
            dict(vehicle_price=30_000, residual_percent=0.5, term_months=36, money_factor=0.001,
                 sales_tax_rate=-0.05),
        ]
        for kwargs in cases:
            with self.subTest(**kwargs):
                outcome = lease_payment(**kwargs)
                self.assertFalse(outcome.ok)
                self.assertEqual(outcome.reason, FailureReason.INVALID_INPUT)


if __name__ == '__main__':
    unittest.main(verbosity=2)
