"""
Unit tests for fixed-payment payoff and multi-debt payoff strategies.

Version: 0.1.0
Last Updated: 2026-10-18
Status: Active

================================================================================
FUNCTIONS UNDER TEST:
================================================================================
- simulate_payoff(balance, annual_rate, fixed_payment, include_schedule, max_months)
- simulate_debt_payoff(debts, additional_payment, strategy, max_months)

Key relationships:
    payment <= balance * r            => NonConverging (checked before simulating)
    total_paid == balance + total_interest
    r == 0                            => months == ceil(balance / payment)
================================================================================
"""

import math
import unittest

from tvm_standard_formulas.outcomes import FailureReason
from tvm_standard_formulas.payoff import (
    PAYOFF_MAX_MONTHS,
    Debt,
    PayoffResult,
    PayoffStrategy,
    simulate_debt_payoff,
    simulate_payoff,
)


# =============================================================================
# Single balance
# =============================================================================

class TestSimulatePayoff(unittest.TestCase):

    def test_credit_card_payoff(self):
        result = simulate_payoff(1_000, 0.20, 100).value
        self.assertIsInstance(result, PayoffResult)
        self.assertEqual(result.months, 12)
        self.assertGreater(result.total_interest, 0)
        self.assertAlmostEqual(result.total_paid, 1_000 + result.total_interest, delta=0.01)
        self.assertIsNone(result.schedule)

    def test_schedule(self):
        result = simulate_payoff(1_000, 0.20, 100, include_schedule=True).value
        schedule = result.schedule
        self.assertEqual(len(schedule), result.months)
        self.assertEqual([e.period for e in schedule], list(range(1, result.months + 1)))
        self.assertAlmostEqual(schedule[0].interest, 1_000 * 0.20 / 12, places=9)
        for entry in schedule[:-1]:
            self.assertEqual(entry.payment, 100)
        self.assertLess(schedule[-1].payment, 100)
        self.assertEqual(schedule[-1].remaining_balance, 0.0)
        self.assertAlmostEqual(sum(e.payment for e in schedule), result.total_paid, places=9)

    def test_closed_form_month_count(self):
        """n = -ln(1 - rB/P) / ln(1 + r), rounded up."""
        for balance, rate, payment in [(5_000, 0.18, 150), (12_000, 0.2499, 400), (800, 0.12, 35)]:
            with self.subTest(balance=balance, rate=rate, payment=payment):
                r = rate / 12
                expected = math.ceil(-math.log(1 - r * balance / payment) / math.log(1 + r))
                self.assertEqual(simulate_payoff(balance, rate, payment).value.months, expected)

    def test_zero_rate(self):
        result = simulate_payoff(1_000, 0.0, 300, include_schedule=True).value
        self.assertEqual(result.months, 4)
        self.assertEqual(result.total_interest, 0.0)
        self.assertEqual(result.total_paid, 1_000)
        self.assertEqual([e.payment for e in result.schedule], [300, 300, 300, 100])
        self.assertEqual(result.schedule[-1].remaining_balance, 0.0)

    def test_payment_not_above_interest(self):
        balance, rate = 1_200, 0.12
        for payment in [balance * (rate / 12), 5.0]:
            with self.subTest(payment=payment):
                outcome = simulate_payoff(balance, rate, payment)
                self.assertFalse(outcome.ok)
                self.assertEqual(outcome.reason, FailureReason.NON_CONVERGING)

    def test_payment_just_below_interest(self):
        """16.66 < 1,000 * 20% / 12 never reduces the balance."""
        self.assertEqual(simulate_payoff(1_000, 0.20, 16.66).reason, FailureReason.NON_CONVERGING)

    def test_payment_just_above_interest_converges_slowly(self):
        result = simulate_payoff(1_000, 0.20, 16.67).value
        self.assertGreaterEqual(result.months, 500)
        self.assertLessEqual(result.months, PAYOFF_MAX_MONTHS)

    def test_cap(self):
        self.assertEqual(PAYOFF_MAX_MONTHS, 1200)
        self.assertEqual(simulate_payoff(1_000, 0.20, 17, max_months=120).reason,
                         FailureReason.NON_CONVERGING)

    def test_zero_rate_ignores_cap(self):
        """The zero-rate closed form has no month limit."""
        result = simulate_payoff(1_000, 0.0, 0.5).value
        self.assertEqual(result.months, 2_000)
        self.assertEqual(result.total_paid, 1_000)
        self.assertEqual(simulate_payoff(1_000, 0.0, 100, max_months=1).value.months, 10)

    def test_invalid_inputs(self):
        for args in [(0, 0.2, 100), (1_000, -0.2, 100), (1_000, 0.2, 0), (float("nan"), 0.2, 100)]:
            with self.subTest(args=args):
                self.assertEqual(simulate_payoff(*args).reason, FailureReason.INVALID_INPUT)


# =============================================================================
# Several debts
# =============================================================================

CARD_A = Debt("A", balance=5_000, annual_rate=0.22, minimum_payment=150)
CARD_B = Debt("B", balance=1_000, annual_rate=0.10, minimum_payment=50)


class TestSimulateDebtPayoff(unittest.TestCase):

    def test_single_debt_matches_simulate_payoff(self):
        debt = Debt("card", balance=1_000, annual_rate=0.20, minimum_payment=100)
        multi = simulate_debt_payoff([debt]).value
        single = simulate_payoff(1_000, 0.20, 100).value
        self.assertEqual(multi.months, single.months)
        self.assertAlmostEqual(multi.total_interest, single.total_interest, places=6)
        self.assertAlmostEqual(multi.total_paid, single.total_paid, places=6)
        self.assertEqual(multi.payoff_order, [("card", single.months)])

    def test_snowball_clears_smallest_balance_first(self):
        result = simulate_debt_payoff([CARD_A, CARD_B], 200, "snowball").value
        self.assertEqual([name for name, _ in result.payoff_order], ["B", "A"])

    def test_avalanche_clears_highest_rate_first(self):
        result = simulate_debt_payoff([CARD_B, CARD_A], 200, PayoffStrategy.AVALANCHE).value
        self.assertEqual([name for name, _ in result.payoff_order], ["A", "B"])

    def test_avalanche_pays_no_more_interest_than_snowball(self):
        avalanche = simulate_debt_payoff([CARD_A, CARD_B], 200, "avalanche").value
        snowball = simulate_debt_payoff([CARD_A, CARD_B], 200, "snowball").value
        self.assertLessEqual(avalanche.total_interest, snowball.total_interest)

    def test_totals(self):
        result = simulate_debt_payoff([CARD_A, CARD_B], 200).value
        self.assertAlmostEqual(result.total_paid, 6_000 + result.total_interest, delta=0.01)
        self.assertEqual(result.months, max(month for _, month in result.payoff_order))

    def test_extra_payment_shortens_payoff(self):
        minimum_only = simulate_debt_payoff([CARD_A, CARD_B]).value
        with_extra = simulate_debt_payoff([CARD_A, CARD_B], 200).value
        self.assertLess(with_extra.months, minimum_only.months)
        self.assertLess(with_extra.total_interest, minimum_only.total_interest)

    def test_minimum_below_interest(self):
        debt = Debt("loan", balance=10_000, annual_rate=0.24, minimum_payment=150)
        outcome = simulate_debt_payoff([CARD_B, debt])
        self.assertEqual(outcome.reason, FailureReason.NON_CONVERGING)
        self.assertIn("loan", outcome.detail)

    def test_invalid_inputs(self):
        cases = [
            dict(debts=[]),
            dict(debts=[CARD_A], additional_payment=-1),
            dict(debts=[CARD_A], strategy="fastest"),
            dict(debts=[Debt("x", 0, 0.1, 10)]),
            dict(debts=[Debt("x", 100, -0.1, 10)]),
            dict(debts=[Debt("x", 100, 0.1, 0)]),
        ]
        for kwargs in cases:
            with self.subTest(**kwargs):
                self.assertEqual(simulate_debt_payoff(**kwargs).reason, FailureReason.INVALID_INPUT)


if __name__ == '__main__':
    unittest.main(verbosity=2)
