"""Tests for the adjustment calculators."""

import pytest

from taxcurve.sdk.schemas import EvaluationMode, FlatRateContribution, LoanComponent
from taxcurve.sdk.taxes import (
    benefit_clawback,
    child_benefit_amount,
    childcare_options,
    childcare_subsidy,
    flat_contribution,
    loan_repayment,
    marriage_credit,
)
from taxcurve.sdk.taxes.adjustments import clawback_increment

STEPPED = EvaluationMode.STEPPED
CONTINUOUS = EvaluationMode.CONTINUOUS

# 52 x (26.05 + 17.25)
TWO_CHILD_BENEFIT = 2251.6


class TestChildBenefit:

    def test_annual_amount(self, ruleset):
        assert child_benefit_amount(ruleset, 1) == pytest.approx(52 * 26.05)
        assert child_benefit_amount(ruleset, 2) == pytest.approx(TWO_CHILD_BENEFIT)

    def test_no_children_or_no_data(self, ruleset, make_ruleset):
        assert child_benefit_amount(ruleset, 0) == 0
        assert child_benefit_amount(None, 2) == 0
        assert child_benefit_amount(make_ruleset(child_benefit=None), 2) == 0


class TestBenefitClawback:

    def test_zero_at_and_below_start(self, ruleset):
        for mode in (STEPPED, CONTINUOUS):
            assert benefit_clawback(50000, ruleset, 2, mode) == 0
            assert benefit_clawback(60000, ruleset, 2, mode) == 0

    def test_first_pound_over_start_costs_one_percent_when_stepped(self, ruleset):
        assert benefit_clawback(60001, ruleset, 2, STEPPED) == pytest.approx(TWO_CHILD_BENEFIT / 100)

    def test_continuous_is_linear(self, ruleset):
        assert benefit_clawback(70000, ruleset, 2, CONTINUOUS) == pytest.approx(TWO_CHILD_BENEFIT / 2)

    @pytest.mark.parametrize("income", [79999, 80000, 95000, 250000])
    def test_never_exceeds_benefit(self, ruleset, income):
        for mode in (STEPPED, CONTINUOUS):
            charge = benefit_clawback(income, ruleset, 2, mode)
            assert 0 <= charge <= TWO_CHILD_BENEFIT + 1e-9

    def test_full_clawback_at_end(self, ruleset):
        assert benefit_clawback(80000, ruleset, 2, CONTINUOUS) == pytest.approx(TWO_CHILD_BENEFIT)

    def test_no_children(self, ruleset):
        assert benefit_clawback(70000, ruleset, 0) == 0

    def test_increment_from_end_threshold(self, ruleset):
        assert clawback_increment(ruleset) == pytest.approx(200)

    def test_explicit_increment_without_end(self, make_ruleset):
        """Older rules: start 50,000 and £100 per percent, no end threshold."""
        rules = make_ruleset(hicbc_start=50000, hicbc_end=None, hicbc_income_per_percent_reduction=100)
        assert clawback_increment(rules) == 100
        assert benefit_clawback(55000, rules, 2, CONTINUOUS) == pytest.approx(TWO_CHILD_BENEFIT / 2)
        assert benefit_clawback(60000, rules, 2, STEPPED) == pytest.approx(TWO_CHILD_BENEFIT)

    def test_fallback_increment(self, make_ruleset):
        rules = make_ruleset(hicbc_end=None)
        assert clawback_increment(rules) == 100

    @pytest.mark.parametrize("start,end", [
        (60000, 50000),
        (60000, 60000),
        (None, 80000),
        (None, None),
    ])
    @pytest.mark.parametrize("income", [0, 30000, 60000, 60001, 70000, 250000])
    def test_inverted_or_missing_thresholds_stay_bounded(self, make_ruleset, start, end, income):
        rules = make_ruleset(hicbc_start=start, hicbc_end=end)
        assert clawback_increment(rules) > 0
        for mode in (STEPPED, CONTINUOUS):
            charge = benefit_clawback(income, rules, 2, mode)
            assert 0 <= charge <= TWO_CHILD_BENEFIT + 1e-9


class TestLoanRepayment:

    def test_below_threshold(self):
        assert loan_repayment(28000, [LoanComponent(rate=0.09, threshold=28470)]) == 0

    def test_single_component(self):
        assert loan_repayment(38470, [LoanComponent(rate=0.09, threshold=28470)]) == pytest.approx(900)

    def test_components_are_summed(self):
        components = [
            LoanComponent(rate=0.09, threshold=28470),
            LoanComponent(rate=0.06, threshold=21000),
        ]
        assert loan_repayment(31000, components) == pytest.approx(2530 * 0.09 + 10000 * 0.06)

    def test_no_components(self):
        assert loan_repayment(100000, []) == 0


class TestMarriageCredit:

    def test_credit_inside_window(self, ruleset):
        """10% of 12,570 relieved at 20%."""
        assert marriage_credit(30000, ruleset) == pytest.approx(251.4)

    @pytest.mark.parametrize("income", [5000, 12570, 50270, 80000])
    def test_outside_window(self, ruleset, income):
        assert marriage_credit(income, ruleset) == 0

    def test_zero_fraction(self, make_ruleset):
        assert marriage_credit(30000, make_ruleset(marriage_allowance=0)) == 0

    def test_missing_max_earnings(self, make_ruleset):
        assert marriage_credit(30000, make_ruleset(marriage_allowance_max_earnings=None)) == 0


class TestChildcareSubsidy:

    def test_bounds_are_exclusive(self, ruleset):
        assert childcare_subsidy(10000, ruleset, 1, 2000) == 0
        assert childcare_subsidy(10001, ruleset, 1, 2000) == 2000
        assert childcare_subsidy(99999, ruleset, 1, 2000) == 2000
        assert childcare_subsidy(100000, ruleset, 1, 2000) == 0

    def test_scales_with_children(self, ruleset):
        assert childcare_subsidy(50000, ruleset, 3, 2000) == 6000

    def test_max_children_caps_subsidy(self, make_ruleset):
        rules = make_ruleset(childcare_max_children=2)
        assert childcare_subsidy(50000, rules, 3, 2000) == 4000

    def test_missing_bounds_are_unbounded(self, make_ruleset):
        rules = make_ruleset(childcare_min_earnings=None, childcare_max_earnings=None)
        assert childcare_subsidy(0, rules, 1, 2000) == 2000
        assert childcare_subsidy(10_000_000, rules, 1, 2000) == 2000

    def test_nothing_without_children_or_subsidy(self, ruleset):
        assert childcare_subsidy(50000, ruleset, 0, 2000) == 0
        assert childcare_subsidy(50000, ruleset, 2, 0) == 0

    def test_options_limited_by_rule_set(self, ruleset, make_ruleset):
        assert childcare_options(ruleset) == [0, 1000, 2000, 3000, 5000, 7500, 10000]
        assert childcare_options(make_ruleset(childcare_subsidy_per_child=2000)) == [0, 1000, 2000]
        assert childcare_options(make_ruleset(childcare_subsidy_per_child=None)) == [0]
        assert childcare_options(None) == [0]


class TestFlatContribution:

    def test_payable_above_lower_profits_limit(self):
        record = FlatRateContribution(weekly_amount=3.45, lower_profits_limit=12570)
        assert flat_contribution(12570, record) == 0
        assert flat_contribution(12571, record) == pytest.approx(52 * 3.45)

    def test_absent_or_zero(self):
        assert flat_contribution(50000, None) == 0
        assert flat_contribution(50000, FlatRateContribution(weekly_amount=0)) == 0
