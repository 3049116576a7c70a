"""Tests for point evaluation, comparison and display formatting."""

import pytest

from taxcurve.sdk.curve import generate_curve
from taxcurve.sdk.point import (
    compare_point,
    evaluate_point,
    format_currency,
    format_delta_currency,
    format_delta_percent,
    format_percent,
    round_to_pound,
    summary_strings,
)
from taxcurve.sdk.schemas import AdjustmentKind, EmploymentCategory, EvaluationRequest, Issue


def request_for(income, **kwargs):
    kwargs.setdefault("ruleset", "2025-26 UK")
    return EvaluationRequest(gross_income=income, **kwargs)


class TestFormatting:

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (2.49, 2), (-2.5, -3), (0, 0)])
    def test_round_to_pound(self, value, expected):
        assert round_to_pound(value) == expected

    def test_currency(self):
        assert format_currency(12345.4) == "£12,345"
        assert format_currency(0) == "£0"

    def test_percent(self):
        assert format_percent(24.44) == "24.4%"
        assert format_percent(None) == "-"
        assert format_percent(float("nan")) == "-"

    def test_deltas_carry_sign(self):
        assert format_delta_currency(754) == "+£754"
        assert format_delta_currency(-754) == "-£754"
        assert format_delta_currency(0) == "£0"
        assert format_delta_currency(None) == "-"
        assert format_delta_percent(1.26) == "+1.3%"
        assert format_delta_percent(-0.5) == "-0.5%"


class TestEvaluatePoint:

    def test_employed_at_60000(self, catalog):
        summary = evaluate_point(request_for(60000), catalog)

        assert summary.total_tax == pytest.approx(14642.6)
        assert summary.net_income == pytest.approx(45357.4)
        assert summary.marginal_rate == pytest.approx(42)
        assert summary.effective_rate == pytest.approx(14642.6 / 60000 * 100)

        breakdown = summary.breakdown
        assert [(b.label, b.amount) for b in breakdown.income_tax_bands] == [
            ("Basic Rate", "£7,540"),
            ("Higher Rate", "£3,892"),
        ]
        assert breakdown.income_tax_total == "£11,432"
        assert breakdown.contribution_bands[-1].amount == "£195"
        assert breakdown.contribution_total == "£3,211"
        assert breakdown.personal_allowance == 12570
        assert breakdown.adjustments == []
        assert breakdown.adjustments_total == "£0"

    def test_summary_strings(self, catalog):
        strings = summary_strings(evaluate_point(request_for(60000), catalog))
        assert strings == {
            "after_tax_income": "£45,357",
            "total_tax": "£14,643",
            "effective_rate": "24.4%",
            "marginal_rate": "42.0%",
        }

    def test_child_benefit_listed_first(self, catalog):
        summary = evaluate_point(request_for(70000, children=2), catalog)

        labels = [a.label for a in summary.breakdown.adjustments]
        assert labels == ["Child benefit", "Child benefit clawback"]

        benefit, clawback = summary.breakdown.adjustments
        assert benefit.kind == AdjustmentKind.CREDIT
        assert benefit.amount == "+£2,252"
        assert benefit.raw_amount == pytest.approx(2251.6)
        assert clawback.amount == "-£1,148"
        assert clawback.raw_amount < 0
        assert summary.breakdown.adjustments_total == "+£1,103"

    def test_displayed_total_is_offset_by_child_benefit(self, catalog):
        with_children = evaluate_point(request_for(70000, children=2), catalog)
        assert with_children.total_tax == pytest.approx(with_children.adjusted_tax)
        assert with_children.net_income == pytest.approx(70000 - with_children.adjusted_tax)

    def test_negative_total_displays_as_zero(self, catalog):
        summary = evaluate_point(request_for(13000, marriage_credit=True), catalog)
        assert summary.adjusted_tax == pytest.approx(-131)
        assert summary.total_tax == 0
        assert summary.net_income == pytest.approx(13131)

    def test_employer_line_for_ir35(self, catalog):
        summary = evaluate_point(request_for(60000, employment=EmploymentCategory.IR35), catalog)
        assert summary.breakdown.contribution_bands[-1].label == "Employer NI (IR35)"

    def test_point_marginal_matches_curve(self, catalog):
        request = request_for(60000)
        summary = evaluate_point(request, catalog)
        series = generate_curve(request, catalog)
        assert summary.marginal_rate == pytest.approx(series.marginal[series.gross.index(60100)])

    def test_invalid_income_reported(self, catalog):
        summary = evaluate_point(request_for(-10), catalog)
        assert summary.income == 0
        assert summary.effective_rate == 0
        assert Issue.INVALID_INPUT in summary.issues

    @pytest.mark.parametrize("step", [0, -50, float("nan")])
    def test_degenerate_step_uses_default(self, catalog, step):
        summary = evaluate_point(request_for(60000), catalog, step=step)
        assert summary.marginal_rate == pytest.approx(42)
        assert summary.issues == [Issue.DEGENERATE_PARAMETER]

    def test_unknown_rule_set(self, catalog):
        assert evaluate_point(request_for(60000, ruleset="Nowhere"), catalog) is None


class TestComparePoint:

    def test_delta_is_compare_minus_primary(self, catalog):
        delta = compare_point(request_for(60000), "Variant", catalog)

        assert delta.ruleset == "2025-26 UK"
        assert delta.compare_ruleset == "Variant"
        assert delta.delta_net_income == pytest.approx(-754)
        assert delta.delta_total_tax == pytest.approx(754)
        assert delta.display["after_tax"] == "-£754"
        assert delta.display["total_tax_delta"] == "+£754"
        assert delta.display["total_tax"] == "£15,397"

    def test_same_rule_set_has_zero_delta(self, catalog):
        delta = compare_point(request_for(60000), "2025-26 UK", catalog)
        assert delta.delta_net_income == 0
        assert delta.display["after_tax"] == "£0"

    def test_zero_step(self, catalog):
        delta = compare_point(request_for(60000), "Variant", catalog, step=0)
        assert delta.compare_marginal_rate == pytest.approx(42)
        assert delta.delta_total_tax == pytest.approx(754)

    def test_unknown_compare_rule_set(self, catalog):
        assert compare_point(request_for(60000), "Nowhere", catalog) is None
