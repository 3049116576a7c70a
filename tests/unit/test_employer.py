"""Tests for employer cost gross-down."""

import pytest

from taxcurve.sdk.schemas import EmployerContributions, EmploymentCategory
from taxcurve.sdk.taxes import employer_line_label, employer_rate_for, gross_down


class TestGrossDown:

    def test_round_trip_without_threshold(self):
        """£50,000 at 13.8%: taxable + 13.8% of taxable is the stated figure."""
        taxable, employer = gross_down(50000, 0.138)
        assert taxable == pytest.approx(50000 / 1.138)
        assert taxable + employer == pytest.approx(50000)
        assert employer == pytest.approx(0.138 * taxable)

    def test_round_trip_with_threshold(self):
        threshold = 96 * 52
        taxable, employer = gross_down(60000, 0.15, threshold)
        assert taxable + 0.15 * (taxable - threshold) == pytest.approx(60000)
        assert taxable + employer == pytest.approx(60000)

    def test_below_threshold_is_unchanged(self):
        assert gross_down(4000, 0.15, 4992) == (4000, 0.0)

    def test_zero_rate_is_identity(self):
        assert gross_down(50000, 0) == (50000, 0.0)


class TestEmployerRate:

    def setup_method(self):
        self.config = EmployerContributions(employer_nic_rate=0.138, partnership_employer_nic_rate=0.15)

    def test_rate_by_category(self):
        assert employer_rate_for(EmploymentCategory.IR35, self.config) == 0.138
        assert employer_rate_for(EmploymentCategory.PARTNERSHIP, self.config) == 0.15
        assert employer_rate_for(EmploymentCategory.EMPLOYED, self.config) == 0
        assert employer_rate_for(EmploymentCategory.SELF_EMPLOYED, self.config) == 0

    def test_missing_partnership_rate(self):
        config = EmployerContributions(employer_nic_rate=0.138)
        assert employer_rate_for(EmploymentCategory.PARTNERSHIP, config) == 0

    def test_weekly_threshold_is_annualised(self):
        config = EmployerContributions(employer_nic_secondary_threshold=96)
        assert config.annual_secondary_threshold == 96 * 52
        assert EmployerContributions().annual_secondary_threshold == 0

    def test_line_labels(self):
        assert employer_line_label(EmploymentCategory.IR35) == "Employer NI (IR35)"
        assert employer_line_label(EmploymentCategory.PARTNERSHIP) == "Employer NI (Partnership)"
