"""Pydantic schemas for rule sets, evaluation requests and results.

Rule-set models validate the tax-rules/*.yaml files after their keys have
been normalised by ``rulesets.normalise_keys``. Every model is frozen: a
RuleSet is loaded once and shared read-only by all evaluations, and
requests/results are plain values.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# Enumerations
# =============================================================================


class EvaluationMode(str, Enum):
    """How staircase rules are evaluated.

    STEPPED reproduces the statutory integer staircase (point queries).
    CONTINUOUS replaces each staircase with a linear ramp (curve sweeps).
    """

    STEPPED = "stepped"
    CONTINUOUS = "continuous"


class EmploymentCategory(str, Enum):
    """Employment category selecting the contribution class and gross-down."""

    EMPLOYED = "Employed"
    SELF_EMPLOYED = "Self-employed"
    PARTNERSHIP = "Partnership/LLP"
    RETIRED = "Retired/State pension age"
    IR35 = "Within IR35"

    @property
    def is_self_employed(self) -> bool:
        return self in (EmploymentCategory.SELF_EMPLOYED, EmploymentCategory.PARTNERSHIP)

    @property
    def requires_gross_down(self) -> bool:
        """Stated income includes an employer-side charge."""
        return self in (EmploymentCategory.PARTNERSHIP, EmploymentCategory.IR35)

    @property
    def term(self) -> str:
        """Noun used in axis titles ("Gross <term> income")."""
        return {
            EmploymentCategory.EMPLOYED: "employment",
            EmploymentCategory.SELF_EMPLOYED: "self-employment",
            EmploymentCategory.PARTNERSHIP: "partnership/LLP",
            EmploymentCategory.RETIRED: "retirement",
            EmploymentCategory.IR35: "IR35 contract",
        }[self]


class AdjustmentKind(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class Schedule(str, Enum):
    """Which schedule a band breakdown entry belongs to."""

    INCOME_TAX = "income_tax"
    CONTRIBUTIONS = "contributions"


class Issue(str, Enum):
    """Soft error conditions recorded on a result instead of raising."""

    MISSING_REFERENCE_DATA = "missing_reference_data"
    INVALID_INPUT = "invalid_input"
    DEGENERATE_PARAMETER = "degenerate_parameter"


# =============================================================================
# Rule Set Model
# =============================================================================


class TaxBand(BaseModel):
    """Single band of a progressive schedule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rate: float = Field(..., ge=0, le=1, description="Rate as decimal")
    threshold: Optional[float] = Field(
        default=None, description="Upper bound of the band (None for the open top band)"
    )
    name: Optional[str] = Field(default=None, description="Display name, e.g. 'basic rate'")

    @field_validator("threshold")
    @classmethod
    def zero_threshold_is_open(cls, v: Optional[float]) -> Optional[float]:
        """Source data marks the top band with a zero/empty threshold."""
        return v or None


class FlatRateContribution(BaseModel):
    """Flat weekly contribution (NI class 2)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    weekly_amount: float = Field(default=0, ge=0)
    lower_profits_limit: float = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("lower_profits_limit", "small_profits_threshold"),
    )


class ChildBenefit(BaseModel):
    """Weekly child benefit amounts."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    first: float = Field(..., ge=0, alias="1st")
    subsequent: float = Field(..., ge=0)


class EmployerContributions(BaseModel):
    """Employer-side contribution used to gross down cost-inclusive income."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    employer_rate: Optional[float] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("employer_rate", "employer_nic_rate"),
    )
    partnership_rate: Optional[float] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("partnership_rate", "partnership_employer_nic_rate"),
    )
    secondary_threshold_weekly: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "secondary_threshold_weekly", "employer_nic_secondary_threshold"
        ),
    )

    @property
    def annual_secondary_threshold(self) -> float:
        if not self.secondary_threshold_weekly or self.secondary_threshold_weekly <= 0:
            return 0.0
        return self.secondary_threshold_weekly * 52


class LoanComponent(BaseModel):
    """One repayment component: rate on income above threshold."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rate: float = Field(..., ge=0, le=1)
    threshold: float = Field(..., ge=0)


class LoanPlan(BaseModel):
    """Named loan plan; composite plans carry more than one component."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    label: str
    components: Tuple[LoanComponent, ...]


_EMPLOYER_KEYS = (
    "employer_nic_rate",
    "partnership_employer_nic_rate",
    "employer_nic_secondary_threshold",
)


def _check_schedule(bands: Tuple[TaxBand, ...], schedule: str) -> None:
    previous = 0.0
    for i, band in enumerate(bands):
        if band.threshold is None:
            if i != len(bands) - 1:
                raise ValueError(f"{schedule}: only the last band may be open-ended")
            continue
        if band.threshold <= previous and i > 0:
            raise ValueError(
                f"{schedule}: band thresholds must be strictly increasing "
                f"({band.threshold} after {previous})"
            )
        previous = band.threshold


class RuleSet(BaseModel):
    """One jurisdiction-year's tax law, normalised and read-only."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str
    income_tax: Tuple[TaxBand, ...] = ()
    employee_contributions: Tuple[TaxBand, ...] = Field(
        default=(),
        validation_alias=AliasChoices("employee_contributions", "ni_class_1_employees"),
    )
    self_employed_contributions: Tuple[TaxBand, ...] = Field(
        default=(),
        validation_alias=AliasChoices(
            "self_employed_contributions", "ni_class_4_self_employed"
        ),
    )
    self_employed_flat: Optional[FlatRateContribution] = Field(
        default=None,
        validation_alias=AliasChoices("self_employed_flat", "ni_class_2_self_employed"),
    )

    statutory_personal_allowance: float = Field(default=0, ge=0)
    allowance_withdrawal_threshold: Optional[float] = None
    allowance_withdrawal_rate: Optional[float] = None

    hicbc_start: Optional[float] = None
    hicbc_end: Optional[float] = None
    hicbc_income_per_percent: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "hicbc_income_per_percent", "hicbc_income_per_percent_reduction"
        ),
    )
    child_benefit: Optional[ChildBenefit] = None

    marriage_allowance: float = Field(default=0, ge=0, le=1)
    marriage_allowance_max_earnings: Optional[float] = None

    childcare_subsidy_per_child: float = Field(default=0, ge=0)
    childcare_max_children: Optional[int] = None
    childcare_min_earnings: Optional[float] = None
    childcare_max_earnings: Optional[float] = None

    employer_contributions: Optional[EmployerContributions] = Field(
        default=None,
        validation_alias=AliasChoices("employer_contributions", "employer_ni"),
    )
    loan_components: Optional[Dict[str, LoanComponent]] = Field(
        default=None,
        validation_alias=AliasChoices("loan_components", "student_loan_components"),
    )

    @model_validator(mode="before")
    @classmethod
    def fold_employer_keys(cls, data):
        """Collect flat top-level employer keys into one record."""
        if not isinstance(data, dict):
            return data
        if data.get("employer_ni") or data.get("employer_contributions"):
            return data
        flat = {k: data[k] for k in _EMPLOYER_KEYS if data.get(k) is not None}
        if flat:
            data = {k: v for k, v in data.items() if k not in _EMPLOYER_KEYS}
            data["employer_ni"] = flat
        return data

    @model_validator(mode="after")
    def check_schedules(self) -> "RuleSet":
        _check_schedule(self.income_tax, "income tax")
        _check_schedule(self.employee_contributions, "employee contributions")
        _check_schedule(self.self_employed_contributions, "self-employed contributions")
        return self


# =============================================================================
# Requests and results
# =============================================================================


class EvaluationRequest(BaseModel):
    """Everything one evaluation depends on besides the rule set itself.

    Income is validated as a float only; non-finite and negative values are
    sanitised by the engine so the substitution can be reported.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_income: float = Field(default=0, description="Gross (stated) income")
    ruleset: str = Field(..., description="Rule-set display name, e.g. '2025-26 UK'")
    employment: EmploymentCategory = EmploymentCategory.EMPLOYED
    children: int = Field(default=0, ge=0)
    childcare_subsidy_per_child: float = Field(default=0, ge=0)
    loan_plan: Optional[str] = Field(default=None, description="Loan plan id, e.g. 'plan2_pg'")
    marriage_credit: bool = False
    mode: EvaluationMode = EvaluationMode.STEPPED

    def at(self, income: float, mode: Optional[EvaluationMode] = None) -> "EvaluationRequest":
        """Same request at another income (and optionally another mode)."""
        update = {"gross_income": income}
        if mode is not None:
            update["mode"] = mode
        return self.model_copy(update=update)


class BandAmount(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schedule: Schedule
    label: str
    amount: float


class AdjustmentEntry(BaseModel):
    """Signed adjustment. ``amount`` is the contribution to total tax:
    negative for a credit, positive for a debit."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str
    amount: float
    kind: AdjustmentKind

    @property
    def net_effect(self) -> float:
        """Effect on net income (positive for credits)."""
        return -self.amount


class EvaluationResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_income: float = 0
    taxable_income: float = 0
    employer_contribution: float = 0
    personal_allowance: Optional[float] = None
    income_tax_total: float = 0
    contribution_total: float = 0
    band_breakdown: List[BandAmount] = Field(default_factory=list)
    adjustments: List[AdjustmentEntry] = Field(default_factory=list)
    total_tax: float = 0
    issues: List[Issue] = Field(default_factory=list)

    def bands_for(self, schedule: Schedule) -> List[BandAmount]:
        return [b for b in self.band_breakdown if b.schedule == schedule]


class CurveSeries(BaseModel):
    """Equal-length series over the income grid."""

    model_config = ConfigDict(extra="forbid")

    ruleset: str
    gross: List[float] = Field(default_factory=list)
    net: List[float] = Field(default_factory=list)
    marginal: List[float] = Field(default_factory=list)
    effective: List[float] = Field(default_factory=list)

    def series(self, key: str) -> List[float]:
        if key not in ("gross", "net", "marginal", "effective"):
            raise KeyError(f"Unknown series: {key}")
        return getattr(self, key)


class LineItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    amount: str


class FormattedAdjustment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    amount: str = Field(..., description="Signed net effect, e.g. '+£2,251'")
    kind: AdjustmentKind
    raw_amount: float = Field(..., description="Net effect (positive for credits)")


class PointBreakdown(BaseModel):
    model_config = ConfigDict(extra="forbid")

    income_tax_bands: List[LineItem] = Field(default_factory=list)
    income_tax_total: str = "-"
    contribution_bands: List[LineItem] = Field(default_factory=list)
    contribution_total: str = "-"
    personal_allowance: int = 0
    adjustments: List[FormattedAdjustment] = Field(default_factory=list)
    adjustments_total: str = "-"


class PointSummary(BaseModel):
    """Exact single-income evaluation."""

    model_config = ConfigDict(extra="forbid")

    ruleset: str
    income: float
    net_income: float
    total_tax: float = Field(..., description="Displayed total tax (child benefit offset)")
    adjusted_tax: float = Field(..., description="Total tax less all credits")
    effective_rate: float
    marginal_rate: float
    breakdown: PointBreakdown
    issues: List[Issue] = Field(default_factory=list)


class ComparisonDelta(BaseModel):
    """Second rule set evaluated at the same income, relative to the first."""

    model_config = ConfigDict(extra="forbid")

    ruleset: str
    compare_ruleset: str
    income: float
    delta_net_income: float
    delta_total_tax: float
    compare_total_tax: float
    compare_effective_rate: float
    compare_marginal_rate: float
    display: Dict[str, str] = Field(default_factory=dict)
