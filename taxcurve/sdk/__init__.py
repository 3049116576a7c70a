"""Tax Curve SDK - rule sets, evaluation pipeline, curves and point queries."""

from .config import (
    ConfigError,
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    clear_setting,
    get_rules_dir,
    get_default_rules_dir,
    KNOWN_SETTINGS,
)

from .schemas import (
    AdjustmentEntry,
    AdjustmentKind,
    BandAmount,
    ComparisonDelta,
    CurveSeries,
    EmploymentCategory,
    EvaluationMode,
    EvaluationRequest,
    EvaluationResult,
    Issue,
    LoanPlan,
    PointSummary,
    RuleSet,
    Schedule,
    TaxBand,
)

from .rulesets import (
    RuleSetNotFoundError,
    RuleSetParseError,
    RuleSetValidationError,
    get_catalog,
    clear_catalog_cache,
    get_ruleset,
    list_ruleset_names,
    load_rulesets,
    load_rules_dir,
    parse_ruleset,
)

from .loans import get_loan_plan, list_loan_plans, DEFAULT_PLAN_ID

from .engine import evaluate, recompute

from .curve import (
    STEP,
    BASE_MAX_INCOME,
    axis_ceiling,
    generate_curve,
)

from .point import (
    compare_point,
    evaluate_point,
    format_currency,
    format_percent,
    format_delta_currency,
    summary_strings,
)

from .export import write_curve_csv, curve_csv_filename, SERIES_TITLES

__all__ = [
    # Config
    "ConfigError",
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "clear_setting",
    "get_rules_dir",
    "get_default_rules_dir",
    "KNOWN_SETTINGS",
    # Schemas
    "AdjustmentEntry",
    "AdjustmentKind",
    "BandAmount",
    "ComparisonDelta",
    "CurveSeries",
    "EmploymentCategory",
    "EvaluationMode",
    "EvaluationRequest",
    "EvaluationResult",
    "Issue",
    "LoanPlan",
    "PointSummary",
    "RuleSet",
    "Schedule",
    "TaxBand",
    # Rule sets
    "RuleSetNotFoundError",
    "RuleSetParseError",
    "RuleSetValidationError",
    "get_catalog",
    "clear_catalog_cache",
    "get_ruleset",
    "list_ruleset_names",
    "load_rulesets",
    "load_rules_dir",
    "parse_ruleset",
    # Loans
    "get_loan_plan",
    "list_loan_plans",
    "DEFAULT_PLAN_ID",
    # Engine
    "evaluate",
    "recompute",
    # Curves
    "STEP",
    "BASE_MAX_INCOME",
    "axis_ceiling",
    "generate_curve",
    # Points
    "compare_point",
    "evaluate_point",
    "format_currency",
    "format_percent",
    "format_delta_currency",
    "summary_strings",
    # Export
    "write_curve_csv",
    "curve_csv_filename",
    "SERIES_TITLES",
]
