"""Student loan plan catalog.

Components are the repayment rules (9% above threshold for undergraduate
plans, 6% for the postgraduate loan). A plan is one or more components:
"Plan 2 + postgraduate loan" repays under both at once.

A rule set may override component thresholds via its ``loan components``
section; otherwise the 2025-26 values below apply.
"""

from typing import Dict, List, Optional

from .schemas import LoanComponent, LoanPlan, RuleSet


DEFAULT_COMPONENTS: Dict[str, LoanComponent] = {
    "plan1": LoanComponent(rate=0.09, threshold=26065),
    "plan2": LoanComponent(rate=0.09, threshold=28470),
    "plan4": LoanComponent(rate=0.09, threshold=32745),
    "plan5": LoanComponent(rate=0.09, threshold=25000),
    "plan3": LoanComponent(rate=0.06, threshold=21000),
}

# (id, label, component keys)
PLAN_DEFINITIONS = [
    ("plan1", "Plan 1 (before Sept 2012)", ["plan1"]),
    ("plan2", "Plan 2 (Sept 2012 to July 2023)", ["plan2"]),
    ("plan4", "Plan 4 (Scotland)", ["plan4"]),
    ("plan5", "Plan 5 (after August 2023)", ["plan5"]),
    ("plan3", "Plan 3 (postgraduate loan only)", ["plan3"]),
    ("plan1_pg", "Plan 1 + postgraduate loan", ["plan1", "plan3"]),
    ("plan2_pg", "Plan 2 + postgraduate loan", ["plan2", "plan3"]),
    ("plan4_pg", "Plan 4 + postgraduate loan", ["plan4", "plan3"]),
    ("plan5_pg", "Plan 5 + postgraduate loan", ["plan5", "plan3"]),
]

DEFAULT_PLAN_ID = "plan2"


def _components_for(ruleset: Optional[RuleSet]) -> Dict[str, LoanComponent]:
    if ruleset is not None and ruleset.loan_components:
        return {**DEFAULT_COMPONENTS, **ruleset.loan_components}
    return DEFAULT_COMPONENTS


def list_loan_plans(ruleset: Optional[RuleSet] = None) -> List[LoanPlan]:
    """All plans, with components resolved against the rule set."""
    components = _components_for(ruleset)
    return [_build_plan(plan_id, label, keys, components) for plan_id, label, keys in PLAN_DEFINITIONS]


def _build_plan(plan_id: str, label: str, keys: List[str], components: Dict[str, LoanComponent]) -> LoanPlan:
    return LoanPlan(id=plan_id, label=label, components=tuple(components[k] for k in keys))


_DEFINITIONS_BY_ID = {plan_id: (label, keys) for plan_id, label, keys in PLAN_DEFINITIONS}

# Plans without rule-set overrides never change, build them once
_DEFAULT_PLANS = {
    plan_id: _build_plan(plan_id, label, keys, DEFAULT_COMPONENTS)
    for plan_id, (label, keys) in _DEFINITIONS_BY_ID.items()
}


def get_loan_plan(plan_id: Optional[str], ruleset: Optional[RuleSet] = None) -> Optional[LoanPlan]:
    """Look up a plan by id; None for no plan or an unknown id."""
    if not plan_id or plan_id not in _DEFINITIONS_BY_ID:
        return None
    if ruleset is None or not ruleset.loan_components:
        return _DEFAULT_PLANS[plan_id]
    label, keys = _DEFINITIONS_BY_ID[plan_id]
    return _build_plan(plan_id, label, keys, _components_for(ruleset))
