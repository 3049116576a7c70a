"""Tax Curve MCP Server - FastMCP tools over the evaluation engine."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from taxcurve.sdk import (
    EmploymentCategory,
    EvaluationRequest,
    compare_point,
    evaluate_point,
    get_catalog,
    list_loan_plans,
    list_ruleset_names,
    summary_strings,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("tax-curve")


def _request(
    income: float,
    ruleset: str,
    employment: str,
    children: int,
    childcare_per_child: float,
    loan_plan: str | None,
    marriage_allowance: bool,
) -> EvaluationRequest:
    return EvaluationRequest(
        gross_income=income,
        ruleset=ruleset,
        employment=EmploymentCategory(employment),
        children=children,
        childcare_subsidy_per_child=childcare_per_child,
        loan_plan=loan_plan,
        marriage_credit=marriage_allowance,
    )


# --- Tools ---

@mcp.tool()
async def list_rulesets() -> dict[str, Any]:
    """List available rule sets (jurisdiction-years), newest first."""
    try:
        return {"rulesets": list_ruleset_names(get_catalog())}
    except Exception as e:
        logger.error(f"Error loading rule sets: {e}")
        return {"error": str(e), "rulesets": []}


@mcp.tool()
async def evaluate_income(
    income: float = Field(..., description="Gross income in pounds"),
    ruleset: str = Field(..., description="Rule set name, e.g. '2025-26 UK'"),
    employment: str = Field(default="Employed", description="Employment category, e.g. 'Self-employed'"),
    children: int = Field(default=0, description="Number of dependent children"),
    childcare_per_child: float = Field(default=0, description="Childcare subsidy per child"),
    loan_plan: str | None = Field(default=None, description="Student loan plan id, e.g. 'plan2'"),
    marriage_allowance: bool = Field(default=False, description="Include marriage allowance credit"),
) -> dict[str, Any]:
    """Exact tax breakdown at one income: net income, total tax, effective and marginal rate, itemised bands and adjustments."""
    try:
        request = _request(income, ruleset, employment, children, childcare_per_child, loan_plan, marriage_allowance)
        summary = evaluate_point(request, get_catalog())
        if summary is None:
            return {"error": f"Unknown rule set: {ruleset}", "summary": None}
        return {
            "summary": summary.model_dump(mode="json"),
            "display": summary_strings(summary),
        }
    except Exception as e:
        logger.error(f"Error evaluating income: {e}")
        return {"error": str(e), "summary": None}


@mcp.tool()
async def compare_rulesets(
    income: float = Field(..., description="Gross income in pounds"),
    ruleset: str = Field(..., description="Primary rule set name"),
    compare_ruleset: str = Field(..., description="Rule set to compare against"),
    employment: str = Field(default="Employed", description="Employment category"),
    children: int = Field(default=0, description="Number of dependent children"),
    childcare_per_child: float = Field(default=0, description="Childcare subsidy per child"),
    loan_plan: str | None = Field(default=None, description="Student loan plan id"),
    marriage_allowance: bool = Field(default=False, description="Include marriage allowance credit"),
) -> dict[str, Any]:
    """Change in net income and total tax moving from one rule set to another at the same income."""
    try:
        request = _request(income, ruleset, employment, children, childcare_per_child, loan_plan, marriage_allowance)
        delta = compare_point(request, compare_ruleset, get_catalog())
        if delta is None:
            return {"error": f"Unknown rule set: {ruleset} or {compare_ruleset}", "comparison": None}
        return {"comparison": delta.model_dump(mode="json")}
    except Exception as e:
        logger.error(f"Error comparing rule sets: {e}")
        return {"error": str(e), "comparison": None}


# --- Resources ---

@mcp.resource("taxcurve://loans/plans")
async def loan_plans_resource() -> str:
    """Student loan plans and their components."""
    plans = [plan.model_dump(mode="json") for plan in list_loan_plans()]
    return json.dumps({"plans": plans}, indent=2)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
