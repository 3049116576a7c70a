"""Shared fixtures: in-memory UK rule sets built from raw (unnormalised) data."""

import copy

import pytest

from taxcurve.sdk.rulesets import canonical_key, parse_ruleset


UK_2025_RAW = {
    "income tax": [
        {"rate": 0.20, "threshold": 37700, "name": "basic rate"},
        {"rate": 0.40, "threshold": 125140, "name": "higher rate"},
        {"rate": 0.45, "name": "additional rate"},
    ],
    "NI class 1 (employees)": [
        {"rate": 0.0, "threshold": 12570},
        {"rate": 0.08, "threshold": 50270, "name": "main rate"},
        {"rate": 0.02, "name": "upper rate"},
    ],
    "NI class 4 (self-employed)": [
        {"rate": 0.0, "threshold": 12570},
        {"rate": 0.06, "threshold": 50270},
        {"rate": 0.02},
    ],
    "statutory personal allowance": 12570,
    "allowance withdrawal threshold": 100000,
    "allowance withdrawal rate": 0.5,
    "HICBC start": 60000,
    "HICBC end": 80000,
    "child benefit": {"1st": 26.05, "subsequent": 17.25},
    "marriage allowance": 0.1,
    "marriage allowance max earnings": 50270,
    "childcare subsidy per child": 10000,
    "childcare min earnings": 10000,
    "childcare max earnings": 100000,
    "employer NI": {
        "employer nic rate": 0.15,
        "partnership employer nic rate": 0.15,
        "employer nic secondary threshold": 96,
    },
}

UK_2025_NAME = "2025-26 UK"


@pytest.fixture
def raw_rules():
    """Deep copy of the raw 2025-26 data, safe to mutate per test."""
    return copy.deepcopy(UK_2025_RAW)


@pytest.fixture
def make_ruleset(raw_rules):
    """Factory: rule set from the raw data with top-level overrides.

    An override value of None removes the key.
    """
    def _make(name=UK_2025_NAME, **overrides):
        raw = copy.deepcopy(raw_rules)
        for key, value in overrides.items():
            for existing in [k for k in raw if canonical_key(k) == canonical_key(key)]:
                del raw[existing]
            if value is not None:
                raw[key] = value
        return parse_ruleset(name, raw)
    return _make


@pytest.fixture
def ruleset(make_ruleset):
    return make_ruleset()


@pytest.fixture
def catalog(ruleset, make_ruleset):
    """Two rule sets: 2025-26 and a variant with a 10% main NI rate."""
    variant = make_ruleset(
        name="Variant",
        **{
            "NI class 1 (employees)": [
                {"rate": 0.0, "threshold": 12570},
                {"rate": 0.10, "threshold": 50270},
                {"rate": 0.02},
            ]
        },
    )
    return {ruleset.name: ruleset, variant.name: variant}
