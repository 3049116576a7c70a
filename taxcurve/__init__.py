"""Tax Curve - UK marginal and effective tax rate calculator."""

__version__ = "0.4.0"
