"""Tax Curve command-line interface."""
