"""Settings CLI commands for Tax Curve.

Manages settings.json - rules directory and defaults.
"""

from pathlib import Path

import click

from taxcurve.sdk import (
    KNOWN_SETTINGS,
    EmploymentCategory,
    clear_catalog_cache,
    clear_setting,
    get_default_rules_dir,
    get_rules_dir,
    get_settings_path,
    load_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - rules_dir: directory of rule-set YAML/JSON files
    - default_ruleset: rule set used when --ruleset is not given
    - default_employment: employment category used when --employment is not given
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    rules_dir = get_rules_dir()
    suffix = " (default)" if rules_dir == get_default_rules_dir() else ""
    click.echo(f"  rules_dir: {rules_dir}{suffix}")


@settings.command("set")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE.

    Examples:
        tax-curve settings set default_ruleset "2024-25 UK"
        tax-curve settings set rules_dir ~/tax-rules
    """
    if key == "rules_dir":
        rules_path = Path(value).expanduser().resolve()
        if not rules_path.is_dir():
            raise click.ClickException(f"Not a directory: {rules_path}")
        value = str(rules_path)
        clear_catalog_cache()
    elif key == "default_employment":
        choices = [c.value for c in EmploymentCategory]
        if value not in choices:
            raise click.BadParameter(f"Must be one of: {', '.join(choices)}", param_hint="VALUE")

    path = set_setting(key, value)
    click.echo(f"Set {key}: {value}")
    click.echo(f"Saved to: {path}")


@settings.command("clear")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
def settings_clear(key):
    """Remove KEY, reverting to the default."""
    if clear_setting(key):
        if key == "rules_dir":
            clear_catalog_cache()
        click.echo(f"Cleared {key}.")
    else:
        click.echo(f"{key} was not set.")
