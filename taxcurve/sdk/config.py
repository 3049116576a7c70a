"""Configuration management for Tax Curve.

settings.json holds machine-specific preferences:
   - rules_dir: directory of rule-set files to load instead of the shipped ones
   - default_ruleset: rule set used when a command is given none
   - default_employment: employment category used when a command is given none

Config directory resolution:
1. TAX_CURVE_CONFIG_PATH environment variable (if set)
2. ~/.config/tax-curve/ (XDG_CONFIG_HOME fallback)

Rules directory resolution:
1. TAX_CURVE_RULES_DIR environment variable
2. settings.json "rules_dir"
3. tax-rules/ shipped inside the package
"""

import json
import os
from pathlib import Path
from typing import Any


APP_NAME = "tax-curve"
SETTINGS_FILENAME = "settings.json"

KNOWN_SETTINGS = ("rules_dir", "default_ruleset", "default_employment")


class ConfigError(Exception):
    """Raised when settings.json cannot be read."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to the configuration directory (may not exist yet)
    """
    env_path = os.environ.get("TAX_CURVE_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)

    Raises:
        ConfigError: If the file exists but is not a JSON object
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    try:
        with open(settings_file, "r") as f:
            settings = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid settings file {settings_file}: {e}")

    if not isinstance(settings, dict):
        raise ConfigError(f"Invalid settings file {settings_file}: expected a JSON object")
    return settings


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def clear_setting(key: str) -> bool:
    """Remove a setting. Returns True if it was set."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_default_rules_dir() -> Path:
    """Shipped tax-rules directory."""
    package_root = Path(__file__).parent.parent  # sdk -> taxcurve
    return package_root / "tax-rules"


def get_rules_dir() -> Path:
    """Get the directory rule sets are loaded from."""
    env_path = os.environ.get("TAX_CURVE_RULES_DIR")
    if env_path:
        return Path(env_path).expanduser()

    custom = get_setting("rules_dir")
    if custom:
        return Path(custom).expanduser()

    return get_default_rules_dir()
