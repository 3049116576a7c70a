"""Rule-set ingestion.

Rule sets are stored as YAML (or JSON) in tax-rules/. A file holds either a
single rule set:

    name: 2025-26 UK
    income tax:
      - {rate: 0.2, threshold: 37700, name: basic rate}
      ...

or a mapping of display name -> rule set, which is the shape of the
published UK_marginal_tax_datasets.json.

Keys are normalised once here ("employer nic rate" and "employer_nic_rate"
both become employer_nic_rate) so nothing downstream does key fallback.
"""

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from .config import get_rules_dir
from .schemas import RuleSet

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

RULE_FILE_SUFFIXES = (".yaml", ".yml", ".json")

Catalog = Dict[str, RuleSet]


class RuleSetNotFoundError(Exception):
    """Raised when a rule-set file or directory does not exist."""
    pass


class RuleSetValidationError(Exception):
    """Raised when a rule-set file does not match the schema."""

    def __init__(self, source: str, name: str, error: ValidationError):
        self.source = source
        self.name = name
        self.error = error
        super().__init__(f"{source}: rule set '{name}' is invalid:\n{error}")


class RuleSetParseError(RuleSetValidationError):
    """Raised when a rule-set file is not valid YAML or JSON."""

    def __init__(self, source: str, error: yaml.YAMLError):
        self.source = source
        self.name = None
        self.error = error
        Exception.__init__(self, f"{source}: could not parse rule-set file:\n{error}")


def canonical_key(key: str) -> str:
    """Lower-case a raw key and collapse punctuation/space runs to '_'.

    >>> canonical_key("NI class 1 (employees)")
    'ni_class_1_employees'
    """
    return re.sub(r"[^a-z0-9]+", "_", str(key).lower()).strip("_")


def normalise_keys(data: Any) -> Any:
    """Recursively canonicalise dict keys; values are left untouched."""
    if isinstance(data, dict):
        return {canonical_key(k): normalise_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [normalise_keys(v) for v in data]
    return data


def parse_ruleset(name: str, raw: dict, source: str = "<memory>") -> RuleSet:
    """Validate one raw rule-set mapping into a RuleSet."""
    data = normalise_keys(raw)
    data["name"] = data.get("name") or name
    try:
        return RuleSet.model_validate(data)
    except ValidationError as e:
        raise RuleSetValidationError(source, name, e)


def _is_single_ruleset(raw: dict) -> bool:
    return any(canonical_key(k) == "income_tax" for k in raw)


def load_rulesets(path: Union[str, Path]) -> Catalog:
    """Load every rule set defined in one YAML or JSON file.

    Returns:
        Mapping of display name -> RuleSet

    Raises:
        RuleSetNotFoundError: If the file doesn't exist
        RuleSetParseError: If the file is not valid YAML or JSON
        RuleSetValidationError: If a rule set fails validation
    """
    path = Path(path)
    if not path.exists():
        raise RuleSetNotFoundError(f"Rule-set file not found: {path}")

    # YAML is a superset of JSON, one parser covers both
    with open(path, "r") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise RuleSetParseError(path.name, e)

    if not isinstance(raw, dict):
        logger.warning(f"{path.name}: expected a mapping at top level, skipping")
        return {}

    if _is_single_ruleset(raw):
        ruleset = parse_ruleset(str(raw.get("name") or path.stem), raw, source=path.name)
        return {ruleset.name: ruleset}

    catalog = {}
    for name, entry in raw.items():
        if not isinstance(entry, dict):
            logger.warning(f"{path.name}: entry '{name}' is not a mapping, skipping")
            continue
        ruleset = parse_ruleset(str(name), entry, source=path.name)
        catalog[ruleset.name] = ruleset
    return catalog


def load_rules_dir(rules_dir: Union[str, Path]) -> Catalog:
    """Load all rule-set files in a directory (sorted by filename)."""
    rules_dir = Path(rules_dir)
    if not rules_dir.is_dir():
        raise RuleSetNotFoundError(f"Rules directory not found: {rules_dir}")

    catalog = {}
    for path in sorted(rules_dir.iterdir()):
        if path.suffix.lower() not in RULE_FILE_SUFFIXES:
            continue
        loaded = load_rulesets(path)
        for name in loaded:
            if name in catalog:
                logger.warning(f"{path.name}: rule set '{name}' overrides an earlier definition")
        catalog.update(loaded)
        logger.debug(f"loaded {len(loaded)} rule set(s) from {path.name}")
    return catalog


@lru_cache(maxsize=8)
def _cached_catalog(rules_dir: str) -> Catalog:
    return load_rules_dir(rules_dir)


def get_catalog(rules_dir: Optional[Union[str, Path]] = None) -> Catalog:
    """Rule sets from the configured rules directory, loaded once per directory."""
    if rules_dir is None:
        rules_dir = get_rules_dir()
    return _cached_catalog(str(Path(rules_dir).resolve()))


def clear_catalog_cache() -> None:
    _cached_catalog.cache_clear()


def list_ruleset_names(catalog: Catalog) -> List[str]:
    """Rule-set names, newest first."""
    return sorted(catalog, reverse=True)


def get_ruleset(name: Optional[str], catalog: Catalog) -> Optional[RuleSet]:
    """Soft lookup: unknown or empty names give None."""
    if not name:
        return None
    return catalog.get(name)
