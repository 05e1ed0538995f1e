"""
Configuration Loader (``fiscal_config.loader``).

Responsibility
--------------
Loads YAML rule-set files and parses them into typed ``TaxRuleSet`` /
``TaxRule`` instances.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass.
* Rates are read through ``str`` into ``Decimal``; floats never reach a rule.
* A (country, category, effective_from) triple appears at most once.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the rules,
  independent of their order in the file.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Invalid date, rate or country  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from fiscal_config.schema import TaxRuleSet
from fiscal_kernel.domain.values import TaxRule
from fiscal_kernel.logging_config import get_logger

logger = get_logger("config.loader")


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def parse_rule(data: dict[str, Any]) -> TaxRule:
    """Parse one rule mapping."""
    return TaxRule(
        country=data["country"],
        tax_category=data["category"],
        tax_rate=str(data["rate"]),
        tax_name=data["name"],
        effective_from=_parse_date(data["effective_from"]),
    )


def compute_checksum(rules: tuple[TaxRule, ...] | list[TaxRule]) -> str:
    """Deterministic SHA-256 over the canonical form of the rules."""
    canonical = sorted(
        (
            {
                "country": r.country,
                "category": r.tax_category,
                "rate": str(r.tax_rate),
                "name": r.tax_name,
                "effective_from": r.effective_from.isoformat(),
            }
            for r in rules
        ),
        key=lambda d: (d["country"], d["category"], d["effective_from"]),
    )
    payload = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def parse_rule_set(data: dict[str, Any], source_path: str | None = None) -> TaxRuleSet:
    """Parse a rule-set mapping (the YAML document root)."""
    rules = tuple(parse_rule(item) for item in data.get("rules") or ())

    seen: set[tuple[str, str, date]] = set()
    for rule in rules:
        key = (rule.country, rule.tax_category, rule.effective_from)
        if key in seen:
            raise ValueError(
                f"Duplicate tax rule version {rule.country}/{rule.tax_category} "
                f"effective {rule.effective_from}"
            )
        seen.add(key)

    return TaxRuleSet(
        version=str(data["version"]),
        rules=rules,
        description=data.get("description", ""),
        checksum=compute_checksum(rules),
        source_path=source_path,
    )


def load_rule_set(path: Path | str) -> TaxRuleSet:
    """Load a rule set from a YAML file."""
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    rule_set = parse_rule_set(data, source_path=str(path))
    logger.info("tax_rule_set_loaded", extra={
        "path": str(path),
        "version": rule_set.version,
        "rule_count": len(rule_set.rules),
        "checksum": rule_set.checksum,
    })
    return rule_set
