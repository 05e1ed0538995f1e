"""
Runtime settings read from the environment.

Environment variables:
    FISCAL_DATABASE_URL     Rule store database (unset = in-memory rules)
    FISCAL_LOG_LEVEL        Level for the fiscal_kernel logger (default INFO)
    FISCAL_TAX_RULES_PATH   YAML rule set (default: bundled sets/tax_rules.yaml)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_RULES_PATH = Path(__file__).parent / "sets" / "tax_rules.yaml"


@dataclass(frozen=True)
class FiscalSettings:
    database_url: str | None = None
    log_level: str = "INFO"
    tax_rules_path: Path = DEFAULT_RULES_PATH

    def __post_init__(self):
        level = self.log_level.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {self.log_level!r}")
        object.__setattr__(self, "log_level", level)


def get_settings(environ: Mapping[str, str] | None = None) -> FiscalSettings:
    """Build settings from ``environ`` (defaults to os.environ)."""
    env = os.environ if environ is None else environ
    return FiscalSettings(
        database_url=env.get("FISCAL_DATABASE_URL") or None,
        log_level=env.get("FISCAL_LOG_LEVEL", "INFO"),
        tax_rules_path=Path(env.get("FISCAL_TAX_RULES_PATH") or DEFAULT_RULES_PATH),
    )
