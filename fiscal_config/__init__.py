"""
fiscal_config -- public entrypoint for rule sets, settings and engine wiring.

Responsibility:
    Loads the YAML rule sets, reads runtime settings, and assembles a
    ready-to-use ``FiscalEngine`` over either an in-memory rule store (the
    YAML rule set) or the database rule store.

Architecture position:
    Configuration -- sits above ``fiscal_kernel`` and ``fiscal_engines`` and
    below ``fiscal_modules``.  The kernel and the engines MUST NEVER import
    from ``fiscal_config``.

Failure modes:
    - ``FileNotFoundError`` -- configured rule set file missing.
    - ``ValueError`` -- malformed or duplicate rules, bad log level.
"""

from __future__ import annotations

from fiscal_config.loader import compute_checksum, load_rule_set, parse_rule_set
from fiscal_config.schema import TaxRuleSet
from fiscal_config.settings import DEFAULT_RULES_PATH, FiscalSettings, get_settings
from fiscal_engines.fiscal_engine import FiscalEngine, build_fiscal_engine
from fiscal_kernel.domain.rule_store import InMemoryTaxRuleStore, TaxRuleStore
from fiscal_kernel.logging_config import configure_logging, get_logger

_logger = get_logger("config")

__all__ = [
    "DEFAULT_RULES_PATH",
    "FiscalSettings",
    "TaxRuleSet",
    "build_default_engine",
    "build_rule_store",
    "compute_checksum",
    "get_default_rule_set",
    "get_settings",
    "load_rule_set",
    "parse_rule_set",
]


def get_default_rule_set() -> TaxRuleSet:
    """The rule set bundled with the package."""
    return load_rule_set(DEFAULT_RULES_PATH)


def build_rule_store(settings: FiscalSettings) -> TaxRuleStore:
    """Database rule store when a URL is configured, else the YAML rule set in memory."""
    if settings.database_url:
        from fiscal_kernel.db.engine import get_session_factory, init_engine_from_url
        from fiscal_kernel.services.tax_rule_service import TaxRuleService

        init_engine_from_url(settings.database_url)
        _logger.info("rule_store_selected", extra={"backend": "database"})
        return TaxRuleService(get_session_factory())

    rule_set = load_rule_set(settings.tax_rules_path)
    _logger.info("rule_store_selected", extra={
        "backend": "memory",
        "rule_set_version": rule_set.version,
        "checksum": rule_set.checksum,
    })
    return InMemoryTaxRuleStore(rule_set.rules)


def build_default_engine(settings: FiscalSettings | None = None) -> FiscalEngine:
    """Configure logging and return a FiscalEngine for the given settings."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level)
    return build_fiscal_engine(build_rule_store(settings))
