"""
Module: fiscal_engines
Responsibility:
    Package entrypoint that re-exports the tax calculation engine: the
    FiscalEngine facade, the registry, the strategy families and the
    supported countries.

Architecture position:
    Engines -- calculation layer.  May import fiscal_kernel only.
    MUST NOT import fiscal_modules or fiscal_config.

Invariants enforced:
    - Purity: engines NEVER call ``date.today()``; the as-of date is always
      passed in by the caller.
    - Decimal-only arithmetic through fiscal_kernel.domain.money.
    - Determinism: identical inputs and rules always produce identical
      outputs.

Usage:
    from fiscal_engines import FiscalEngine, build_fiscal_engine
    from fiscal_engines import TaxCalculatorRegistry
"""

from fiscal_kernel.logging_config import get_logger

logger = get_logger("engines")

from fiscal_engines.countries import (
    COUNTRY_STRATEGIES,
    FranceTaxStrategy,
    MoroccoTaxStrategy,
    SaudiArabiaTaxStrategy,
)
from fiscal_engines.fiscal_engine import FiscalEngine, build_fiscal_engine
from fiscal_engines.registry import TaxCalculatorRegistry
from fiscal_engines.strategy import (
    CountryTaxStrategy,
    PercentageOfRateTaxStrategy,
    PerGuestNightlyTaxStrategy,
)
from fiscal_engines.tracer import traced_engine

__all__ = [
    "COUNTRY_STRATEGIES",
    "CountryTaxStrategy",
    "FiscalEngine",
    "FranceTaxStrategy",
    "MoroccoTaxStrategy",
    "PerGuestNightlyTaxStrategy",
    "PercentageOfRateTaxStrategy",
    "SaudiArabiaTaxStrategy",
    "TaxCalculatorRegistry",
    "build_fiscal_engine",
    "traced_engine",
]
