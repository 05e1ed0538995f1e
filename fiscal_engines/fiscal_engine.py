"""
FiscalEngine -- The single entry point for tax calculation.

Responsibility:
    Narrow facade over TaxCalculatorRegistry.  Callers (invoicing, pricing,
    booking) depend on these three operations only and never see the
    registry or the strategies.

Architecture position:
    Engines -- pure delegation.  Every call is traced (FISCAL_ENGINE_TRACE).

Failure modes:
    - UnsupportedCountryError from calculate_tax / calculate_tourist_tax.
    - NoApplicableRuleError from calculate_tax.
    - is_country_supported never raises.

Usage:
    from fiscal_engines import build_fiscal_engine
    from fiscal_kernel.domain import InMemoryTaxRuleStore, TaxableItem

    engine = build_fiscal_engine(InMemoryTaxRuleStore(rules))
    result = engine.calculate_tax(
        "FR", TaxableItem(Decimal("200.00"), "ACCOMMODATION"), date(2025, 6, 1)
    )
    print(result.amount_ttc)  # 220.00
"""

from __future__ import annotations

from datetime import date

from fiscal_engines.registry import TaxCalculatorRegistry
from fiscal_engines.tracer import traced_engine
from fiscal_kernel.domain.rule_store import TaxRuleStore
from fiscal_kernel.domain.values import (
    TaxableItem,
    TaxResult,
    TouristTaxInput,
    TouristTaxResult,
)

ENGINE_VERSION = "1.0"


class FiscalEngine:
    """Lookup-and-delegate facade over the country strategies."""

    def __init__(self, registry: TaxCalculatorRegistry):
        self._registry = registry

    @traced_engine(
        "fiscal.tax", ENGINE_VERSION,
        fingerprint_fields=("country_code", "item", "as_of_date"),
    )
    def calculate_tax(
        self, country_code: str, item: TaxableItem, as_of_date: date
    ) -> TaxResult:
        return self._registry.get(country_code).calculate_tax(item, as_of_date)

    @traced_engine(
        "fiscal.tourist_tax", ENGINE_VERSION,
        fingerprint_fields=("country_code", "tourist_input"),
    )
    def calculate_tourist_tax(
        self, country_code: str, tourist_input: TouristTaxInput
    ) -> TouristTaxResult:
        return self._registry.get(country_code).calculate_tourist_tax(tourist_input)

    def is_country_supported(self, country_code: str | None) -> bool:
        return self._registry.is_supported(country_code)


def build_fiscal_engine(rule_store: TaxRuleStore) -> FiscalEngine:
    """Wire the registry of all supported countries into a FiscalEngine."""
    return FiscalEngine(TaxCalculatorRegistry.from_rule_store(rule_store))
