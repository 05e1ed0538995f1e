"""TaxCalculatorRegistry -- Country code to CountryTaxStrategy dispatch."""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

from fiscal_engines.strategy import CountryTaxStrategy
from fiscal_kernel.domain.rule_store import TaxRuleStore
from fiscal_kernel.exceptions import UnsupportedCountryError
from fiscal_kernel.logging_config import get_logger

logger = get_logger("engines.registry")


def _normalize(country_code: str | None) -> str:
    return country_code.upper().strip() if country_code else ""


class TaxCalculatorRegistry:
    """
    Index of country strategies keyed by country code.

    Built once from the full set of strategies and never mutated afterwards,
    so concurrent reads need no locking.  Lookups normalize the code
    (strip + upper case).
    """

    def __init__(self, strategies: Iterable[CountryTaxStrategy]):
        index: dict[str, CountryTaxStrategy] = {}
        for strategy in strategies:
            code = _normalize(strategy.country_code)
            if code in index:
                raise ValueError(
                    f"Strategy already registered for {code}: "
                    f"{index[code].__class__.__name__}"
                )
            index[code] = strategy

        self._strategies = MappingProxyType(index)
        logger.info("tax_registry_built", extra={
            "countries": sorted(index),
        })

    @classmethod
    def from_rule_store(cls, rule_store: TaxRuleStore) -> TaxCalculatorRegistry:
        """Instantiate every strategy in COUNTRY_STRATEGIES over one rule store."""
        from fiscal_engines.countries import COUNTRY_STRATEGIES

        return cls(strategy_cls(rule_store) for strategy_cls in COUNTRY_STRATEGIES)

    def get(self, country_code: str | None) -> CountryTaxStrategy:
        """Strategy for a country.

        Raises:
            UnsupportedCountryError: If no strategy is registered.
        """
        strategy = self._strategies.get(_normalize(country_code))
        if strategy is None:
            logger.warning("tax_country_unsupported", extra={
                "requested_country": country_code,
            })
            raise UnsupportedCountryError(country_code)
        return strategy

    def is_supported(self, country_code: str | None) -> bool:
        return _normalize(country_code) in self._strategies

    def get_supported_countries(self) -> frozenset[str]:
        return frozenset(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)
