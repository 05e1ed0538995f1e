"""
Supported jurisdictions.

Adding a country means adding a strategy class here; the registry builds its
index from COUNTRY_STRATEGIES at start-up.
"""

from fiscal_engines.countries.france import FranceTaxStrategy
from fiscal_engines.countries.morocco import MoroccoTaxStrategy
from fiscal_engines.countries.saudi_arabia import SaudiArabiaTaxStrategy

COUNTRY_STRATEGIES = (
    FranceTaxStrategy,
    MoroccoTaxStrategy,
    SaudiArabiaTaxStrategy,
)

__all__ = [
    "COUNTRY_STRATEGIES",
    "FranceTaxStrategy",
    "MoroccoTaxStrategy",
    "SaudiArabiaTaxStrategy",
]
