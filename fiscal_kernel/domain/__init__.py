"""
Fiscal kernel domain: pure value objects, money rounding and the rule store
contract.  Nothing in this package performs I/O.
"""

from fiscal_kernel.domain.money import ZERO, ht, round2, tax_amount, ttc
from fiscal_kernel.domain.rule_store import InMemoryTaxRuleStore, TaxRuleStore
from fiscal_kernel.domain.values import (
    TaxableItem,
    TaxCategory,
    TaxResult,
    TaxRule,
    TouristTaxBasis,
    TouristTaxInput,
    TouristTaxResult,
)

__all__ = [
    "ZERO",
    "ht",
    "round2",
    "tax_amount",
    "ttc",
    "InMemoryTaxRuleStore",
    "TaxRuleStore",
    "TaxableItem",
    "TaxCategory",
    "TaxResult",
    "TaxRule",
    "TouristTaxBasis",
    "TouristTaxInput",
    "TouristTaxResult",
]
