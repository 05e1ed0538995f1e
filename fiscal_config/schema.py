"""
Tax rule set schema.

A TaxRuleSet is the human-authored, reviewable source of VAT rates: YAML
files are parsed into it by the loader and fed to a rule store (in memory,
or the database via scripts/seed_tax_rules.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fiscal_kernel.domain.values import TaxRule


@dataclass(frozen=True)
class TaxRuleSet:
    """Versioned collection of tax rules."""

    version: str
    rules: tuple[TaxRule, ...]
    description: str = ""
    checksum: str = ""
    source_path: str | None = field(default=None, compare=False)

    @property
    def countries(self) -> frozenset[str]:
        return frozenset(r.country for r in self.rules)

    def categories_for(self, country: str) -> frozenset[str]:
        country = country.upper()
        return frozenset(r.tax_category for r in self.rules if r.country == country)
