"""
Module: fiscal_kernel.selectors.tax_rule_selector
Responsibility: Read-only queries over the tax_rules table: the rule in
    force on a date, the version history as of a date, and the categories
    seeded for a country.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - The rule in force is the row with the greatest effective_from that is
      not after the query date (ORDER BY effective_from DESC LIMIT 1, served
      by idx_tax_rule_lookup).
    - Results are TaxRule DTOs, never ORM rows.
"""

from datetime import date

from sqlalchemy import select

from fiscal_kernel.domain.values import TaxRule
from fiscal_kernel.models.tax_rule import TaxRuleModel
from fiscal_kernel.selectors.base import BaseSelector


class TaxRuleSelector(BaseSelector[TaxRuleModel]):
    """Queries versioned tax rules for a single session."""

    def _in_force(self, country: str, tax_category: str, as_of: date):
        return (
            select(TaxRuleModel)
            .where(TaxRuleModel.country_code == country.strip().upper())
            .where(TaxRuleModel.tax_category == tax_category)
            .where(TaxRuleModel.effective_from <= as_of)
            .order_by(TaxRuleModel.effective_from.desc())
        )

    def find_applicable_rule(
        self, country: str, tax_category: str, as_of: date
    ) -> TaxRule | None:
        """Return the rule in force on ``as_of``, or None."""
        row = self.session.execute(
            self._in_force(country, tax_category, as_of).limit(1)
        ).scalar_one_or_none()
        return row.to_dto() if row is not None else None

    def find_applicable_rules(
        self, country: str, tax_category: str, as_of: date
    ) -> list[TaxRule]:
        """Return every version already in force on ``as_of``, newest first."""
        rows = self.session.execute(
            self._in_force(country, tax_category, as_of)
        ).scalars().all()
        return [row.to_dto() for row in rows]

    def list_categories(self, country: str) -> list[str]:
        """Categories with at least one seeded rule for ``country``."""
        return list(
            self.session.execute(
                select(TaxRuleModel.tax_category)
                .where(TaxRuleModel.country_code == country.strip().upper())
                .distinct()
                .order_by(TaxRuleModel.tax_category)
            ).scalars()
        )

    def exists(self, rule: TaxRule) -> bool:
        """True when the exact version (country, category, effective_from) exists."""
        return self.session.execute(
            select(TaxRuleModel.id)
            .where(TaxRuleModel.country_code == rule.country)
            .where(TaxRuleModel.tax_category == rule.tax_category)
            .where(TaxRuleModel.effective_from == rule.effective_from)
        ).first() is not None
