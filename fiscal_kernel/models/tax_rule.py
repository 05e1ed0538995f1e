"""
Module: fiscal_kernel.models.tax_rule
Responsibility: ORM persistence for versioned tax rates.  Each row is one
    rate for a (country, category) pair, in force from ``effective_from``
    until a later row for the same pair supersedes it.
Architecture position: Kernel > Models.  May import from db/ and
    domain/values.py (for the DTO conversion) only.

Invariants enforced:
    - At most one rule per (country_code, tax_category, effective_from):
      unique constraint uq_tax_rule_version.
    - tax_rate is a fraction stored with 4 decimal places.

Failure modes:
    - IntegrityError on a duplicate version (translated to
      DuplicateTaxRuleError by TaxRuleService.add_rules).
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_kernel.db.base import TrackedBase
from fiscal_kernel.domain.values import TaxRule


class TaxRuleModel(TrackedBase):
    """
    Tax rate record -- one version of a (country, category) rate.

    Non-goals:
        - No effective_to column: a version ends where the next one starts.
        - No stacking: exactly one rate applies per item.
    """

    __tablename__ = "tax_rules"

    __table_args__ = (
        UniqueConstraint(
            "country_code",
            "tax_category",
            "effective_from",
            name="uq_tax_rule_version",
        ),
        Index(
            "idx_tax_rule_lookup",
            "country_code",
            "tax_category",
            "effective_from",
        ),
    )

    country_code: Mapped[str] = mapped_column(
        String(2),
        nullable=False,
    )

    tax_category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Fraction, e.g. 0.1000 for 10 %
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 4),
        nullable=False,
    )

    tax_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    effective_from: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<TaxRuleModel {self.country_code}/{self.tax_category} "
            f"{self.tax_rate} from {self.effective_from}>"
        )

    def to_dto(self) -> TaxRule:
        """Convert to the immutable domain TaxRule."""
        return TaxRule(
            country=self.country_code,
            tax_category=self.tax_category,
            tax_rate=Decimal(str(self.tax_rate)),
            tax_name=self.tax_name,
            effective_from=self.effective_from,
        )

    @classmethod
    def from_dto(cls, rule: TaxRule) -> "TaxRuleModel":
        """Build an unsaved row from a domain TaxRule."""
        return cls(
            country_code=rule.country,
            tax_category=rule.tax_category,
            tax_rate=rule.tax_rate,
            tax_name=rule.tax_name,
            effective_from=rule.effective_from,
        )
