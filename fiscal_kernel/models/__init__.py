"""ORM models for the fiscal kernel."""

from fiscal_kernel.models.tax_rule import TaxRuleModel

__all__ = ["TaxRuleModel"]
