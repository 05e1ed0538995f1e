"""Kernel services (imperative shell over the database)."""

from fiscal_kernel.services.tax_rule_service import TaxRuleService

__all__ = ["TaxRuleService"]
