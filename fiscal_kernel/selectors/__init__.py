"""Read-only selectors."""

from fiscal_kernel.selectors.base import BaseSelector
from fiscal_kernel.selectors.tax_rule_selector import TaxRuleSelector

__all__ = ["BaseSelector", "TaxRuleSelector"]
