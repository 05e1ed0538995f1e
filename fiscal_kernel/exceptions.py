"""
Typed Exception Hierarchy for the Fiscal Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the tax engine (invoicing, pricing, booking) must be able to tell
a configuration gap from a programming error without parsing messages:

  - Every error has a TYPED exception class (catch by type, not message)
  - Every exception has a CODE attribute (machine-readable, API-safe)
  - Exceptions carry structured DATA (not just a message string)

Example:
    try:
        result = engine.calculate_tax("FR", item, stay_date)
    except NoApplicableRuleError as e:
        alert_data_team(e.country_code, e.tax_category, e.as_of_date)
    except UnsupportedCountryError as e:
        api_response(code=e.code, country=e.country_code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    FiscalKernelError (base)
    |
    +-- TaxError
    |   +-- UnsupportedCountryError
    |   +-- NoApplicableRuleError
    |
    +-- RuleStoreError
        +-- DuplicateTaxRuleError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                    | When Raised
------------|-------------------------|---------------------------------------------
Tax         | UNSUPPORTED_COUNTRY     | No strategy registered for the country code
            | NO_APPLICABLE_TAX_RULE  | No rule in force for (country, category, date)
------------|-------------------------|---------------------------------------------
Rule store  | DUPLICATE_TAX_RULE      | Same (country, category, effective_from) twice

===============================================================================
ASYMMETRY BETWEEN VAT AND TOURIST TAX
===============================================================================

A missing VAT rule is a data bug upstream (an unseeded rule) and is always
raised.  A missing or zero tourist-tax rate is a valid property
configuration: tourist-tax calculation returns a zero amount and never
raises.
"""

from datetime import date


class FiscalKernelError(Exception):
    """
    Base exception for all fiscal kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FISCAL_KERNEL_ERROR"


# Tax calculation exceptions


class TaxError(FiscalKernelError):
    """Base exception for tax calculation errors."""

    code: str = "TAX_ERROR"


class UnsupportedCountryError(TaxError):
    """No tax strategy is registered for the requested country."""

    code: str = "UNSUPPORTED_COUNTRY"

    def __init__(self, country_code: str | None):
        self.country_code = country_code
        super().__init__(f"Unsupported country for tax calculation: {country_code!r}")


class NoApplicableRuleError(TaxError):
    """The rule store has no rule in force for (country, category, date)."""

    code: str = "NO_APPLICABLE_TAX_RULE"

    def __init__(self, country_code: str, tax_category: str, as_of_date: date):
        self.country_code = country_code
        self.tax_category = tax_category
        self.as_of_date = as_of_date
        super().__init__(
            f"No applicable tax rule for country={country_code}, "
            f"category={tax_category}, date={as_of_date}"
        )


# Rule store exceptions


class RuleStoreError(FiscalKernelError):
    """Base exception for rule store errors."""

    code: str = "RULE_STORE_ERROR"


class DuplicateTaxRuleError(RuleStoreError):
    """A rule version with the same effective date already exists."""

    code: str = "DUPLICATE_TAX_RULE"

    def __init__(self, country_code: str, tax_category: str, effective_from: date):
        self.country_code = country_code
        self.tax_category = tax_category
        self.effective_from = effective_from
        super().__init__(
            f"Tax rule already exists for {country_code}/{tax_category} "
            f"effective {effective_from}"
        )
