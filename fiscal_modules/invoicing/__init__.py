"""
Invoicing Module.

Responsibility:
    Builds the taxed lines of a stay invoice (accommodation, cleaning,
    tourist tax) by delegating every tax figure to the FiscalEngine.
"""

from fiscal_modules.invoicing.models import InvoiceDraft, InvoiceLine, StayCharges
from fiscal_modules.invoicing.service import StayInvoiceService

__all__ = ["InvoiceDraft", "InvoiceLine", "StayCharges", "StayInvoiceService"]
