"""
Invoicing Domain Models.

Responsibility:
    Frozen dataclass DTOs for turning a stay into taxed invoice lines:
    the stay charges going in, the lines and totals coming out.

Architecture:
    fiscal_modules -- thin glue (this layer).
    Pure data containers with no I/O and no tax arithmetic.

Invariants:
    - All models are ``frozen=True``.
    - All monetary fields use ``Decimal`` -- NEVER ``float``.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class StayCharges:
    """What a reservation contributes to an invoice."""

    check_in: date
    check_out: date
    room_revenue: Decimal | None = None
    cleaning_fee: Decimal | None = None
    guest_count: int | None = None
    tourist_tax_rate_per_person: Decimal | None = None

    @property
    def nights(self) -> int:
        """Nights between check-in and check-out, at least 1."""
        nights = (self.check_out - self.check_in).days
        return nights if nights > 0 else 1


@dataclass(frozen=True)
class InvoiceLine:
    line_number: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_category: str
    tax_rate: Decimal
    tax_amount: Decimal
    total_ht: Decimal
    total_ttc: Decimal


@dataclass(frozen=True)
class InvoiceDraft:
    """Taxed lines of a stay with their rounded totals."""

    country_code: str
    lines: tuple[InvoiceLine, ...]
    total_ht: Decimal
    total_tax: Decimal
    total_ttc: Decimal

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def lines_for(self, tax_category: str) -> tuple[InvoiceLine, ...]:
        return tuple(line for line in self.lines if line.tax_category == tax_category)
