"""
Stay Invoice Service -- Builds the taxed lines of a stay invoice.

Responsibility:
    Turns ``StayCharges`` into an ``InvoiceDraft``: one accommodation line,
    one cleaning line, one tourist-tax line (each only when it has a
    positive amount) and rounded totals.  Every tax figure comes from the
    ``FiscalEngine``; this service only decides which lines exist.

Architecture:
    fiscal_modules -- thin glue (this layer).  No persistence: the caller
    numbers, stores and issues the invoice.

Invariants:
    - VAT is resolved as of the check-in date.
    - The tourist-tax line carries no VAT: rate 0, tax 0, HT == TTC.
    - Totals are round2 of the sums of the line totals.

Failure modes:
    - UnsupportedCountryError / NoApplicableRuleError from the engine
      propagate unchanged; no partial draft is returned.

Usage:
    service = StayInvoiceService(engine)
    draft = service.build_draft("FR", StayCharges(
        check_in=date(2025, 7, 1),
        check_out=date(2025, 7, 4),
        room_revenue=Decimal("300.00"),
        cleaning_fee=Decimal("50.00"),
        guest_count=2,
        tourist_tax_rate_per_person=Decimal("1.50"),
    ))
"""

from __future__ import annotations

from decimal import Decimal

from fiscal_engines.fiscal_engine import FiscalEngine
from fiscal_kernel.domain import money
from fiscal_kernel.domain.values import (
    TaxableItem,
    TaxCategory,
    TaxResult,
    TouristTaxInput,
)
from fiscal_kernel.logging_config import LogContext, get_logger
from fiscal_modules.invoicing.models import InvoiceDraft, InvoiceLine, StayCharges

logger = get_logger("modules.invoicing.service")

_ONE = Decimal("1")


class StayInvoiceService:
    """Builds invoice drafts for stays through the FiscalEngine."""

    def __init__(self, engine: FiscalEngine):
        self._engine = engine

    def build_draft(
        self,
        country_code: str,
        stay: StayCharges,
        reservation_id: str | None = None,
    ) -> InvoiceDraft:
        with LogContext.bind(reservation_id=reservation_id, country_code=country_code):
            logger.info("stay_invoice_started", extra={
                "check_in": stay.check_in.isoformat(),
                "check_out": stay.check_out.isoformat(),
            })

            lines: list[InvoiceLine] = []

            if stay.room_revenue is not None and stay.room_revenue > 0:
                tax = self._engine.calculate_tax(
                    country_code,
                    TaxableItem(
                        stay.room_revenue,
                        TaxCategory.ACCOMMODATION,
                        f"Hebergement {stay.check_in} - {stay.check_out}",
                    ),
                    stay.check_in,
                )
                lines.append(self._taxed_line(
                    len(lines) + 1,
                    f"Hebergement du {stay.check_in} au {stay.check_out} "
                    f"({stay.nights} nuits)",
                    stay.room_revenue,
                    tax,
                ))

            if stay.cleaning_fee is not None and stay.cleaning_fee > 0:
                tax = self._engine.calculate_tax(
                    country_code,
                    TaxableItem(stay.cleaning_fee, TaxCategory.CLEANING, "Frais de menage"),
                    stay.check_in,
                )
                lines.append(self._taxed_line(
                    len(lines) + 1, "Frais de menage", stay.cleaning_fee, tax,
                ))

            rate = stay.tourist_tax_rate_per_person
            if rate is not None and rate > 0:
                guests = stay.guest_count if stay.guest_count is not None else 1
                tourist_tax = self._engine.calculate_tourist_tax(
                    country_code,
                    TouristTaxInput.per_person(guests, stay.nights, 0, rate),
                )
                if tourist_tax.amount > 0:
                    lines.append(InvoiceLine(
                        line_number=len(lines) + 1,
                        description=tourist_tax.description,
                        quantity=_ONE,
                        unit_price=tourist_tax.amount,
                        tax_category=TaxCategory.TOURIST_TAX,
                        tax_rate=money.ZERO,
                        tax_amount=money.ZERO,
                        total_ht=tourist_tax.amount,
                        total_ttc=tourist_tax.amount,
                    ))

            draft = InvoiceDraft(
                country_code=country_code,
                lines=tuple(lines),
                total_ht=money.round2(sum((l.total_ht for l in lines), Decimal("0"))),
                total_tax=money.round2(sum((l.tax_amount for l in lines), Decimal("0"))),
                total_ttc=money.round2(sum((l.total_ttc for l in lines), Decimal("0"))),
            )

            logger.info("stay_invoice_completed", extra={
                "line_count": draft.line_count,
                "total_ht": str(draft.total_ht),
                "total_tax": str(draft.total_tax),
                "total_ttc": str(draft.total_ttc),
            })
            return draft

    @staticmethod
    def _taxed_line(
        line_number: int, description: str, unit_price: Decimal, tax: TaxResult
    ) -> InvoiceLine:
        return InvoiceLine(
            line_number=line_number,
            description=description,
            quantity=_ONE,
            unit_price=unit_price,
            tax_category=tax.tax_category,
            tax_rate=tax.tax_rate,
            tax_amount=tax.tax_amount,
            total_ht=tax.amount_ht,
            total_ttc=tax.amount_ttc,
        )
