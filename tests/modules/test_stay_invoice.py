"""
Tests for StayInvoiceService.

Covers:
- Accommodation, cleaning and tourist-tax lines for a French stay
- Lines omitted when their amount is missing or zero
- Guest count and night count defaults
- Errors from the engine propagate with no partial draft
"""

from datetime import date
from decimal import Decimal

import pytest

from fiscal_kernel.domain.values import TaxCategory
from fiscal_kernel.exceptions import NoApplicableRuleError, UnsupportedCountryError
from fiscal_modules.invoicing import InvoiceDraft, StayCharges, StayInvoiceService


@pytest.fixture
def service(fiscal_engine):
    return StayInvoiceService(fiscal_engine)


def _stay(**overrides):
    values = {
        "check_in": date(2025, 7, 1),
        "check_out": date(2025, 7, 4),
        "room_revenue": Decimal("300.00"),
        "cleaning_fee": Decimal("50.00"),
        "guest_count": 2,
        "tourist_tax_rate_per_person": Decimal("1.50"),
    }
    values.update(overrides)
    return StayCharges(**values)


class TestStayCharges:

    def test_nights(self):
        assert _stay().nights == 3

    def test_same_day_counts_one_night(self):
        assert _stay(check_out=date(2025, 7, 1)).nights == 1


class TestBuildDraft:
    """Full French stay."""

    def test_lines(self, service):
        draft = service.build_draft("FR", _stay())
        assert isinstance(draft, InvoiceDraft)
        assert [line.tax_category for line in draft.lines] == [
            TaxCategory.ACCOMMODATION,
            TaxCategory.CLEANING,
            TaxCategory.TOURIST_TAX,
        ]
        assert [line.line_number for line in draft.lines] == [1, 2, 3]

    def test_accommodation_line(self, service):
        line = service.build_draft("FR", _stay()).lines_for(TaxCategory.ACCOMMODATION)[0]
        assert line.description == "Hebergement du 2025-07-01 au 2025-07-04 (3 nuits)"
        assert line.tax_rate == Decimal("0.1000")
        assert line.tax_amount == Decimal("30.00")
        assert line.total_ttc == Decimal("330.00")

    def test_cleaning_line(self, service):
        line = service.build_draft("FR", _stay()).lines_for(TaxCategory.CLEANING)[0]
        assert line.description == "Frais de menage"
        assert line.tax_amount == Decimal("10.00")
        assert line.total_ttc == Decimal("60.00")

    def test_tourist_tax_line_has_no_vat(self, service):
        line = service.build_draft("FR", _stay()).lines_for(TaxCategory.TOURIST_TAX)[0]
        assert line.description == "Taxe de sejour: 2 pers x 3 nuits x 1.50 EUR"
        assert line.tax_rate == Decimal("0.00")
        assert line.tax_amount == Decimal("0.00")
        assert line.total_ht == line.total_ttc == Decimal("9.00")

    def test_totals(self, service):
        draft = service.build_draft("FR", _stay())
        assert draft.total_ht == Decimal("359.00")
        assert draft.total_tax == Decimal("40.00")
        assert draft.total_ttc == Decimal("399.00")

    def test_logs_carry_reservation(self, service, captured_logs):
        service.build_draft("FR", _stay(), reservation_id="R-42")
        completed = [r for r in captured_logs() if r["message"] == "stay_invoice_completed"]
        assert completed[0]["reservation_id"] == "R-42"
        assert completed[0]["line_count"] == 3

    def test_logs_keep_normalized_country(self, service, captured_logs):
        service.build_draft("fr", _stay())
        calculated = [r for r in captured_logs() if r["message"] == "tax_calculated"]
        assert calculated
        assert all(r["country_code"] == "FR" for r in calculated)


class TestOptionalLines:

    def test_no_cleaning_fee(self, service):
        draft = service.build_draft("FR", _stay(cleaning_fee=None))
        assert draft.lines_for(TaxCategory.CLEANING) == ()
        assert draft.line_count == 2

    def test_zero_tourist_tax_rate(self, service):
        draft = service.build_draft("FR", _stay(tourist_tax_rate_per_person=Decimal("0")))
        assert draft.lines_for(TaxCategory.TOURIST_TAX) == ()

    def test_guest_count_defaults_to_one(self, service):
        draft = service.build_draft("FR", _stay(guest_count=None))
        line = draft.lines_for(TaxCategory.TOURIST_TAX)[0]
        assert line.total_ttc == Decimal("4.50")

    def test_empty_stay(self, service):
        draft = service.build_draft(
            "FR", _stay(room_revenue=None, cleaning_fee=None, tourist_tax_rate_per_person=None)
        )
        assert draft.lines == ()
        assert draft.total_ttc == Decimal("0.00")


class TestErrors:

    def test_unsupported_country(self, service):
        with pytest.raises(UnsupportedCountryError):
            service.build_draft("XX", _stay())

    def test_missing_cleaning_rule(self, service):
        """Morocco has no CLEANING rule seeded."""
        with pytest.raises(NoApplicableRuleError):
            service.build_draft("MA", _stay())

    def test_morocco_without_cleaning(self, service):
        draft = service.build_draft("MA", _stay(cleaning_fee=None))
        assert draft.total_tax == Decimal("30.00")
