"""
Country tax strategies -- per-jurisdiction VAT and tourist tax.

Responsibility:
    ``CountryTaxStrategy`` is the interface every supported jurisdiction
    implements.  Standard tax is identical in shape everywhere (resolve the
    rule in force, apply its rate through the money utility) and lives in
    the base class; the tourist tax formula is what varies, and comes in two
    families:

    - ``PerGuestNightlyTaxStrategy``: rate x guests x nights.
    - ``PercentageOfRateTaxStrategy``: a municipality fee on the nightly
      price, guest count ignored.

Architecture position:
    Engines -- pure calculation over a ``TaxRuleStore`` read.
    Concrete countries live in ``fiscal_engines.countries``.

Invariants enforced:
    - calculate_tax: amount_ht = item.amount,
      tax_amount = round2(amount_ht * rate),
      amount_ttc = round2(amount_ht + tax_amount).
    - calculate_tourist_tax never raises on a missing, zero or negative
      rate: the result is a zero amount.
    - The numeric rate always comes from the rule store, never from code.

Failure modes:
    - NoApplicableRuleError from calculate_tax when the store has no rule
      in force for (country, category, date).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import ClassVar

from fiscal_kernel.domain import money
from fiscal_kernel.domain.rule_store import TaxRuleStore
from fiscal_kernel.domain.values import (
    TaxableItem,
    TaxResult,
    TaxRule,
    TouristTaxBasis,
    TouristTaxInput,
    TouristTaxResult,
)
from fiscal_kernel.exceptions import NoApplicableRuleError
from fiscal_kernel.logging_config import get_logger

logger = get_logger("engines.strategy")


class CountryTaxStrategy(ABC):
    """
    Tax calculation for one jurisdiction.

    Subclasses set ``country_code`` and ``currency`` and implement
    ``calculate_tourist_tax``.
    """

    country_code: ClassVar[str]
    currency: ClassVar[str]

    def __init__(self, rule_store: TaxRuleStore):
        self._rule_store = rule_store

    def calculate_tax(self, item: TaxableItem, as_of_date: date) -> TaxResult:
        """
        Standard (VAT) breakdown for one item using the rule in force.

        Raises:
            NoApplicableRuleError: If no rule is in force on as_of_date.
        """
        rule = self._rule_store.find_applicable_rule(
            self.country_code, item.tax_category, as_of_date
        )
        if rule is None:
            logger.error("tax_rule_not_found", extra={
                "country_code": self.country_code,
                "tax_category": item.tax_category,
                "as_of_date": as_of_date.isoformat(),
            })
            raise NoApplicableRuleError(self.country_code, item.tax_category, as_of_date)

        amount_ht = item.amount
        tax = money.tax_amount(amount_ht, rule.tax_rate)
        result = TaxResult(
            amount_ht=amount_ht,
            tax_amount=tax,
            amount_ttc=money.round2(amount_ht + tax),
            tax_rate=rule.tax_rate,
            tax_name=rule.tax_name,
            tax_category=item.tax_category,
        )

        logger.debug("tax_calculated", extra={
            "country_code": self.country_code,
            "tax_category": item.tax_category,
            "rule_effective_from": rule.effective_from.isoformat(),
            "amount_ht": str(result.amount_ht),
            "tax_amount": str(result.tax_amount),
            "amount_ttc": str(result.amount_ttc),
        })
        return result

    @abstractmethod
    def calculate_tourist_tax(self, tourist_input: TouristTaxInput) -> TouristTaxResult:
        """Occupancy tax for a stay. Never raises on unset rates."""

    def get_applicable_rules(self, tax_category: str, as_of_date: date) -> list[TaxRule]:
        """Rule history for a category as of a date, newest first (audit/display)."""
        return self._rule_store.find_applicable_rules(
            self.country_code, tax_category, as_of_date
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(country_code={self.country_code!r})"


class PerGuestNightlyTaxStrategy(CountryTaxStrategy):
    """
    Tourist tax charged per guest per night.

    amount = round2(rate * guests * nights), zero when the rate is None,
    zero or negative.  ``per_person_per_night`` echoes the configured rate.
    """

    description_label: ClassVar[str] = "Taxe de sejour"

    def describe(self, guests: int, nights: int, rate: Decimal) -> str:
        return (
            f"{self.description_label}: {guests} pers x {nights} nuits "
            f"x {rate:.2f} {self.currency}"
        )

    def calculate_tourist_tax(self, tourist_input: TouristTaxInput) -> TouristTaxResult:
        rate = tourist_input.per_person_per_night_rate
        guests = tourist_input.number_of_guests
        nights = tourist_input.number_of_nights

        if rate is None or rate <= 0:
            return TouristTaxResult(
                amount=money.ZERO,
                description=f"{self.description_label}: non applicable",
                per_person_per_night=rate,
                basis=TouristTaxBasis.PER_GUEST_NIGHT,
                number_of_guests=guests,
            )

        amount = money.round2(rate * guests * nights)
        return TouristTaxResult(
            amount=amount,
            description=self.describe(guests, nights, rate),
            per_person_per_night=rate,
            basis=TouristTaxBasis.PER_GUEST_NIGHT,
            number_of_guests=guests,
        )


class PercentageOfRateTaxStrategy(CountryTaxStrategy):
    """
    Tourist tax as a municipality fee on the nightly price.

    The fee is flat per night and independent of guest count.  When no
    positive percentage is supplied, ``default_percentage`` applies.
    ``per_person_per_night`` carries the computed per-night charge (see
    TouristTaxResult.per_night_amount).
    """

    default_percentage: ClassVar[Decimal] = Decimal("0.05")

    def calculate_tourist_tax(self, tourist_input: TouristTaxInput) -> TouristTaxResult:
        nightly_rate = tourist_input.nightly_rate
        nights = tourist_input.number_of_nights
        guests = tourist_input.number_of_guests

        if nightly_rate is None or nightly_rate <= 0:
            return TouristTaxResult(
                amount=money.ZERO,
                description="Municipality fee: not applicable",
                per_person_per_night=money.ZERO,
                basis=TouristTaxBasis.PERCENTAGE_OF_RATE,
                number_of_guests=guests,
            )

        percentage = tourist_input.percentage_rate
        if percentage is None or percentage <= 0:
            percentage = self.default_percentage

        per_night = money.round2(nightly_rate * percentage)
        amount = money.round2(per_night * nights)
        return TouristTaxResult(
            amount=amount,
            description=(
                f"Municipality fee: {percentage * 100:.2f}% x {nights} nights "
                f"x {nightly_rate:.2f} {self.currency}"
            ),
            per_person_per_night=per_night,
            basis=TouristTaxBasis.PERCENTAGE_OF_RATE,
            number_of_guests=guests,
        )
