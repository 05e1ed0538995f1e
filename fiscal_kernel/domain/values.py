"""
Values -- Immutable value objects flowing through the tax engine.

Responsibility:
    Defines the inputs and outputs of tax calculation: TaxableItem,
    TaxRule, TaxResult, TouristTaxInput and TouristTaxResult.  These are
    built fresh for every call and never mutated.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by the rule store, the country strategies and the callers.

Invariants enforced:
    - Decimal-only amounts: numeric inputs are converted via ``str`` so a
      float never leaks binary noise into a rate or an amount.
    - TaxRule.country is a 2-letter upper-case code; tax_rate is a
      non-negative fraction quantized to 4 places (0.1000 == 10 %).
    - TaxResult keeps amount_ttc == round2(amount_ht + tax_amount).

Failure modes:
    - ValueError on construction with malformed rules or amounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum

from fiscal_kernel.domain.money import ZERO, round2

RATE_DECIMAL_PLACES = 4
_RATE_QUANTUM = Decimal(10) ** -RATE_DECIMAL_PLACES


def _as_decimal(value: object, field_name: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid {field_name}: {value!r}") from e


def _as_optional_decimal(value: object, field_name: str) -> Decimal | None:
    if value is None:
        return None
    return _as_decimal(value, field_name)


class TaxCategory:
    """Well-known category tags.

    Categories are free-form strings; callers may use tags that are not
    listed here, they simply need a matching seeded rule.
    """

    ACCOMMODATION = "ACCOMMODATION"
    STANDARD = "STANDARD"
    CLEANING = "CLEANING"
    FOOD = "FOOD"
    TOURIST_TAX = "TOURIST_TAX"


@dataclass(frozen=True)
class TaxableItem:
    """One line item to be taxed, amount expressed HT (pre-tax)."""

    amount: Decimal
    tax_category: str
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _as_decimal(self.amount, "amount"))


@dataclass(frozen=True)
class TaxRule:
    """
    One versioned tax rate for a (country, category) pair.

    Contract:
        Several rules may exist for the same pair, distinguished by
        ``effective_from``.  The rule in force on a date is the one with the
        greatest ``effective_from`` not after that date.

    Guarantees:
        - country is upper case, exactly 2 letters.
        - tax_rate is a fraction with 4 decimal places, never negative.
    """

    country: str
    tax_category: str
    tax_rate: Decimal
    tax_name: str
    effective_from: date

    def __post_init__(self) -> None:
        country = self.country.upper().strip() if self.country else ""
        if len(country) != 2 or not country.isalpha():
            raise ValueError(f"Invalid country code: {self.country!r}")
        object.__setattr__(self, "country", country)

        if not self.tax_category or not self.tax_category.strip():
            raise ValueError("tax_category cannot be empty")

        rate = _as_decimal(self.tax_rate, "tax_rate")
        if rate < 0:
            raise ValueError(f"Tax rate cannot be negative: {rate}")
        object.__setattr__(self, "tax_rate", rate.quantize(_RATE_QUANTUM))

    @property
    def rate_percent(self) -> Decimal:
        """Rate as percentage (e.g., 10.00 for 10%)."""
        return self.tax_rate * Decimal("100")


@dataclass(frozen=True)
class TaxResult:
    """HT / tax / TTC breakdown of one taxed item."""

    amount_ht: Decimal
    tax_amount: Decimal
    amount_ttc: Decimal
    tax_rate: Decimal
    tax_name: str
    tax_category: str

    @property
    def rate_percent(self) -> Decimal:
        """Rate as percentage."""
        return self.tax_rate * Decimal("100")


@dataclass(frozen=True)
class TouristTaxInput:
    """
    Inputs for the nightly occupancy tax.

    Which optional rate is populated selects the sub-mode: per-guest-per-night
    jurisdictions read ``per_person_per_night_rate``, percentage-of-rate
    jurisdictions read ``percentage_rate`` against ``nightly_rate``.  Prefer
    the ``per_person`` and ``percentage`` constructors.

    ``number_of_children`` is carried for callers and receipts; none of the
    current formulas exempt children.
    """

    nightly_rate: Decimal | None
    number_of_guests: int
    number_of_nights: int
    number_of_children: int = 0
    per_person_per_night_rate: Decimal | None = None
    percentage_rate: Decimal | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "nightly_rate",
            _as_optional_decimal(self.nightly_rate, "nightly_rate"),
        )
        object.__setattr__(
            self, "per_person_per_night_rate",
            _as_optional_decimal(self.per_person_per_night_rate, "per_person_per_night_rate"),
        )
        object.__setattr__(
            self, "percentage_rate",
            _as_optional_decimal(self.percentage_rate, "percentage_rate"),
        )

    @classmethod
    def per_person(
        cls,
        number_of_guests: int,
        number_of_nights: int,
        number_of_children: int,
        per_person_per_night_rate: Decimal | None,
    ) -> TouristTaxInput:
        """Per-guest-per-night mode: nightly rate zeroed, no percentage."""
        return cls(
            nightly_rate=Decimal("0"),
            number_of_guests=number_of_guests,
            number_of_nights=number_of_nights,
            number_of_children=number_of_children,
            per_person_per_night_rate=per_person_per_night_rate,
            percentage_rate=None,
        )

    @classmethod
    def percentage(
        cls,
        nightly_rate: Decimal | None,
        number_of_guests: int,
        number_of_nights: int,
        number_of_children: int,
        percentage_rate: Decimal | None,
    ) -> TouristTaxInput:
        """Percentage-of-nightly-rate mode: no per-person rate."""
        return cls(
            nightly_rate=nightly_rate,
            number_of_guests=number_of_guests,
            number_of_nights=number_of_nights,
            number_of_children=number_of_children,
            per_person_per_night_rate=None,
            percentage_rate=percentage_rate,
        )


class TouristTaxBasis(str, Enum):
    """Which formula produced a tourist tax amount."""

    PER_GUEST_NIGHT = "per_guest_night"  # rate x guests x nights
    PERCENTAGE_OF_RATE = "percentage_of_rate"  # nightly price x % x nights


@dataclass(frozen=True)
class TouristTaxResult:
    """
    Computed occupancy tax for a stay.

    ``per_person_per_night`` has a formula-dependent meaning: the configured
    per-guest rate for PER_GUEST_NIGHT, but the computed charge per night for
    the whole party for PERCENTAGE_OF_RATE (that formula ignores guest count).
    Read ``rate_per_guest_per_night`` or ``per_night_amount`` instead when the
    distinction matters.
    """

    amount: Decimal
    description: str
    per_person_per_night: Decimal | None
    basis: TouristTaxBasis = TouristTaxBasis.PER_GUEST_NIGHT
    number_of_guests: int = 0

    @property
    def rate_per_guest_per_night(self) -> Decimal | None:
        """Configured per-guest nightly rate, None for percentage formulas."""
        if self.basis is TouristTaxBasis.PER_GUEST_NIGHT:
            return self.per_person_per_night
        return None

    @property
    def per_night_amount(self) -> Decimal:
        """Amount charged per night for the whole party."""
        if self.per_person_per_night is None or self.per_person_per_night <= 0:
            return ZERO
        if self.basis is TouristTaxBasis.PERCENTAGE_OF_RATE:
            return self.per_person_per_night
        return round2(self.per_person_per_night * self.number_of_guests)
