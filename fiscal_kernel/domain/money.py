"""
Money -- Centralized rounding and HT/TTC/tax derivation.

Responsibility:
    The single place where monetary rounding happens.  Every country
    strategy derives tax amounts through these functions so that the three
    amounts of a breakdown (HT, tax, TTC) agree to the cent, and so that
    test cross-checks computed here match the calculators exactly.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - All results have exactly 2 decimal places, rounded half up.
    - ``None`` amounts are treated as zero.
    - ttc() uses the same two-step rounding as the calculators:
      round2(base + round2(base * rate)).
    - A None, zero or negative rate yields zero tax (never an error).

Failure modes:
    - None.  Non-Decimal inputs are converted through ``str`` so that
      ints and numeric strings are accepted; floats are converted through
      their shortest repr.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

MONEY_DECIMAL_PLACES = 2
ZERO = Decimal("0.00")
_QUANTUM = Decimal(10) ** -MONEY_DECIMAL_PLACES


def to_decimal(value: Decimal | int | str | float | None) -> Decimal:
    """Coerce a value to Decimal. None becomes Decimal("0")."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Decimal | int | str | float | None) -> Decimal:
    """Round to 2 decimal places, half up. round2(None) == 0.00."""
    return to_decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP)


def _effective_rate(rate: Decimal | int | str | float | None) -> Decimal:
    rate = to_decimal(rate)
    return rate if rate > 0 else Decimal("0")


def tax_amount(
    base: Decimal | int | str | float | None,
    rate: Decimal | int | str | float | None,
) -> Decimal:
    """Tax on a pre-tax base: round2(base * rate)."""
    return round2(to_decimal(base) * _effective_rate(rate))


def ttc(
    base: Decimal | int | str | float | None,
    rate: Decimal | int | str | float | None,
) -> Decimal:
    """Tax-inclusive amount: round2(base + tax_amount(base, rate))."""
    return round2(to_decimal(base) + tax_amount(base, rate))


def ht(
    amount_ttc: Decimal | int | str | float | None,
    rate: Decimal | int | str | float | None,
) -> Decimal:
    """Pre-tax amount from a tax-inclusive one: round2(ttc / (1 + rate))."""
    return round2(to_decimal(amount_ttc) / (Decimal("1") + _effective_rate(rate)))
