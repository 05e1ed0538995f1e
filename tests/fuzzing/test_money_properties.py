"""
Hypothesis-based property tests for the money utility and the strategies.

Properties:
- round2 is idempotent and always yields exactly 2 decimal places
- tax_amount + base == ttc for cent amounts, and tax is never negative
- Standard tax totals reconcile for every country and seeded category
- The per-guest tourist tax scales with guests and nights
- The municipality fee never depends on guest count
"""

from datetime import date
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from fiscal_config import get_default_rule_set
from fiscal_engines import build_fiscal_engine
from fiscal_kernel.domain.money import ZERO, round2, tax_amount, ttc
from fiscal_kernel.domain.rule_store import InMemoryTaxRuleStore
from fiscal_kernel.domain.values import TaxableItem, TouristTaxInput

ENGINE = build_fiscal_engine(InMemoryTaxRuleStore(get_default_rule_set().rules))

# The autouse log-context fixture is reset per test, not per example.
FIXTURE_SAFE = settings(suppress_health_check=[HealthCheck.function_scoped_fixture])

amounts = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("1000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)

raw_decimals = st.decimals(
    min_value=Decimal("-1000000"),
    max_value=Decimal("1000000"),
    allow_nan=False,
    allow_infinity=False,
)

rates = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("1"),
    places=4,
    allow_nan=False,
    allow_infinity=False,
)

seeded_pairs = st.sampled_from([
    ("FR", "ACCOMMODATION"),
    ("FR", "STANDARD"),
    ("FR", "CLEANING"),
    ("MA", "ACCOMMODATION"),
    ("MA", "STANDARD"),
    ("MA", "FOOD"),
    ("SA", "ACCOMMODATION"),
    ("SA", "STANDARD"),
    ("SA", "CLEANING"),
    ("SA", "FOOD"),
])

stay_dates = st.dates(min_value=date(2020, 7, 1), max_value=date(2035, 12, 31))


class TestRoundingProperties:

    @FIXTURE_SAFE
    @given(value=raw_decimals)
    def test_round2_idempotent(self, value):
        once = round2(value)
        assert round2(once) == once
        assert once.as_tuple().exponent == -2

    @FIXTURE_SAFE
    @given(value=raw_decimals)
    def test_round2_error_bounded(self, value):
        assert abs(round2(value) - value) <= Decimal("0.005")

    @FIXTURE_SAFE
    @given(base=amounts, rate=rates)
    def test_ttc_is_base_plus_tax(self, base, rate):
        assert tax_amount(base, rate) + base == ttc(base, rate)

    @FIXTURE_SAFE
    @given(base=amounts, rate=rates)
    def test_tax_non_negative(self, base, rate):
        assert tax_amount(base, rate) >= ZERO

    @FIXTURE_SAFE
    @given(base=amounts, rate=st.decimals(max_value=Decimal("0"), allow_nan=False, allow_infinity=False))
    def test_non_positive_rate_is_zero_tax(self, base, rate):
        assert tax_amount(base, rate) == ZERO


class TestStrategyProperties:

    @settings(max_examples=200, suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(amount=amounts, pair=seeded_pairs, as_of=stay_dates)
    def test_standard_tax_reconciles(self, amount, pair, as_of):
        country, category = pair
        result = ENGINE.calculate_tax(country, TaxableItem(amount, category), as_of)
        assert result.amount_ht == amount
        assert result.amount_ttc == round2(result.amount_ht + result.tax_amount)
        assert result.tax_amount == round2(amount * result.tax_rate)

    @FIXTURE_SAFE
    @given(
        guests=st.integers(min_value=1, max_value=20),
        nights=st.integers(min_value=1, max_value=60),
        rate=st.decimals(min_value=Decimal("0.01"), max_value=Decimal("20"), places=2),
    )
    def test_per_guest_tax_formula(self, guests, nights, rate):
        result = ENGINE.calculate_tourist_tax(
            "FR", TouristTaxInput.per_person(guests, nights, 0, rate)
        )
        assert result.amount == round2(rate * guests * nights)

    @FIXTURE_SAFE
    @given(
        nightly=st.decimals(min_value=Decimal("1"), max_value=Decimal("10000"), places=2),
        nights=st.integers(min_value=1, max_value=60),
        guests_a=st.integers(min_value=1, max_value=20),
        guests_b=st.integers(min_value=1, max_value=20),
    )
    def test_municipality_fee_ignores_guests(self, nightly, nights, guests_a, guests_b):
        a = ENGINE.calculate_tourist_tax(
            "SA", TouristTaxInput.percentage(nightly, guests_a, nights, 0, Decimal("0.05"))
        )
        b = ENGINE.calculate_tourist_tax(
            "SA", TouristTaxInput.percentage(nightly, guests_b, nights, 0, Decimal("0.05"))
        )
        assert a.amount == b.amount
        assert a.amount == round2(a.per_night_amount * nights)
