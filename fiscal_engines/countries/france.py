"""France: TVA by category, taxe de sejour per guest per night (EUR)."""

from fiscal_engines.strategy import PerGuestNightlyTaxStrategy


class FranceTaxStrategy(PerGuestNightlyTaxStrategy):
    """
    Seeded rates: 10 % ACCOMMODATION, 20 % STANDARD and CLEANING.

    The commune sets the taxe de sejour rate; it reaches the engine as the
    per-person-per-night rate of the input.
    """

    country_code = "FR"
    currency = "EUR"
