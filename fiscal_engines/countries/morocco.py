"""Morocco: TVA by category, taxe de sejour per guest per night (MAD)."""

from fiscal_engines.strategy import PerGuestNightlyTaxStrategy


class MoroccoTaxStrategy(PerGuestNightlyTaxStrategy):
    """Seeded rates: 10 % ACCOMMODATION, 20 % STANDARD, 7 % FOOD."""

    country_code = "MA"
    currency = "MAD"
