"""Saudi Arabia: flat VAT, municipality fee as a percentage of the nightly rate (SAR)."""

from fiscal_engines.strategy import PercentageOfRateTaxStrategy


class SaudiArabiaTaxStrategy(PercentageOfRateTaxStrategy):
    """
    VAT is 15 % for every seeded category; the category only selects which
    rule row is read.

    The municipality fee ignores guest count: it is charged per night on the
    room price.
    """

    country_code = "SA"
    currency = "SAR"
