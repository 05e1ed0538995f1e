"""
Fiscal Kernel

Tax rule resolution and money rounding for a multi-country hospitality
platform:
- Date-effective VAT rules per (country, category)
- Fixed-point HT / tax / TTC derivation, rounded half up to the cent
- Typed errors and structured logging shared by the engines
"""

__version__ = "0.1.0"
