# proptrack/services/constants.py
"""
Shared constants for the portfolio services.

Quantization steps are applied only to reported figures; every ratio is
computed from unrounded Decimal sums first.
"""

from decimal import Decimal

# Money values (value, debt, equity, cash flow, annualized totals)
MONEY_QUANTUM = Decimal("0.01")

# LVR, gross yield, net yield (fractions, e.g. 0.7125)
RATIO_QUANTUM = Decimal("0.0001")

# Capital growth percent (e.g. 30.00 for +30%)
PERCENT_QUANTUM = Decimal("0.01")

ZERO = Decimal("0")
HUNDRED = Decimal("100")
