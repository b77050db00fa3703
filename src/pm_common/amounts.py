"""Integer arithmetic utilities for micro-unit amounts.

All stakes, payouts, fees and balances are int micro-units
(1 unit = 1_000_000 micro-units). No float, no Decimal.
"""

MICRO_PER_UNIT = 1_000_000


def floor_div(numerator: int, denominator: int) -> int:
    """Floor division for non-negative operands; rejects a zero denominator."""
    if denominator <= 0:
        raise ValueError(f"Denominator must be positive, got {denominator}")
    if numerator < 0:
        raise ValueError(f"Numerator must be non-negative, got {numerator}")
    return numerator // denominator


def amount_to_display(micro: int) -> str:
    """Convert micro-units to display string: 3920000 -> '3.920000', -1500 -> '-0.001500'."""
    if micro < 0:
        abs_micro = -micro
        return f"-{abs_micro // MICRO_PER_UNIT:,}.{abs_micro % MICRO_PER_UNIT:06d}"
    return f"{micro // MICRO_PER_UNIT:,}.{micro % MICRO_PER_UNIT:06d}"
