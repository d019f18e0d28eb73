# calculations.py
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")

def _to_decimal(value: float) -> Decimal:
    # repr gives the shortest string that round-trips, so 199.99 stays 199.99
    return Decimal(repr(float(value)))

def fixed_offer(mid: float, ratio: float = 0.5) -> float:
    """Offer for a listing: ratio * midpoint, rounded half-up to cents."""
    amount = _to_decimal(mid) * _to_decimal(ratio)
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))

def reference_midpoint(mid: float) -> float:
    """Midpoint as shown to the caller, rounded half-up to cents."""
    return float(_to_decimal(mid).quantize(CENT, rounding=ROUND_HALF_UP))

def policy_statement(ratio: float = 0.5) -> str:
    pct = _to_decimal(ratio) * 100
    return f"Offer equals {pct.normalize():f}% of the current used-price midpoint."
