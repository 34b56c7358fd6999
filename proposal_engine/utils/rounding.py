# PURPOSE: Half-up rounding helpers for percentage and currency views.
# CONTEXT: Used when detailed crore amounts are turned into whole percentages and
#          when sub-bucket percentages must add up exactly to an asset-class target.
# CREDITS: Original work — no external code reuse.

from decimal import Decimal, ROUND_HALF_UP, getcontext

# Enough digits for crore amounts with many decimals.
getcontext().prec = 28


def round_half_up(x, places=0):
    """
    Round a number with ROUND_HALF_UP (2.5 → 3, -2.5 → -3).

    parameters:
    - x: float | int – value to round.
    - places: int – decimal places to keep (default = 0).

    returns:
    - int when places == 0, otherwise float.

    notes:
    - Python's round() uses banker's rounding, which would turn 12.5% into 12%.
    """
    q = Decimal(1) if places == 0 else Decimal(f"1e-{places}")
    d = Decimal(str(x)).quantize(q, ROUND_HALF_UP)
    return int(d) if places == 0 else float(d)


def round_to_total(weights, target):
    """
    Rescale whole-number weights so they sum exactly to an integer target.

    parameters:
    - weights: dict – e.g. {"Large Cap": 6, "Mid Cap": 5, "PMS": 10}.
    - target: int – the sum the rounded values must reach.

    returns:
    - dict – same keys, integer values summing to target.

    notes:
    - Each value is scaled by target / current total and rounded half-up.
    - The rounding residual goes to the largest bucket (first one on ties),
      so the total is exact.
    - An all-zero input is returned unchanged.
    """
    current = sum(weights.values())
    if current == 0 or not weights:
        return dict(weights)

    factor = Decimal(str(target)) / Decimal(str(current))
    out = {
        k: int((Decimal(str(v)) * factor).quantize(Decimal(1), ROUND_HALF_UP))
        for k, v in weights.items()
    }

    residual = int(target) - sum(out.values())
    if residual:
        largest = max(out, key=lambda k: out[k])
        out[largest] += residual
    return out
