# tabsplit/money.py
"""
Fixed-point helpers.

All arithmetic inside the engine happens in integer cents so that folding
hundreds of expenses never drifts. Values cross the public boundary as
``Decimal`` rounded to two places.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, localcontext

CENT = Decimal("0.01")


def to_decimal(value):
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Not an amount: {value!r}")
    try:
        # str() first so 0.1 becomes Decimal("0.1"), not its binary expansion
        return Decimal(str(value))
    except InvalidOperation:
        raise TypeError(f"Not an amount: {value!r}") from None


def to_cents(value):
    value = to_decimal(value)
    with localcontext() as ctx:
        # room for every integer digit plus the two cent digits
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return int(value.quantize(CENT, rounding=ROUND_HALF_UP) * 100)


def fits_cents(value):
    """True when ``value`` can be held to the cent without overflowing the context."""
    try:
        to_decimal(value).quantize(CENT)
    except InvalidOperation:
        return False
    return True


def from_cents(cents):
    whole, part = divmod(abs(cents), 100)
    return Decimal(f"{'-' if cents < 0 else ''}{whole}.{part:02d}")


def allocate(total_cents, weights):
    """
    Split ``total_cents`` proportionally to ``weights`` with no cent lost.

    Every slot gets the floor of its exact share; the leftover cents go one
    each to the slots with the largest fractional remainder, earlier slots
    first on ties. 100 cents over three equal weights gives 34, 33, 33.
    """
    weights = [to_decimal(w) for w in weights]
    weight_sum = sum(weights, Decimal(0))
    if not weights or weight_sum <= 0:
        return [0] * len(weights)

    with localcontext() as ctx:
        # keep every integer digit of the largest share plus a remainder to rank
        ctx.prec = max(ctx.prec, len(str(abs(total_cents))) + 12)
        exact = [Decimal(total_cents) * w / weight_sum for w in weights]
        floors = [int(e) for e in exact]
    leftover = total_cents - sum(floors)

    by_remainder = sorted(range(len(exact)), key=lambda i: (-(exact[i] - floors[i]), i))
    for i in by_remainder[:leftover]:
        floors[i] += 1
    return floors


# Balances closer to zero than this count as settled.
DEFAULT_TOLERANCE = CENT
