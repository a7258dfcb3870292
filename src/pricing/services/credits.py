"""USD -> credits conversion and display formatting."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CREDITS_PER_USD = 211.0


def format_credits_from_usd(
    usd: float,
    decimals: int = 0,
    credits_per_usd: float = CREDITS_PER_USD,
) -> str:
    """
    Convert a USD amount to credits and format it with a fixed number of fraction digits.

    Rounds half away from zero and groups thousands with ",".

    Raises:
        ValueError: if usd is not a finite number.
    """
    try:
        credits = Decimal(repr(float(usd))) * Decimal(repr(float(credits_per_usd)))
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f"invalid usd amount: {usd!r}") from e
    if not credits.is_finite():
        raise ValueError(f"invalid usd amount: {usd!r}")
    try:
        rounded = credits.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"usd amount out of range: {usd!r}") from e
    if rounded == 0:
        rounded = abs(rounded)  # no "-0"
    return f"{rounded:,.{decimals}f}"
