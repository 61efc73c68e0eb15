"""Conversions between öre (stored) and kronor (entered / displayed)."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

GROUP_SEPARATOR = "\u00a0"  # no-break space


def kr_to_ore(value: str | int | float | Decimal) -> int:
    """Parse a kronor amount ("8500", "8 500,50", 8500.5) into öre.

    Raises ValueError on input that is not a finite number.
    """
    if isinstance(value, str):
        value = value.strip().replace(GROUP_SEPARATOR, "").replace(" ", "").replace(",", ".")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not an amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not an amount: {value!r}")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def ore_to_kr(ore: int) -> Decimal:
    return (Decimal(ore) / 100).quantize(Decimal("0.01"))


def format_sek(ore: int) -> str:
    """Format öre the Swedish way, e.g. 123450 -> "1 234,50 kr".

    Thousands are grouped with a no-break space, as sv-SE locales do.
    """
    kr = ore_to_kr(ore or 0)
    sign = "-" if kr < 0 else ""
    whole, _, frac = f"{abs(kr):.2f}".partition(".")
    groups = []
    while whole:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]
    return f"{sign}{GROUP_SEPARATOR.join(groups)},{frac} kr"
