"""
KWD money helpers.

Amounts are carried as integer fils (1 KWD = 1000 fils) everywhere inside the
service and in the database. Decimal strings such as ``"42.750"`` only exist
at the HTTP boundary, and ``"KD 42.750"`` is the display form.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

FILS_PER_DINAR = 1000
CURRENCY_PREFIX = "KD"

_ONE_FILS = Decimal(1)


def to_fils(value: str | int | Decimal | None) -> int:
    """
    Converts a dinar amount ("450", "450.00", "42.750") to fils.

    Sub-fils precision is rounded half-up. Raises ValueError for anything that
    is not a finite number.
    """
    if value is None or value == "":
        return 0
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return int((amount * FILS_PER_DINAR).quantize(_ONE_FILS, rounding=ROUND_HALF_UP))


def to_kwd(fils: int | None) -> str:
    """Renders fils as a dinar decimal string with exactly 3 fractional digits."""
    fils = int(fils or 0)
    sign = "-" if fils < 0 else ""
    whole, frac = divmod(abs(fils), FILS_PER_DINAR)
    return f"{sign}{whole}.{frac:03d}"


def format_currency(fils: int | None) -> str:
    return f"{CURRENCY_PREFIX} {to_kwd(fils)}"


def parse_currency(text: str | None) -> int:
    """Parses "KD 42.750" (or a bare "42.750") back into fils."""
    if text is None:
        return 0
    cleaned = text.strip()
    if cleaned[: len(CURRENCY_PREFIX)].upper() == CURRENCY_PREFIX:
        cleaned = cleaned[len(CURRENCY_PREFIX):].strip()
    return to_fils(cleaned)


def percentage_of(fils: int, percent: Decimal) -> int:
    """Returns ``percent``% of ``fils`` rounded half-up to a whole fils."""
    share = Decimal(fils) * percent / 100
    return int(share.quantize(_ONE_FILS, rounding=ROUND_HALF_UP))
