# app/core/pricing.py
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def to_money(amount: Decimal | int | float | str) -> Decimal:
    """Quantize any numeric input to cents (half-up)."""
    if isinstance(amount, float):
        amount = str(amount)
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_price(amount: Decimal | int | float | str, currency: str = "USD") -> str:
    """
    Render a monetary amount for display, en-US style.

    Examples:
        format_price(Decimal("9"))        -> "$9.00"
        format_price(1234.5)              -> "$1,234.50"
        format_price(-1.5)                -> "-$1.50"
        format_price(3, currency="CHF")   -> "CHF 3.00"
    """
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,.2f}"

    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{sign}{currency.upper()} {digits}"
    return f"{sign}{symbol}{digits}"
