from decimal import Decimal, ROUND_HALF_UP

from utils.localizator import Localizator


def format_cart_price(amount: Decimal | int | float, currency: str = "TRY") -> str:
    """
    Format an amount the way the Turkish menu shows prices.

    Two decimals, "." as thousands separator, "," as decimal separator,
    currency symbol appended.

    Examples:
        >>> format_cart_price(Decimal("1234.5"))
        '1.234,50 ₺'
        >>> format_cart_price(Decimal("-7"), "EUR")
        '-7,00 €'
    """
    quantized = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    integer_part, fraction_part = f"{abs(quantized):.2f}".split(".")
    grouped = f"{int(integer_part):,}".replace(",", ".")
    return f"{sign}{grouped},{fraction_part} {Localizator.get_currency_symbol(currency)}"
