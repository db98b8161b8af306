"""
Utilidad para formatear montos
Mismo formato en tickets de impresora y en tickets HTML
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation


def format_currency(amount):
    """
    Formatea un monto con agrupación argentina (es-AR).

    Miles con punto, decimales con coma, sin ceros decimales de sobra:
        15000    -> "$15.000"
        1234.5   -> "$1.234,5"
        99.99    -> "$99,99"

    Args:
        amount: número, string numérico o None

    Returns:
        str con el signo $ incluido
    """
    try:
        value = Decimal(str(amount if amount is not None else 0))
    except InvalidOperation:
        return f"${amount}"

    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    integer_part, _, decimal_part = f"{abs(value):.2f}".partition(".")

    grouped = f"{int(integer_part):,}".replace(",", ".")
    decimal_part = decimal_part.rstrip("0")

    if decimal_part:
        return f"{sign}${grouped},{decimal_part}"
    return f"{sign}${grouped}"


def to_float(amount, default=0.0):
    """Convierte montos que llegan como string o número"""
    if amount is None or amount == "":
        return default
    try:
        return float(str(amount).replace(",", "."))
    except ValueError:
        return default
