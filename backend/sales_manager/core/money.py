"""
Utility monetarie
Progetto: Sales Manager (Gestione Vendite)

Tutti gli importi sono Decimal arrotondati al centesimo (ROUND_HALF_UP).
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Number) -> Decimal:
    """
    Converte un valore in Decimal arrotondato al centesimo.

    I float vengono convertiti passando da str per evitare
    la rappresentazione binaria.
    """
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Number]) -> Decimal:
    """Somma una sequenza di importi senza deriva in virgola mobile."""
    total = ZERO
    for value in values:
        total += to_money(value)
    return to_money(total)


def percentage_change(current: Decimal, previous: Decimal) -> Decimal:
    """
    Variazione percentuale tra due importi, arrotondata a un decimale.

    Restituisce 0 quando il valore precedente è 0.
    """
    if previous == 0:
        return Decimal("0.0")
    change = (current - previous) / previous * Decimal("100")
    return change.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def format_currency(amount: Number, currency: str = "DZD") -> str:
    """
    Formatta un importo con separatore delle migliaia e codice valuta.

    Example:
        >>> format_currency(Decimal("1234.5"), "DZD")
        '1,234.50 DZD'
    """
    return f"{to_money(amount):,.2f} {currency}"
