"""
Cálculo de subtotales, IVA y totales de documentos

Funciones puras compartidas por facturas y órdenes de compra.
El redondeo a 2 decimales se hace una sola vez sobre los acumulados,
nunca por ítem.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Dict

from app.modules.taxes.schemas import LineItem, TaxRate, Totals


TWO_PLACES = Decimal('0.01')
HUNDRED = Decimal('100')


def round2(amount: Decimal) -> Decimal:
    """
    Redondear a 2 decimales usando ROUND_HALF_UP (redondeo comercial)
    """
    return Decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def numeric_tax_rate(tax_rate) -> Decimal:
    """Alícuota como número (21 para 21%)."""
    return TaxRate(tax_rate).percentage


def item_subtotal(item: LineItem) -> Decimal:
    """cantidad * precio unitario, sin redondear"""
    return item.quantity * item.unit_price


def item_tax(item: LineItem) -> Decimal:
    """IVA del ítem, sin redondear"""
    return item_subtotal(item) * numeric_tax_rate(item.tax_rate) / HUNDRED


def item_total(item: LineItem) -> Decimal:
    return item_subtotal(item) + item_tax(item)


def document_totals(items: Iterable[LineItem]) -> Totals:
    """
    Calcular totales de un documento

    Args:
        items: Ítems del documento. Una lista vacía devuelve todo en cero.

    Returns:
        Totals con subtotal, tax y total redondeados. El total es la suma
        de subtotal y tax ya redondeados, por lo que total == subtotal + tax.
    """
    raw_subtotal = Decimal('0')
    raw_tax = Decimal('0')

    for item in items:
        raw_subtotal += item_subtotal(item)
        raw_tax += item_tax(item)

    subtotal = round2(raw_subtotal)
    tax = round2(raw_tax)

    return Totals(subtotal=subtotal, tax=tax, total=round2(subtotal + tax))


def tax_rate_catalog() -> List[Dict]:
    """
    Alícuotas de IVA disponibles
    Útil para interfaces de usuario
    """
    names = {
        TaxRate.EXEMPT: "IVA 0% (exento)",
        TaxRate.REDUCED: "IVA 10,5%",
        TaxRate.GENERAL: "IVA 21%",
    }
    return [
        {"code": rate, "name": names[rate], "rate": rate.percentage}
        for rate in TaxRate
    ]
