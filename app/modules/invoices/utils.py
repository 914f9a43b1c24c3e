"""
Utilidades para mostrar facturas
"""
from decimal import Decimal, ROUND_HALF_UP

from app.modules.taxes.schemas import InvoiceType


INVOICE_TYPE_LABELS = {
    InvoiceType.A: "Factura A",
    InvoiceType.B: "Factura B",
    InvoiceType.C: "Factura C",
    InvoiceType.UNBILLED: "Sin facturar",
}


def _is_unbilled(invoice_type) -> bool:
    return invoice_type in (InvoiceType.UNBILLED, InvoiceType.UNBILLED.value)


def get_invoice_type_label(invoice_type) -> str:
    """Etiqueta del tipo de comprobante. Devuelve el valor tal cual si no se conoce."""
    try:
        return INVOICE_TYPE_LABELS[InvoiceType(invoice_type)]
    except ValueError:
        return str(invoice_type)


def get_invoice_number(invoice) -> str:
    """
    Número visible de la factura: "0001-00000001", o "-" si es una venta sin facturar
    """
    if _is_unbilled(invoice.invoice_type):
        return "-"
    return f"{invoice.point_of_sale or ''}-{invoice.invoice_number or ''}"


def get_invoice_label(invoice) -> str:
    """Ej: "Factura A 0001-00000001" o "Venta sin facturar"."""
    if _is_unbilled(invoice.invoice_type):
        return "Venta sin facturar"
    return f"{get_invoice_type_label(invoice.invoice_type)} {get_invoice_number(invoice)}"


def format_currency(amount, symbol: str = "$") -> str:
    """
    Formatear importe con separador de miles y 2 decimales

    Ejemplo: format_currency(1234.5) -> "$1,234.50"
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{symbol}{value:,.2f}"
