"""
Reglas de validación fiscal condicionales

Las facturas AFIP (A, B, C) exigen punto de venta, número de comprobante,
CUIT de 11 dígitos y condición frente al IVA del cliente. Las ventas sin
facturar no exigen ninguno de esos datos.
"""

from typing import Dict, Optional

from app.common.validators import validate_afip_tax_id
from app.modules.taxes.schemas import InvoiceType, TaxCondition


POINT_OF_SALE_REQUIRED = "El punto de venta es requerido para facturas AFIP"
INVOICE_NUMBER_REQUIRED = "El número de factura es requerido para facturas AFIP"
CLIENT_TAX_ID_INVALID = "El CUIT debe tener 11 dígitos para facturas AFIP"
CLIENT_TAX_CONDITION_REQUIRED = "La condición frente al IVA es requerida para facturas AFIP"


def requires_fiscal_data(invoice_type) -> bool:
    """True para comprobantes AFIP, False para ventas sin facturar."""
    return InvoiceType(invoice_type) != InvoiceType.UNBILLED


def validate_invoice_fiscal_data(
    invoice_type,
    point_of_sale: Optional[str],
    invoice_number: Optional[str],
    client_tax_id: Optional[str],
    client_tax_condition: Optional[TaxCondition],
) -> Dict[str, str]:
    """
    Validar los datos fiscales requeridos según el tipo de comprobante

    Cada campo se valida por separado: se reportan todos los errores
    juntos, sin cortar en el primero.

    Returns:
        Diccionario campo -> mensaje. Vacío si los datos son válidos.
    """
    errors: Dict[str, str] = {}

    if not requires_fiscal_data(invoice_type):
        return errors

    if not (point_of_sale or "").strip():
        errors["point_of_sale"] = POINT_OF_SALE_REQUIRED
    if not (invoice_number or "").strip():
        errors["invoice_number"] = INVOICE_NUMBER_REQUIRED
    if not validate_afip_tax_id((client_tax_id or "").strip()):
        errors["client_tax_id"] = CLIENT_TAX_ID_INVALID
    if not client_tax_condition:
        errors["client_tax_condition"] = CLIENT_TAX_CONDITION_REQUIRED

    return errors


def has_enough_data_to_create_party(
    name: Optional[str],
    tax_id: Optional[str],
    tax_condition: Optional[TaxCondition],
    require_fiscal: bool = True,
) -> bool:
    """
    Indica si el formulario tiene datos suficientes para intentar dar de alta
    un cliente/proveedor: nombre y, si se exigen datos fiscales, CUIT o
    condición frente al IVA. Es una condición previa, no una validación final.
    """
    if not (name or "").strip():
        return False
    if not require_fiscal:
        return True
    return bool((tax_id or "").strip() or tax_condition)
