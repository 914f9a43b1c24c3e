"""
Módulo de Facturación (Invoices)

- Facturas AFIP (A, B, C) y ventas sin facturar
- Conciliación automática del cliente al guardar
- Copia inmutable de los datos fiscales del cliente en cada factura
- Totales calculados a partir de los ítems
"""

from .models import Invoice
from .service import InvoiceService

__all__ = ["Invoice", "InvoiceService"]
