"""
Servicio de facturas de venta

- Validación fiscal condicional (AFIP A/B/C vs. venta sin facturar)
- Alta con conciliación de cliente, copia de datos fiscales y totales
- Listado con filtros, actualización parcial y eliminación
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.common.documents import DocumentService
from app.common.exceptions import StoreFailure, ValidationError
from app.modules.contacts.service import ClientService
from app.modules.invoices.crud import InvoiceCrud
from app.modules.invoices.models import Invoice
from app.modules.invoices.schemas import (
    InvoiceCreate, InvoiceUpdate, InvoiceValidation, InvoiceValidationRequest
)
from app.modules.taxes.fiscal import requires_fiscal_data, validate_invoice_fiscal_data
from app.modules.taxes.schemas import InvoiceType

logger = logging.getLogger(__name__)


FISCAL_DATA_INVALID = "Faltan datos fiscales requeridos para facturas AFIP"
FISCAL_FIELDS = ("invoice_type", "point_of_sale", "invoice_number")
REQUIRED_FIELDS = ("invoice_type", "date", "payment_condition")


class InvoiceService(DocumentService):
    crud_class = InvoiceCrud
    party_service_class = ClientService
    party_field = "client"
    resource = "Factura"

    def check_fiscal_data(self, data: InvoiceValidationRequest) -> InvoiceValidation:
        """Previsualizar la validación fiscal sin guardar nada"""
        errors = validate_invoice_fiscal_data(
            data.invoice_type,
            data.point_of_sale,
            data.invoice_number,
            data.client_tax_id,
            data.client_tax_condition,
        )
        return InvoiceValidation(
            is_valid=not errors,
            requires_fiscal_data=requires_fiscal_data(data.invoice_type),
            errors=errors,
        )

    def validate_invoice_data(self, invoice_data: InvoiceCreate) -> None:
        """Lanza ValidationError con todos los campos fiscales faltantes"""
        errors = validate_invoice_fiscal_data(
            invoice_data.invoice_type,
            invoice_data.point_of_sale,
            invoice_data.invoice_number,
            invoice_data.client_tax_id,
            invoice_data.client_tax_condition,
        )
        if errors:
            raise ValidationError(FISCAL_DATA_INVALID, errors)

    def create_invoice(self, invoice_data: InvoiceCreate) -> Invoice:
        """
        Crear factura

        La validación fiscal corre antes de tocar la base. La conciliación
        del cliente nunca impide guardar la factura.
        """
        self.validate_invoice_data(invoice_data)

        data = self.assemble(
            invoice_data.fiscal_data(),
            invoice_data.client_id,
            invoice_data.items,
        )
        data.update({
            "invoice_type": invoice_data.invoice_type,
            "point_of_sale": invoice_data.point_of_sale,
            "invoice_number": invoice_data.invoice_number,
            "date": invoice_data.date,
            "payment_condition": invoice_data.payment_condition,
        })
        return self.save(data)

    def get_invoices(
        self,
        invoice_type: Optional[InvoiceType] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> dict:
        try:
            invoices, total = self.crud.get_filtered(
                invoice_type=invoice_type,
                date_from=date_from,
                date_to=date_to,
                limit=limit,
                offset=offset,
            )
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error al obtener facturas: {str(e)}")

        return {"items": invoices, "total": total, "limit": limit, "offset": offset}

    def get_invoice(self, invoice_id: UUID) -> Invoice:
        return self.get_or_404(invoice_id)

    def update_invoice(self, invoice_id: UUID, invoice_data: InvoiceUpdate) -> Invoice:
        """
        Actualizar factura

        - Si cambian los ítems se recalculan los totales en la misma escritura
        - Si cambia el tipo, punto de venta o número se revalidan los datos
          fiscales sobre el estado resultante
        """
        update_data = invoice_data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                update_data.pop(field)

        invoice = self.get_or_404(invoice_id)

        if any(field in update_data for field in FISCAL_FIELDS):
            self._validate_merged(invoice, update_data)

        if "items" in update_data:
            update_data.update(self.items_patch(invoice_data.items))

        return self.apply_update(invoice_id, update_data)

    def delete_invoice(self, invoice_id: UUID) -> None:
        self.delete(invoice_id)

    def _validate_merged(self, invoice: Invoice, update_data: dict) -> None:
        client = invoice.client or {}
        errors = validate_invoice_fiscal_data(
            update_data.get("invoice_type", invoice.invoice_type),
            update_data.get("point_of_sale", invoice.point_of_sale),
            update_data.get("invoice_number", invoice.invoice_number),
            client.get("tax_id"),
            client.get("tax_condition"),
        )
        if errors:
            raise ValidationError(FISCAL_DATA_INVALID, errors)
