"""
Router para facturas de venta
"""

from fastapi import APIRouter, Path, Query, status
from typing import Optional
from uuid import UUID
from datetime import date

from app.dependencies.dbDependecies import db_dependency, settings_dependency
from app.modules.invoices.service import InvoiceService
from app.modules.invoices.schemas import (
    InvoiceCreate, InvoiceUpdate, InvoiceOut, InvoiceList,
    InvoiceValidationRequest, InvoiceValidation
)
from app.modules.taxes.schemas import InvoiceType

invoices_router = APIRouter(prefix="/invoices", tags=["Invoices"])


@invoices_router.post("/", response_model=InvoiceOut, status_code=status.HTTP_201_CREATED)
def create_invoice(invoice_data: InvoiceCreate, db: db_dependency, settings: settings_dependency):
    """
    Crear una nueva factura de venta

    Facturas A, B y C exigen punto de venta, número, CUIT de 11 dígitos y
    condición frente al IVA del cliente. Si el cliente no existe se da de
    alta automáticamente; si existe se completa con los datos enviados.
    """
    service = InvoiceService(db, settings)
    return service.create_invoice(invoice_data)


@invoices_router.post("/validate", response_model=InvoiceValidation)
def validate_invoice(data: InvoiceValidationRequest, db: db_dependency, settings: settings_dependency):
    """Validar datos fiscales sin guardar la factura"""
    return InvoiceService(db, settings).check_fiscal_data(data)


@invoices_router.get("/", response_model=InvoiceList)
def list_invoices(
    db: db_dependency,
    settings: settings_dependency,
    invoice_type: Optional[InvoiceType] = Query(None, description="A, B, C o Unbilled"),
    date_from: Optional[date] = Query(None, description="Fecha inicial (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Fecha final (YYYY-MM-DD)"),
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
):
    """Listar facturas, más recientes primero"""
    limit = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    service = InvoiceService(db, settings)
    return service.get_invoices(invoice_type, date_from, date_to, limit, offset)


@invoices_router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(db: db_dependency, settings: settings_dependency, invoice_id: UUID = Path(..., description="ID de la factura")):
    return InvoiceService(db, settings).get_invoice(invoice_id)


@invoices_router.patch("/{invoice_id}", response_model=InvoiceOut)
def update_invoice(
    invoice_data: InvoiceUpdate,
    db: db_dependency,
    settings: settings_dependency,
    invoice_id: UUID = Path(..., description="ID de la factura"),
):
    """
    Actualizar una factura

    Si se envían ítems se recalculan subtotal, IVA y total.
    Los datos del cliente guardados en la factura no se modifican.
    """
    return InvoiceService(db, settings).update_invoice(invoice_id, invoice_data)


@invoices_router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(db: db_dependency, settings: settings_dependency, invoice_id: UUID = Path(..., description="ID de la factura")):
    InvoiceService(db, settings).delete_invoice(invoice_id)
