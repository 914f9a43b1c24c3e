"""
CRUD operations para facturas
"""

from sqlalchemy import func
from typing import List, Optional, Tuple
from datetime import date

from app.common.documents import DocumentCrud
from app.modules.invoices.models import Invoice
from app.modules.taxes.schemas import InvoiceType


class InvoiceCrud(DocumentCrud):
    model = Invoice

    def get_all(self) -> List[Invoice]:
        """Facturas más recientes primero"""
        return self.db.query(Invoice).order_by(Invoice.created_at.desc()).all()

    def get_by_type(self, invoice_type: InvoiceType) -> List[Invoice]:
        return self.db.query(Invoice).filter(
            Invoice.invoice_type == invoice_type
        ).order_by(Invoice.created_at.desc()).all()

    def get_filtered(
        self,
        invoice_type: Optional[InvoiceType] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Invoice], int]:
        """Listado con filtros combinables. Devuelve (página, total)"""
        query = self.db.query(Invoice)

        if invoice_type:
            query = query.filter(Invoice.invoice_type == invoice_type)
        if date_from:
            query = query.filter(Invoice.date >= date_from)
        if date_to:
            query = query.filter(Invoice.date <= date_to)

        if date_from or date_to:
            query = query.order_by(Invoice.date.desc(), Invoice.created_at.desc())
        else:
            query = query.order_by(Invoice.created_at.desc())

        total = query.count()
        return query.offset(offset).limit(limit).all(), total

    # ===== AGREGADOS =====

    def count(self) -> int:
        return self.db.query(func.count(Invoice.id)).scalar() or 0

    def sum_total(self, date_from: Optional[date] = None, date_to: Optional[date] = None):
        """Suma de totales (0 si no hay facturas)"""
        query = self.db.query(func.coalesce(func.sum(Invoice.total), 0))
        if date_from:
            query = query.filter(Invoice.date >= date_from)
        if date_to:
            query = query.filter(Invoice.date <= date_to)
        return query.scalar()
