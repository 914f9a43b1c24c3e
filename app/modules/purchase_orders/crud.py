"""
CRUD operations para órdenes de compra
"""

from sqlalchemy import func
from typing import List, Optional, Sequence, Tuple
from datetime import date

from app.common.documents import DocumentCrud
from app.modules.purchase_orders.models import PurchaseOrder, PurchaseOrderStatus


class PurchaseOrderCrud(DocumentCrud):
    model = PurchaseOrder

    def get_all(self) -> List[PurchaseOrder]:
        """Órdenes por fecha descendente"""
        return self.db.query(PurchaseOrder).order_by(
            PurchaseOrder.date.desc(), PurchaseOrder.created_at.desc()
        ).all()

    def get_by_status(self, status: PurchaseOrderStatus) -> List[PurchaseOrder]:
        return self.db.query(PurchaseOrder).filter(
            PurchaseOrder.status == status
        ).order_by(PurchaseOrder.date.desc(), PurchaseOrder.created_at.desc()).all()

    def get_filtered(
        self,
        status: Optional[PurchaseOrderStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[PurchaseOrder], int]:
        query = self.db.query(PurchaseOrder)

        if status:
            query = query.filter(PurchaseOrder.status == status)
        if date_from:
            query = query.filter(PurchaseOrder.date >= date_from)
        if date_to:
            query = query.filter(PurchaseOrder.date <= date_to)

        query = query.order_by(PurchaseOrder.date.desc(), PurchaseOrder.created_at.desc())

        total = query.count()
        return query.offset(offset).limit(limit).all(), total

    # ===== AGREGADOS =====

    def count(self, exclude_statuses: Sequence[PurchaseOrderStatus] = ()) -> int:
        query = self.db.query(func.count(PurchaseOrder.id))
        if exclude_statuses:
            query = query.filter(PurchaseOrder.status.notin_(exclude_statuses))
        return query.scalar() or 0

    def sum_total(self, exclude_statuses: Sequence[PurchaseOrderStatus] = ()):
        """Suma de totales (0 si no hay órdenes)"""
        query = self.db.query(func.coalesce(func.sum(PurchaseOrder.total), 0))
        if exclude_statuses:
            query = query.filter(PurchaseOrder.status.notin_(exclude_statuses))
        return query.scalar()
