"""
Servicio de órdenes de compra

Mismo armado que las facturas (conciliación de proveedor, copia de datos
fiscales y totales), sin validación fiscal condicional y con estado.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.common.documents import DocumentService
from app.common.exceptions import StoreFailure
from app.modules.contacts.service import SupplierService
from app.modules.purchase_orders.crud import PurchaseOrderCrud
from app.modules.purchase_orders.models import PurchaseOrder, PurchaseOrderStatus
from app.modules.purchase_orders.schemas import PurchaseOrderCreate, PurchaseOrderUpdate

logger = logging.getLogger(__name__)


REQUIRED_FIELDS = ("order_number", "date", "payment_condition", "status")


class PurchaseOrderService(DocumentService):
    crud_class = PurchaseOrderCrud
    party_service_class = SupplierService
    party_field = "supplier"
    resource = "Orden de compra"

    def create_purchase_order(self, order_data: PurchaseOrderCreate) -> PurchaseOrder:
        data = self.assemble(
            order_data.fiscal_data(),
            order_data.supplier_id,
            order_data.items,
        )
        data.update({
            "order_number": order_data.order_number,
            "date": order_data.date,
            "delivery_date": order_data.delivery_date,
            "payment_condition": order_data.payment_condition,
            "notes": order_data.notes,
            "status": order_data.status,
        })
        return self.save(data)

    def get_purchase_orders(
        self,
        status: Optional[PurchaseOrderStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> dict:
        try:
            orders, total = self.crud.get_filtered(
                status=status,
                date_from=date_from,
                date_to=date_to,
                limit=limit,
                offset=offset,
            )
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error al obtener órdenes de compra: {str(e)}")

        return {"items": orders, "total": total, "limit": limit, "offset": offset}

    def get_purchase_order(self, order_id: UUID) -> PurchaseOrder:
        return self.get_or_404(order_id)

    def update_purchase_order(self, order_id: UUID, order_data: PurchaseOrderUpdate) -> PurchaseOrder:
        """Actualización parcial. Si cambian los ítems se recalculan los totales"""
        update_data = order_data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                update_data.pop(field)

        if "items" in update_data:
            update_data.update(self.items_patch(order_data.items))

        return self.apply_update(order_id, update_data)

    def update_purchase_order_status(self, order_id: UUID, status: PurchaseOrderStatus) -> PurchaseOrder:
        order = self.apply_update(order_id, {"status": status})
        logger.info(f"Orden de compra {order_id} pasa a estado {status.value}")
        return order

    def delete_purchase_order(self, order_id: UUID) -> None:
        self.delete(order_id)
