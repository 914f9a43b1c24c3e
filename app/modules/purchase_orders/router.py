"""
Router para órdenes de compra
"""

from fastapi import APIRouter, Path, Query, status
from typing import Optional
from uuid import UUID
from datetime import date

from app.dependencies.dbDependecies import db_dependency, settings_dependency
from app.modules.purchase_orders.models import PurchaseOrderStatus
from app.modules.purchase_orders.service import PurchaseOrderService
from app.modules.purchase_orders.schemas import (
    PurchaseOrderCreate, PurchaseOrderUpdate, PurchaseOrderStatusUpdate,
    PurchaseOrderOut, PurchaseOrderList
)

purchase_orders_router = APIRouter(prefix="/purchase-orders", tags=["Purchase Orders"])


@purchase_orders_router.post("/", response_model=PurchaseOrderOut, status_code=status.HTTP_201_CREATED)
def create_purchase_order(order_data: PurchaseOrderCreate, db: db_dependency, settings: settings_dependency):
    """
    Crear una orden de compra

    Si el proveedor no existe se da de alta automáticamente.
    El estado inicial por defecto es Pendiente.
    """
    return PurchaseOrderService(db, settings).create_purchase_order(order_data)


@purchase_orders_router.get("/", response_model=PurchaseOrderList)
def list_purchase_orders(
    db: db_dependency,
    settings: settings_dependency,
    order_status: Optional[PurchaseOrderStatus] = Query(None, alias="status", description="Pendiente, En Proceso, Completada, Cancelada"),
    date_from: Optional[date] = Query(None, description="Fecha inicial (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Fecha final (YYYY-MM-DD)"),
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
):
    limit = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    service = PurchaseOrderService(db, settings)
    return service.get_purchase_orders(order_status, date_from, date_to, limit, offset)


@purchase_orders_router.get("/{order_id}", response_model=PurchaseOrderOut)
def get_purchase_order(db: db_dependency, settings: settings_dependency, order_id: UUID = Path(..., description="ID de la orden")):
    return PurchaseOrderService(db, settings).get_purchase_order(order_id)


@purchase_orders_router.patch("/{order_id}", response_model=PurchaseOrderOut)
def update_purchase_order(
    order_data: PurchaseOrderUpdate,
    db: db_dependency,
    settings: settings_dependency,
    order_id: UUID = Path(..., description="ID de la orden"),
):
    """Actualizar una orden de compra. Si se envían ítems se recalculan los totales."""
    return PurchaseOrderService(db, settings).update_purchase_order(order_id, order_data)


@purchase_orders_router.patch("/{order_id}/status", response_model=PurchaseOrderOut)
def update_purchase_order_status(
    status_data: PurchaseOrderStatusUpdate,
    db: db_dependency,
    settings: settings_dependency,
    order_id: UUID = Path(..., description="ID de la orden"),
):
    """Cambiar el estado de una orden de compra"""
    return PurchaseOrderService(db, settings).update_purchase_order_status(order_id, status_data.status)


@purchase_orders_router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase_order(db: db_dependency, settings: settings_dependency, order_id: UUID = Path(..., description="ID de la orden")):
    PurchaseOrderService(db, settings).delete_purchase_order(order_id)
