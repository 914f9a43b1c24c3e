"""
Módulo de Órdenes de Compra

Órdenes a proveedores con estado (Pendiente, En Proceso, Completada,
Cancelada), conciliación automática del proveedor y totales calculados.
"""

from .models import PurchaseOrder, PurchaseOrderStatus
from .service import PurchaseOrderService

__all__ = ["PurchaseOrder", "PurchaseOrderStatus", "PurchaseOrderService"]
