"""
Módulo de Contactos

Gestiona clientes y proveedores (datos fiscales argentinos: CUIT/CUIL/DNI y
condición frente al IVA) y la conciliación automática de contactos al
guardar facturas y órdenes de compra.

Componentes:
- models.py: modelos SQLAlchemy Client y Supplier
- schemas.py: esquemas Pydantic, datos fiscales y snapshot
- crud.py: acceso a datos (PartyCrud)
- reconciliation.py: alta, reutilización y completado implícito de contactos
- service.py: lógica de negocio del CRUD explícito
- router.py: endpoints /clients y /suppliers
- tests.py: pruebas unitarias y de integración
"""

from .models import Client, Supplier
from .schemas import PartyFiscalData, PartySnapshot
from .reconciliation import PartyReconciler, prefer_non_empty
from .service import ClientService, SupplierService

__all__ = [
    "Client",
    "Supplier",
    "PartyFiscalData",
    "PartySnapshot",
    "PartyReconciler",
    "prefer_non_empty",
    "ClientService",
    "SupplierService",
]
