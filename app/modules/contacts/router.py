"""
Router para el módulo de Contactos

Endpoints REST para clientes y proveedores:
- CRUD completo
- Búsqueda por razón social o CUIT (máximo PARTY_SEARCH_LIMIT resultados)
"""

from fastapi import APIRouter, Path, Query, status
from uuid import UUID

from app.dependencies.dbDependecies import db_dependency, settings_dependency
from app.modules.contacts.service import ClientService, SupplierService
from app.modules.contacts.schemas import (
    ClientCreate, ClientUpdate, ClientOut, ClientList,
    SupplierCreate, SupplierUpdate, SupplierOut, SupplierList
)

clients_router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    responses={404: {"description": "Not found"}}
)

suppliers_router = APIRouter(
    prefix="/suppliers",
    tags=["Suppliers"],
    responses={404: {"description": "Not found"}}
)


# ===== CLIENTES =====

@clients_router.post("/", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(client_data: ClientCreate, db: db_dependency, settings: settings_dependency):
    """
    Crear un nuevo cliente

    - **name**: Razón social (requerido)
    - **tax_id**: CUIT/CUIL/DNI, 7 a 11 dígitos
    - **tax_condition**: Condición frente al IVA
    """
    return ClientService(db, settings.PARTY_SEARCH_LIMIT).create(client_data)


@clients_router.get("/", response_model=ClientList)
def get_clients(db: db_dependency, settings: settings_dependency):
    """Listar clientes ordenados por razón social"""
    clients = ClientService(db, settings.PARTY_SEARCH_LIMIT).get_all()
    return ClientList(items=clients, total=len(clients))


@clients_router.get("/search", response_model=ClientList)
def search_clients(
    db: db_dependency,
    settings: settings_dependency,
    q: str = Query(..., min_length=1, description="Razón social o CUIT"),
):
    """Buscar clientes por razón social o CUIT"""
    clients = ClientService(db, settings.PARTY_SEARCH_LIMIT).search(q)
    return ClientList(items=clients, total=len(clients))


@clients_router.get("/{client_id}", response_model=ClientOut)
def get_client(db: db_dependency, settings: settings_dependency, client_id: UUID = Path(..., description="ID del cliente")):
    return ClientService(db, settings.PARTY_SEARCH_LIMIT).get_by_id(client_id)


@clients_router.patch("/{client_id}", response_model=ClientOut)
def update_client(
    client_data: ClientUpdate,
    db: db_dependency,
    settings: settings_dependency,
    client_id: UUID = Path(..., description="ID del cliente"),
):
    """
    Actualizar un cliente existente

    Solo se actualizan los campos proporcionados.
    Las facturas ya emitidas conservan los datos del cliente al momento de su creación.
    """
    return ClientService(db, settings.PARTY_SEARCH_LIMIT).update(client_id, client_data)


@clients_router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(db: db_dependency, settings: settings_dependency, client_id: UUID = Path(..., description="ID del cliente")):
    ClientService(db, settings.PARTY_SEARCH_LIMIT).delete(client_id)


# ===== PROVEEDORES =====

@suppliers_router.post("/", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier(supplier_data: SupplierCreate, db: db_dependency, settings: settings_dependency):
    """
    Crear un nuevo proveedor

    - **name**: Razón social (requerido)
    - **contact_person**: Persona de contacto
    """
    return SupplierService(db, settings.PARTY_SEARCH_LIMIT).create(supplier_data)


@suppliers_router.get("/", response_model=SupplierList)
def get_suppliers(db: db_dependency, settings: settings_dependency):
    suppliers = SupplierService(db, settings.PARTY_SEARCH_LIMIT).get_all()
    return SupplierList(items=suppliers, total=len(suppliers))


@suppliers_router.get("/search", response_model=SupplierList)
def search_suppliers(
    db: db_dependency,
    settings: settings_dependency,
    q: str = Query(..., min_length=1, description="Razón social o CUIT"),
):
    suppliers = SupplierService(db, settings.PARTY_SEARCH_LIMIT).search(q)
    return SupplierList(items=suppliers, total=len(suppliers))


@suppliers_router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier(db: db_dependency, settings: settings_dependency, supplier_id: UUID = Path(..., description="ID del proveedor")):
    return SupplierService(db, settings.PARTY_SEARCH_LIMIT).get_by_id(supplier_id)


@suppliers_router.patch("/{supplier_id}", response_model=SupplierOut)
def update_supplier(
    supplier_data: SupplierUpdate,
    db: db_dependency,
    settings: settings_dependency,
    supplier_id: UUID = Path(..., description="ID del proveedor"),
):
    return SupplierService(db, settings.PARTY_SEARCH_LIMIT).update(supplier_id, supplier_data)


@suppliers_router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplier(db: db_dependency, settings: settings_dependency, supplier_id: UUID = Path(..., description="ID del proveedor")):
    SupplierService(db, settings.PARTY_SEARCH_LIMIT).delete(supplier_id)
