"""
Servicios de negocio para el módulo de Contactos

Implementa la lógica de negocio para:
- CRUD de clientes y proveedores
- Búsqueda por razón social o CUIT
- Conciliación de contactos usada por facturas y órdenes de compra
"""

import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Type
from uuid import UUID

from app.common.exceptions import NotFoundError, StoreFailure
from app.modules.contacts.crud import Party, PartyCrud
from app.modules.contacts.models import Client, Supplier
from app.modules.contacts.reconciliation import PartyReconciler
from app.modules.contacts.schemas import PartyBase, PartyUpdate

logger = logging.getLogger(__name__)


class PartyService:
    """Servicio base para clientes y proveedores"""

    model: Type[Party]
    resource: str
    kind: str

    def __init__(self, db: Session, search_limit: int = 20):
        self.db = db
        self.crud = PartyCrud(db, self.model, search_limit=search_limit)

    def reconciler(self) -> PartyReconciler:
        return PartyReconciler(self.crud, self.kind)

    def create(self, data: PartyBase) -> Party:
        """Crear contacto"""
        try:
            party = self.crud.create(data.model_dump())
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error creando {self.kind}: {str(e)}")

        logger.info(f"{self.resource} creado: {party.id}")
        return party

    def get_all(self) -> List[Party]:
        try:
            return self.crud.get_all()
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error listando {self.kind}s: {str(e)}")

    def search(self, query: str) -> List[Party]:
        if not query or not query.strip():
            return []
        try:
            return self.crud.search(query)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error buscando {self.kind}s: {str(e)}")

    def get_by_id(self, party_id: UUID) -> Party:
        try:
            party = self.crud.get_by_id(party_id)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error obteniendo {self.kind}: {str(e)}")

        if not party:
            raise NotFoundError(self.resource, party_id)
        return party

    def update(self, party_id: UUID, data: PartyUpdate) -> Party:
        """Actualizar contacto. Solo se actualizan los campos enviados"""
        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data and not update_data["name"]:
            update_data.pop("name")

        try:
            party = self.crud.update(party_id, update_data)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error actualizando {self.kind}: {str(e)}")

        if not party:
            raise NotFoundError(self.resource, party_id)

        logger.info(f"{self.resource} actualizado: {party_id}")
        return party

    def delete(self, party_id: UUID) -> None:
        """Eliminación física. Los documentos conservan su copia de datos"""
        try:
            deleted = self.crud.delete(party_id)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error eliminando {self.kind}: {str(e)}")

        if not deleted:
            raise NotFoundError(self.resource, party_id)

        logger.info(f"{self.resource} eliminado: {party_id}")


class ClientService(PartyService):
    model = Client
    resource = "Cliente"
    kind = "cliente"


class SupplierService(PartyService):
    model = Supplier
    resource = "Proveedor"
    kind = "proveedor"
