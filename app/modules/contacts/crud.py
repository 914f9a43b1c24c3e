"""
CRUD operations para clientes y proveedores

Cada escritura confirma (commit) por su cuenta. Ante un error de base de
datos se hace rollback y se relanza el error de SQLAlchemy: quien llama
decide si lo propaga (CRUD explícito) o lo descarta (conciliación).
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import or_, func
from typing import List, Optional, Type, Union
from uuid import UUID

from app.modules.contacts.models import Client, Supplier


Party = Union[Client, Supplier]


class PartyCrud:
    """Operaciones CRUD para una colección de contactos (clients o suppliers)"""

    def __init__(self, db: Session, model: Type[Party], search_limit: int = 20):
        self.db = db
        self.model = model
        self.search_limit = search_limit

    def create(self, data: dict) -> Party:
        """Crear contacto"""
        party = self.model(**data)
        self.db.add(party)
        self._commit()
        self.db.refresh(party)
        return party

    def get_by_id(self, party_id: UUID) -> Optional[Party]:
        """Obtener contacto por ID"""
        return self.db.query(self.model).filter(self.model.id == party_id).first()

    def get_by_name(self, name: str) -> Optional[Party]:
        """Coincidencia exacta de razón social, sin distinguir mayúsculas"""
        name = (name or "").strip()
        if not name:
            return None
        return self.db.query(self.model).filter(
            func.lower(func.trim(self.model.name)) == func.lower(name)
        ).order_by(self.model.created_at).first()

    def get_by_tax_id(self, tax_id: str) -> Optional[Party]:
        """Coincidencia exacta de CUIT/CUIL/DNI"""
        if not tax_id:
            return None
        return self.db.query(self.model).filter(
            self.model.tax_id == tax_id
        ).order_by(self.model.created_at).first()

    def get_all(self) -> List[Party]:
        """Listar contactos ordenados por razón social"""
        return self.db.query(self.model).order_by(self.model.name).all()

    def search(self, query: str) -> List[Party]:
        """Búsqueda por razón social o CUIT (subcadena, sin distinguir mayúsculas)"""
        search_term = f"%{query.strip()}%"
        return self.db.query(self.model).filter(
            or_(
                self.model.name.ilike(search_term),
                self.model.tax_id.ilike(search_term)
            )
        ).order_by(self.model.name).limit(self.search_limit).all()

    def count(self) -> int:
        return self.db.query(func.count(self.model.id)).scalar() or 0

    def update(self, party_id: UUID, update_data: dict) -> Optional[Party]:
        """Actualizar contacto. None si no existe"""
        party = self.get_by_id(party_id)
        if not party:
            return None

        for field, value in update_data.items():
            if hasattr(party, field):
                setattr(party, field, value)

        self._commit()
        self.db.refresh(party)
        return party

    def delete(self, party_id: UUID) -> bool:
        """Eliminación física. False si no existe"""
        party = self.get_by_id(party_id)
        if not party:
            return False

        self.db.delete(party)
        self._commit()
        return True

    def rollback(self) -> None:
        """Descartar la transacción en curso tras un error de lectura"""
        self.db.rollback()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
