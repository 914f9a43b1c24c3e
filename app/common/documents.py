"""
Armado de documentos (facturas y órdenes de compra)

Pasos al crear un documento:
1. Conciliar el contacto (cliente o proveedor) para obtener su id
2. Tomar la copia de datos fiscales tal como vinieron en el formulario
3. Calcular subtotal, IVA y total a partir de los ítems
4. Guardar el documento

Las actualizaciones que cambian los ítems recalculan los totales en la
misma escritura.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Type
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import Settings, settings as default_settings
from app.common.exceptions import NotFoundError, StoreFailure, ValidationError
from app.modules.contacts.schemas import PartyFiscalData, PartySnapshot
from app.modules.contacts.service import PartyService
from app.modules.taxes.calculator import document_totals
from app.modules.taxes.schemas import LineItem

logger = logging.getLogger(__name__)


ITEMS_REQUIRED = "Debe haber al menos un item"


def serialize_items(items: List[LineItem]) -> List[Dict[str, Any]]:
    """Ítems como JSON (los decimales se guardan como texto)."""
    return [item.model_dump(mode="json") for item in items]


def totals_fields(items: List[LineItem]) -> Dict[str, Any]:
    totals = document_totals(items)
    return {
        "subtotal": totals.subtotal,
        "tax": totals.tax,
        "total": totals.total,
    }


class DocumentCrud:
    """Operaciones CRUD comunes a facturas y órdenes de compra"""

    model = None

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: dict):
        document = self.model(**data)
        self.db.add(document)
        self._commit()
        self.db.refresh(document)
        return document

    def get_by_id(self, document_id: UUID):
        return self.db.query(self.model).filter(self.model.id == document_id).first()

    def get_by_date_range(self, start: date, end: date) -> List:
        """Documentos con fecha entre start y end (inclusive), más recientes primero"""
        return self.db.query(self.model).filter(
            self.model.date >= start,
            self.model.date <= end
        ).order_by(self.model.date.desc(), self.model.created_at.desc()).all()

    def update(self, document_id: UUID, update_data: dict):
        document = self.get_by_id(document_id)
        if not document:
            return None

        for field, value in update_data.items():
            setattr(document, field, value)

        self._commit()
        self.db.refresh(document)
        return document

    def delete(self, document_id: UUID) -> bool:
        document = self.get_by_id(document_id)
        if not document:
            return False

        self.db.delete(document)
        self._commit()
        return True

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise


class DocumentService:
    """
    Base de los servicios de facturas y órdenes de compra.

    Las subclases definen el CRUD, el servicio de contactos a conciliar y el
    nombre del campo del contacto en el documento ("client" o "supplier").
    """

    crud_class: Type[DocumentCrud]
    party_service_class: Type[PartyService]
    party_field: str
    resource: str

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self.crud = self.crud_class(db)
        self.parties = self.party_service_class(db, self.settings.PARTY_SEARCH_LIMIT)

    # ===== ARMADO =====

    def resolve_party(self, fiscal: PartyFiscalData, party_id: Optional[UUID]) -> Optional[UUID]:
        """Id final del contacto. Con la conciliación desactivada se usa el id del formulario."""
        if not self.settings.AUTO_RECONCILE_PARTIES:
            return party_id
        return self.parties.reconciler().reconcile(fiscal, party_id)

    def assemble(
        self,
        fiscal: PartyFiscalData,
        party_id: Optional[UUID],
        items: List[LineItem],
    ) -> Dict[str, Any]:
        """
        Campos de contacto, ítems y totales de un documento nuevo

        La copia se arma con los datos del formulario, no con los guardados
        en el contacto, para reflejar lo que el usuario vio al guardar.
        """
        if not items:
            raise ValidationError(ITEMS_REQUIRED, {"items": ITEMS_REQUIRED})

        resolved_id = self.resolve_party(fiscal, party_id)
        snapshot = PartySnapshot.from_fiscal_data(fiscal, resolved_id)

        data = {
            f"{self.party_field}_id": resolved_id,
            self.party_field: snapshot.model_dump(mode="json"),
            "items": serialize_items(items),
        }
        data.update(totals_fields(items))
        return data

    def items_patch(self, items: Optional[List[LineItem]]) -> Dict[str, Any]:
        """Ítems y totales recalculados para una actualización"""
        if not items:
            raise ValidationError(ITEMS_REQUIRED, {"items": ITEMS_REQUIRED})

        patch = {"items": serialize_items(items)}
        patch.update(totals_fields(items))
        return patch

    # ===== PERSISTENCIA =====

    def save(self, data: Dict[str, Any]):
        try:
            document = self.crud.create(data)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error al crear {self.resource.lower()}: {str(e)}")

        logger.info(f"{self.resource} creada: {document.id}")
        return document

    def get_or_404(self, document_id: UUID):
        try:
            document = self.crud.get_by_id(document_id)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error al obtener {self.resource.lower()}: {str(e)}")

        if not document:
            raise NotFoundError(self.resource, document_id)
        return document

    def apply_update(self, document_id: UUID, update_data: Dict[str, Any]):
        try:
            document = self.crud.update(document_id, update_data)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error al actualizar {self.resource.lower()}: {str(e)}")

        if not document:
            raise NotFoundError(self.resource, document_id)

        logger.info(f"{self.resource} actualizada: {document_id}")
        return document

    def delete(self, document_id: UUID) -> None:
        """Eliminación física por id"""
        try:
            deleted = self.crud.delete(document_id)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Error al eliminar {self.resource.lower()}: {str(e)}")

        if not deleted:
            raise NotFoundError(self.resource, document_id)

        logger.info(f"{self.resource} eliminada: {document_id}")
