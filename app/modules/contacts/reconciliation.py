"""
Conciliación de clientes y proveedores al guardar un documento

Al crear una factura u orden de compra, el formulario puede traer el id de
un contacto existente, solo su razón social, o ambos. Este módulo decide si
hay que reutilizar, completar o dar de alta el contacto:

1. Con id: se busca el contacto. Si existe, se completa con los datos del
   formulario y se usa ese id. Si no existe, se sigue como si no hubiera id.
2. Sin id y con razón social: se busca por razón social (exacta, sin
   distinguir mayúsculas) y luego por CUIT. Si aparece, se reutiliza y se
   completa. Si no, se da de alta.
3. Sin id ni razón social: el documento queda sin contacto vinculado.

Los errores de base de datos en cualquiera de estos pasos se registran, se
hace rollback de la sesión y se descartan: el documento se guarda igual con
el id resuelto hasta ese momento.

La búsqueda seguida de alta no es atómica: dos documentos simultáneos para
una razón social nueva pueden crear dos contactos.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.common.exceptions import ReconciliationFailure
from app.modules.contacts.crud import Party, PartyCrud
from app.modules.contacts.schemas import PartyFiscalData

logger = logging.getLogger(__name__)


ENRICHABLE_FIELDS = ("tax_id", "tax_condition", "address")


def prefer_non_empty(form_value, existing_value):
    """El valor del formulario gana salvo que esté vacío; nunca se borra lo guardado."""
    if isinstance(form_value, str):
        form_value = form_value.strip()
    if form_value:
        return form_value
    return existing_value


def needs_enrichment(party: Party, fiscal: PartyFiscalData) -> bool:
    """True si el formulario trae algún dato fiscal faltante o distinto al guardado"""
    for field in ENRICHABLE_FIELDS:
        form_value = getattr(fiscal, field)
        if not form_value:
            continue
        stored_value = getattr(party, field)
        if not stored_value or stored_value != form_value:
            return True
    return False


def enrichment_patch(party: Party, fiscal: PartyFiscalData) -> dict:
    return {
        field: prefer_non_empty(getattr(fiscal, field), getattr(party, field))
        for field in ENRICHABLE_FIELDS
    }


class PartyReconciler:
    """Resuelve el contacto final de un documento"""

    def __init__(self, crud: PartyCrud, kind: str):
        self.crud = crud
        self.kind = kind

    def reconcile(self, fiscal: PartyFiscalData, party_id: Optional[UUID] = None) -> Optional[UUID]:
        """
        Resolver el id de contacto para el documento

        Args:
            fiscal: Datos fiscales tipeados en el formulario
            party_id: Id de contacto elegido en el formulario (opcional)

        Returns:
            Id del contacto reutilizado o creado, o None si no se pudo vincular
        """
        if party_id:
            try:
                existing = self.crud.get_by_id(party_id)
            except SQLAlchemyError as e:
                self._log_failure(fiscal, e)
                return party_id

            if existing:
                self._enrich(existing, fiscal)
                return existing.id

            logger.info(f"{self.kind} {party_id} no existe, se concilia por razón social")

        if not fiscal.name:
            return None

        try:
            existing = self._find_match(fiscal)
        except SQLAlchemyError as e:
            self._log_failure(fiscal, e)
            return None

        if existing:
            logger.info(f"Reutilizando {self.kind} existente {existing.id} ({existing.name})")
            self._enrich(existing, fiscal)
            return existing.id

        try:
            created = self.crud.create({
                "name": fiscal.name,
                "tax_id": fiscal.tax_id,
                "tax_condition": fiscal.tax_condition,
                "address": fiscal.address,
            })
        except SQLAlchemyError as e:
            self._log_failure(fiscal, e)
            return None

        logger.info(f"Alta automática de {self.kind} {created.id} ({created.name})")
        return created.id

    def _find_match(self, fiscal: PartyFiscalData) -> Optional[Party]:
        existing = self.crud.get_by_name(fiscal.name)
        if not existing and fiscal.tax_id:
            existing = self.crud.get_by_tax_id(fiscal.tax_id)
        return existing

    def _enrich(self, party: Party, fiscal: PartyFiscalData) -> None:
        if not needs_enrichment(party, fiscal):
            return

        try:
            self.crud.update(party.id, enrichment_patch(party, fiscal))
        except SQLAlchemyError as e:
            self._log_failure(fiscal, e)
            return

        logger.info(f"{self.kind} {party.id} completado con datos del documento")

    def _log_failure(self, fiscal: PartyFiscalData, error: Exception) -> None:
        self.crud.rollback()
        failure = ReconciliationFailure(self.kind, fiscal.name, error)
        logger.warning(failure.message)
