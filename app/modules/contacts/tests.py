"""
Tests para el módulo de Contactos

Cubren:
- Regla "gana el formulario salvo que esté vacío"
- Validación y limpieza de CUIT/CUIL/DNI
- Búsquedas del CRUD
- Conciliación de contactos (alta, reutilización, completado, errores de base)
- Endpoints /clients y /suppliers
"""

import logging
import pytest
from unittest.mock import patch
from uuid import uuid4
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.common.exceptions import NotFoundError, StoreFailure
from app.modules.contacts.crud import PartyCrud
from app.modules.contacts.models import Client, Supplier
from app.modules.contacts.reconciliation import (
    PartyReconciler, prefer_non_empty, needs_enrichment
)
from app.modules.contacts.schemas import (
    ClientCreate, ClientUpdate, PartyFiscalData, PartySnapshot
)
from app.modules.contacts.service import ClientService, SupplierService
from app.modules.taxes.schemas import TaxCondition


def store_down(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("database is down"))


# ===== FIXTURES =====

@pytest.fixture
def client_crud(db_session: Session):
    return PartyCrud(db_session, Client)


@pytest.fixture
def reconciler(client_crud):
    return PartyReconciler(client_crud, "cliente")


@pytest.fixture
def existing_client(client_crud):
    return client_crud.create({
        "name": "Distribuidora Norte SRL",
        "tax_id": "30712345678",
        "tax_condition": TaxCondition.RESPONSABLE_INSCRIPTO,
        "address": "Av. Corrientes 1234, CABA",
    })


# ===== TESTS DE REGLAS =====

class TestPreferNonEmpty:

    def test_form_value_wins(self):
        assert prefer_non_empty("20111111112", "20111111111") == "20111111112"

    def test_empty_form_value_keeps_existing(self):
        assert prefer_non_empty("", "20111111111") == "20111111111"
        assert prefer_non_empty(None, "20111111111") == "20111111111"
        assert prefer_non_empty("   ", "Calle 1") == "Calle 1"

    def test_both_empty(self):
        assert prefer_non_empty(None, None) is None

    def test_form_value_is_trimmed(self):
        assert prefer_non_empty("  Calle 2 ", "Calle 1") == "Calle 2"


class TestPartySchemas:

    def test_tax_id_separators_are_removed(self):
        client = ClientCreate(name="ACME", tax_id="20-11111111-1")
        assert client.tax_id == "20111111111"

    def test_tax_id_with_letters_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            ClientCreate(name="ACME", tax_id="20ABC111111")

    def test_tax_id_too_short_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            ClientCreate(name="ACME", tax_id="123456")

    def test_empty_optional_fields_become_none(self):
        client = ClientCreate(name="  ACME  ", tax_id="", tax_condition="", address="  ", email="")
        assert client.name == "ACME"
        assert client.tax_id is None
        assert client.tax_condition is None
        assert client.address is None
        assert client.email is None

    def test_blank_name_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            ClientCreate(name="   ")

    def test_invalid_email_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            ClientCreate(name="ACME", email="no-es-un-email")

    def test_fiscal_data_normalization(self):
        fiscal = PartyFiscalData(name="  ACME ", tax_id="20.111.111.111", tax_condition="", address="")
        assert fiscal.name == "ACME"
        assert fiscal.tax_id == "20111111111"
        assert fiscal.tax_condition is None
        assert fiscal.address is None
        assert fiscal.has_extra_data()

    def test_snapshot_is_frozen(self):
        snapshot = PartySnapshot.from_fiscal_data(PartyFiscalData(name="ACME"), None)
        with pytest.raises(PydanticValidationError):
            snapshot.name = "Otro"


# ===== TESTS DE CRUD =====

class TestPartyCrud:

    def test_get_by_name_ignores_case_and_spaces(self, client_crud, existing_client):
        found = client_crud.get_by_name("  distribuidora norte srl ")
        assert found.id == existing_client.id

    def test_get_by_name_does_not_match_substrings(self, client_crud, existing_client):
        assert client_crud.get_by_name("Distribuidora") is None

    def test_get_by_tax_id(self, client_crud, existing_client):
        assert client_crud.get_by_tax_id("30712345678").id == existing_client.id
        assert client_crud.get_by_tax_id("30712345679") is None

    def test_search_by_name_or_tax_id(self, client_crud, existing_client):
        client_crud.create({"name": "Kiosco Sur"})

        assert [c.name for c in client_crud.search("norte")] == ["Distribuidora Norte SRL"]
        assert [c.name for c in client_crud.search("307123")] == ["Distribuidora Norte SRL"]

    def test_search_is_limited_and_sorted(self, db_session):
        crud = PartyCrud(db_session, Client, search_limit=3)
        for name in ["Cliente E", "Cliente B", "Cliente D", "Cliente A", "Cliente C"]:
            crud.create({"name": name})

        results = crud.search("cliente")
        assert [c.name for c in results] == ["Cliente A", "Cliente B", "Cliente C"]

    def test_get_all_sorted_by_name(self, client_crud):
        client_crud.create({"name": "Zeta"})
        client_crud.create({"name": "Alfa"})
        assert [c.name for c in client_crud.get_all()] == ["Alfa", "Zeta"]

    def test_update_and_delete_missing(self, client_crud):
        assert client_crud.update(uuid4(), {"name": "X"}) is None
        assert client_crud.delete(uuid4()) is False


# ===== TESTS DE CONCILIACIÓN =====

class TestPartyReconciler:

    def test_enriches_empty_tax_id(self, client_crud, reconciler):
        party = client_crud.create({"name": "Ferretería Oeste"})

        fiscal = PartyFiscalData(name="Ferretería Oeste", tax_id="20111111111")
        resolved = reconciler.reconcile(fiscal, party.id)

        assert resolved == party.id
        assert client_crud.get_by_id(party.id).tax_id == "20111111111"

    def test_never_erases_stored_tax_id(self, client_crud, reconciler, existing_client):
        fiscal = PartyFiscalData(name=existing_client.name, address="Nueva dirección 1")
        reconciler.reconcile(fiscal, existing_client.id)

        stored = client_crud.get_by_id(existing_client.id)
        assert stored.tax_id == "30712345678"
        assert stored.tax_condition == TaxCondition.RESPONSABLE_INSCRIPTO
        assert stored.address == "Nueva dirección 1"

    def test_differing_form_value_overwrites(self, client_crud, reconciler, existing_client):
        fiscal = PartyFiscalData(name=existing_client.name, tax_condition=TaxCondition.MONOTRIBUTO)
        reconciler.reconcile(fiscal, existing_client.id)

        assert client_crud.get_by_id(existing_client.id).tax_condition == TaxCondition.MONOTRIBUTO

    def test_no_update_when_nothing_changes(self, client_crud, reconciler, existing_client):
        fiscal = PartyFiscalData(name=existing_client.name, tax_id=existing_client.tax_id)
        assert not needs_enrichment(existing_client, fiscal)

        with patch.object(client_crud, "update") as update:
            assert reconciler.reconcile(fiscal, existing_client.id) == existing_client.id
        update.assert_not_called()

    def test_creates_exactly_one_new_party(self, client_crud, reconciler):
        fiscal = PartyFiscalData(
            name="  Nuevo Cliente SA ",
            tax_id="30700000001",
            tax_condition=TaxCondition.EXENTO,
            address="",
        )
        resolved = reconciler.reconcile(fiscal)

        parties = client_crud.get_all()
        assert len(parties) == 1
        assert parties[0].id == resolved
        assert parties[0].name == "Nuevo Cliente SA"
        assert parties[0].tax_id == "30700000001"
        assert parties[0].address is None

    def test_reuses_party_by_name_case_insensitive(self, client_crud, reconciler, existing_client):
        resolved = reconciler.reconcile(PartyFiscalData(name="DISTRIBUIDORA NORTE SRL"))

        assert resolved == existing_client.id
        assert client_crud.count() == 1

    def test_reuses_party_with_accented_name(self, client_crud, reconciler):
        party = client_crud.create({"name": "Ñandú SRL"})

        resolved = reconciler.reconcile(PartyFiscalData(name=" Ñandú SRL "))

        assert resolved == party.id
        assert client_crud.count() == 1

    def test_reuses_party_by_tax_id(self, client_crud, reconciler, existing_client):
        fiscal = PartyFiscalData(name="Distribuidora Norte", tax_id="30712345678")
        resolved = reconciler.reconcile(fiscal)

        assert resolved == existing_client.id
        assert client_crud.count() == 1

    def test_unknown_party_id_falls_back_to_name(self, client_crud, reconciler, existing_client):
        resolved = reconciler.reconcile(PartyFiscalData(name=existing_client.name), uuid4())
        assert resolved == existing_client.id

    def test_unknown_party_id_and_new_name_creates(self, client_crud, reconciler):
        resolved = reconciler.reconcile(PartyFiscalData(name="Otro Cliente"), uuid4())
        assert client_crud.get_by_id(resolved).name == "Otro Cliente"

    def test_no_id_and_no_name_leaves_document_unlinked(self, client_crud, reconciler):
        assert reconciler.reconcile(PartyFiscalData(name="  ")) is None
        assert client_crud.count() == 0

    def test_create_failure_is_swallowed(self, client_crud, reconciler, caplog):
        with patch.object(client_crud, "create", side_effect=store_down):
            with caplog.at_level(logging.WARNING):
                resolved = reconciler.reconcile(PartyFiscalData(name="Cliente Caído"))

        assert resolved is None
        assert "No se pudo conciliar cliente 'Cliente Caído'" in caplog.text

    def test_search_failure_is_swallowed(self, client_crud, reconciler):
        with patch.object(client_crud, "get_by_name", side_effect=store_down):
            assert reconciler.reconcile(PartyFiscalData(name="Cliente")) is None

    def test_failed_lookup_leaves_session_usable(self, client_crud, reconciler, db_session):
        def broken_lookup(*args, **kwargs):
            db_session.add(Client(name=None))
            db_session.flush()

        with patch.object(client_crud, "get_by_name", side_effect=broken_lookup):
            assert reconciler.reconcile(PartyFiscalData(name="Cliente")) is None

        created = client_crud.create({"name": "Cliente Nuevo"})
        assert client_crud.get_by_id(created.id).name == "Cliente Nuevo"

    def test_lookup_failure_keeps_form_id(self, client_crud, reconciler):
        party_id = uuid4()
        with patch.object(client_crud, "get_by_id", side_effect=store_down):
            assert reconciler.reconcile(PartyFiscalData(name="Cliente"), party_id) == party_id

    def test_enrichment_failure_keeps_resolved_id(self, client_crud, reconciler, existing_client):
        fiscal = PartyFiscalData(name=existing_client.name, address="Otra dirección")
        with patch.object(client_crud, "update", side_effect=store_down):
            assert reconciler.reconcile(fiscal, existing_client.id) == existing_client.id


# ===== TESTS DE SERVICIO =====

class TestPartyService:

    def test_update_only_sent_fields(self, db_session):
        service = ClientService(db_session)
        client = service.create(ClientCreate(name="ACME", tax_id="20111111111", phone="1234"))

        updated = service.update(client.id, ClientUpdate(phone="5678"))
        assert updated.phone == "5678"
        assert updated.tax_id == "20111111111"

    def test_missing_party_raises_not_found(self, db_session):
        service = SupplierService(db_session)
        with pytest.raises(NotFoundError):
            service.get_by_id(uuid4())
        with pytest.raises(NotFoundError):
            service.update(uuid4(), ClientUpdate(phone="1"))
        with pytest.raises(NotFoundError):
            service.delete(uuid4())

    def test_store_error_becomes_store_failure(self, db_session):
        service = ClientService(db_session)
        with patch.object(service.crud, "get_all", side_effect=store_down):
            with pytest.raises(StoreFailure):
                service.get_all()

    def test_blank_search_returns_nothing(self, db_session):
        service = ClientService(db_session)
        service.create(ClientCreate(name="ACME"))
        assert service.search("  ") == []


# ===== TESTS DE API =====

class TestContactsAPI:

    def test_create_and_get_client(self, client):
        response = client.post("/clients/", json={
            "name": "Librería Centro",
            "tax_id": "20-12345678-9",
            "tax_condition": "Monotributo",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["tax_id"] == "20123456789"

        response = client.get(f"/clients/{data['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Librería Centro"

    def test_invalid_tax_id_is_rejected(self, client):
        response = client.post("/clients/", json={"name": "X", "tax_id": "12AB"})
        assert response.status_code == 422

    def test_list_and_search_clients(self, client):
        client.post("/clients/", json={"name": "Beta"})
        client.post("/clients/", json={"name": "Alfa", "tax_id": "20111111111"})

        response = client.get("/clients/")
        assert [c["name"] for c in response.json()["items"]] == ["Alfa", "Beta"]

        response = client.get("/clients/search", params={"q": "2011111"})
        assert response.json()["total"] == 1
        assert response.json()["items"][0]["name"] == "Alfa"

    def test_update_and_delete_client(self, client):
        created = client.post("/clients/", json={"name": "Gamma"}).json()

        response = client.patch(f"/clients/{created['id']}", json={"address": "San Martín 50"})
        assert response.status_code == 200
        assert response.json()["address"] == "San Martín 50"

        assert client.delete(f"/clients/{created['id']}").status_code == 204
        assert client.get(f"/clients/{created['id']}").status_code == 404
        assert client.delete(f"/clients/{created['id']}").status_code == 404

    def test_supplier_contact_person(self, client):
        response = client.post("/suppliers/", json={
            "name": "Mayorista Este",
            "contact_person": "  Laura Gómez ",
        })
        assert response.status_code == 201
        assert response.json()["contact_person"] == "Laura Gómez"

    def test_store_failure_returns_503(self, client):
        with patch.object(PartyCrud, "get_all", side_effect=store_down):
            response = client.get("/suppliers/")
        assert response.status_code == 503
