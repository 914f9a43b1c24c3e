"""
Tests para facturas de venta

- Validación fiscal condicional al crear y al actualizar
- Conciliación del cliente y copia inmutable de sus datos
- Totales recalculados al cambiar los ítems
- Helpers de visualización
- Endpoints /invoices
"""

import pytest
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from app.common.exceptions import NotFoundError, StoreFailure, ValidationError
from app.modules.contacts.crud import PartyCrud
from app.modules.contacts.models import Client
from app.modules.contacts.schemas import ClientCreate, ClientUpdate
from app.modules.contacts.service import ClientService
from app.modules.invoices.crud import InvoiceCrud
from app.modules.invoices.schemas import InvoiceCreate, InvoiceUpdate
from app.modules.invoices.service import InvoiceService
from app.modules.invoices.utils import (
    format_currency, get_invoice_label, get_invoice_number, get_invoice_type_label
)
from app.modules.taxes.schemas import InvoiceType


def store_down(*args, **kwargs):
    raise OperationalError("INSERT", {}, Exception("database is down"))


@pytest.fixture
def invoice_payload():
    """Factura A completa"""
    return {
        "invoice_type": "A",
        "point_of_sale": "0001",
        "invoice_number": "00000123",
        "date": "2024-03-15",
        "client_name": "Distribuidora Norte SRL",
        "client_tax_id": "30-71234567-8",
        "client_tax_condition": "Responsable Inscripto",
        "client_address": "Av. Corrientes 1234",
        "items": [
            {"description": "Widget", "quantity": 2, "unit_price": 100, "tax_rate": "21"}
        ],
        "payment_condition": "Contado",
    }


@pytest.fixture
def unbilled_payload():
    return {
        "invoice_type": "Unbilled",
        "client_name": "Consumidor de mostrador",
        "items": [
            {"description": "Café", "quantity": 3, "unit_price": 10, "tax_rate": "10.5"},
            {"description": "Libro", "quantity": 1, "unit_price": 50, "tax_rate": "0"},
        ],
        "payment_condition": "Tarjeta",
    }


@pytest.fixture
def service(db_session, settings):
    return InvoiceService(db_session, settings)


# ===== TESTS DE HELPERS =====

class TestInvoiceHelpers:

    def test_type_labels(self):
        assert get_invoice_type_label("A") == "Factura A"
        assert get_invoice_type_label(InvoiceType.UNBILLED) == "Sin facturar"
        assert get_invoice_type_label("X") == "X"

    def test_number_and_label(self):
        billed = SimpleNamespace(invoice_type=InvoiceType.B, point_of_sale="0002", invoice_number="00000045")
        unbilled = SimpleNamespace(invoice_type=InvoiceType.UNBILLED, point_of_sale=None, invoice_number=None)

        assert get_invoice_number(billed) == "0002-00000045"
        assert get_invoice_label(billed) == "Factura B 0002-00000045"
        assert get_invoice_number(unbilled) == "-"
        assert get_invoice_label(unbilled) == "Venta sin facturar"

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(0) == "$0.00"
        assert format_currency(1000000, "ARS ") == "ARS 1,000,000.00"


# ===== TESTS DE SERVICIO =====

class TestInvoiceService:

    def test_create_billed_invoice(self, service, invoice_payload):
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload))

        assert invoice.subtotal == Decimal("200.00")
        assert invoice.tax == Decimal("42.00")
        assert invoice.total == Decimal("242.00")
        assert invoice.client["tax_id"] == "30712345678"
        assert invoice.client["party_id"] == str(invoice.client_id)
        assert invoice.label == "Factura A 0001-00000123"

    def test_creates_client_once(self, service, db_session, invoice_payload):
        first = service.create_invoice(InvoiceCreate(**invoice_payload))
        payload = dict(invoice_payload, invoice_number="00000124", client_name="distribuidora norte srl")
        second = service.create_invoice(InvoiceCreate(**payload))

        clients = ClientService(db_session).get_all()
        assert len(clients) == 1
        assert first.client_id == second.client_id == clients[0].id

    def test_billed_invoice_reports_all_missing_fields(self, service, db_session, unbilled_payload):
        payload = dict(unbilled_payload, invoice_type="A")

        with pytest.raises(ValidationError) as exc_info:
            service.create_invoice(InvoiceCreate(**payload))

        assert set(exc_info.value.errors) == {
            "point_of_sale", "invoice_number", "client_tax_id", "client_tax_condition"
        }
        assert InvoiceCrud(db_session).count() == 0
        assert ClientService(db_session).get_all() == []

    def test_unbilled_invoice_without_fiscal_data(self, service, unbilled_payload):
        invoice = service.create_invoice(InvoiceCreate(**unbilled_payload))

        assert invoice.subtotal == Decimal("80.00")
        assert invoice.tax == Decimal("3.15")
        assert invoice.total == Decimal("83.15")
        assert invoice.display_number == "-"

    def test_snapshot_survives_client_update(self, service, db_session, invoice_payload):
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload))

        clients = ClientService(db_session)
        clients.update(invoice.client_id, ClientUpdate(name="Otro Nombre SA", address="Otra calle 1"))

        db_session.expire_all()
        stored = service.get_invoice(invoice.id)
        assert stored.client["name"] == "Distribuidora Norte SRL"
        assert stored.client["address"] == "Av. Corrientes 1234"

    def test_snapshot_survives_client_delete(self, service, db_session, invoice_payload):
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload))
        ClientService(db_session).delete(invoice.client_id)

        stored = service.get_invoice(invoice.id)
        assert stored.client_id == invoice.client_id
        assert stored.client["name"] == "Distribuidora Norte SRL"

    def test_snapshot_uses_form_data_not_stored_client(self, service, db_session, unbilled_payload):
        existing = ClientService(db_session).create(ClientCreate(
            name="Consumidor de mostrador", tax_id="20111111111", address="Guardada 1"
        ))

        payload = dict(unbilled_payload, client_id=str(existing.id))
        invoice = service.create_invoice(InvoiceCreate(**payload))

        assert invoice.client_id == existing.id
        assert invoice.client["tax_id"] is None
        assert invoice.client["address"] is None

    def test_reconciliation_failure_does_not_block_invoice(self, service, unbilled_payload):
        with patch.object(PartyCrud, "create", side_effect=store_down):
            invoice = service.create_invoice(InvoiceCreate(**unbilled_payload))

        assert invoice.client_id is None
        assert invoice.client["name"] == "Consumidor de mostrador"
        assert invoice.total == Decimal("83.15")

    def test_failed_client_lookup_does_not_block_invoice(self, service, db_session, unbilled_payload):
        def broken_lookup(*args, **kwargs):
            db_session.add(Client(name=None))
            db_session.flush()

        with patch.object(PartyCrud, "get_by_name", side_effect=broken_lookup):
            invoice = service.create_invoice(InvoiceCreate(**unbilled_payload))

        assert invoice.client_id is None
        assert service.get_invoice(invoice.id).total == Decimal("83.15")

    def test_reconciliation_can_be_disabled(self, db_session, settings, unbilled_payload):
        settings.AUTO_RECONCILE_PARTIES = False
        form_id = uuid4()
        service = InvoiceService(db_session, settings)

        invoice = service.create_invoice(InvoiceCreate(**dict(unbilled_payload, client_id=str(form_id))))

        assert invoice.client_id == form_id
        assert ClientService(db_session).get_all() == []

    def test_store_failure_on_save_propagates(self, service, unbilled_payload):
        with patch.object(InvoiceCrud, "create", side_effect=store_down):
            with pytest.raises(StoreFailure):
                service.create_invoice(InvoiceCreate(**unbilled_payload))

    def test_update_items_recomputes_totals(self, service, invoice_payload):
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload))

        updated = service.update_invoice(invoice.id, InvoiceUpdate(items=[
            {"description": "Servicio", "quantity": 1, "unit_price": 1000, "tax_rate": "10.5"}
        ]))

        assert updated.subtotal == Decimal("1000.00")
        assert updated.tax == Decimal("105.00")
        assert updated.total == Decimal("1105.00")
        assert updated.items[0]["description"] == "Servicio"

    def test_update_without_items_keeps_totals(self, service, invoice_payload):
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload))
        updated = service.update_invoice(invoice.id, InvoiceUpdate(payment_condition="Cheque"))

        assert updated.total == Decimal("242.00")
        assert updated.payment_condition.value == "Cheque"

    def test_update_to_billed_revalidates(self, service, unbilled_payload):
        invoice = service.create_invoice(InvoiceCreate(**unbilled_payload))

        with pytest.raises(ValidationError) as exc_info:
            service.update_invoice(invoice.id, InvoiceUpdate(invoice_type="B", point_of_sale="0001"))

        assert "point_of_sale" not in exc_info.value.errors
        assert "invoice_number" in exc_info.value.errors
        assert "client_tax_id" in exc_info.value.errors

    def test_clearing_number_of_billed_invoice_fails(self, service, invoice_payload):
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload))

        with pytest.raises(ValidationError) as exc_info:
            service.update_invoice(invoice.id, InvoiceUpdate(invoice_number=""))
        assert set(exc_info.value.errors) == {"invoice_number"}

    def test_update_and_delete_missing_invoice(self, service):
        with pytest.raises(NotFoundError):
            service.update_invoice(uuid4(), InvoiceUpdate(payment_condition="Cheque"))
        with pytest.raises(NotFoundError):
            service.delete_invoice(uuid4())

    def test_filters(self, service, invoice_payload, unbilled_payload):
        service.create_invoice(InvoiceCreate(**invoice_payload))
        service.create_invoice(InvoiceCreate(**dict(unbilled_payload, date="2024-04-02")))

        by_type = service.get_invoices(invoice_type=InvoiceType.A)
        assert by_type["total"] == 1

        march = service.get_invoices(date_from=date(2024, 3, 1), date_to=date(2024, 3, 31))
        assert [i.invoice_type for i in march["items"]] == [InvoiceType.A]

        assert service.get_invoices()["total"] == 2


# ===== TESTS DE API =====

class TestInvoicesAPI:

    def test_create_invoice(self, client, invoice_payload):
        response = client.post("/invoices/", json=invoice_payload)
        assert response.status_code == 201

        data = response.json()
        assert Decimal(data["total"]) == Decimal("242.00")
        assert data["display_number"] == "0001-00000123"
        assert data["display_total"] == "$242.00"
        assert data["client"]["tax_condition"] == "Responsable Inscripto"
        assert data["client_id"] is not None

        clients = client.get("/clients/").json()
        assert clients["items"][0]["id"] == data["client_id"]

    def test_missing_fiscal_fields_return_422_with_errors(self, client, unbilled_payload):
        response = client.post("/invoices/", json=dict(unbilled_payload, invoice_type="C"))
        assert response.status_code == 422
        assert set(response.json()["errors"]) == {
            "point_of_sale", "invoice_number", "client_tax_id", "client_tax_condition"
        }

    def test_empty_items_rejected(self, client, unbilled_payload):
        response = client.post("/invoices/", json=dict(unbilled_payload, items=[]))
        assert response.status_code == 422

    def test_empty_items_rejected_on_update(self, client, unbilled_payload):
        created = client.post("/invoices/", json=unbilled_payload).json()
        response = client.patch(f"/invoices/{created['id']}", json={"items": []})
        assert response.status_code == 422

    def test_validate_endpoint(self, client):
        response = client.post("/invoices/validate", json={"invoice_type": "Unbilled"})
        assert response.json() == {"is_valid": True, "requires_fiscal_data": False, "errors": {}}

        response = client.post("/invoices/validate", json={
            "invoice_type": "A", "point_of_sale": "0001", "invoice_number": "1",
            "client_tax_id": "20-11111111-1", "client_tax_condition": "Exento",
        })
        assert response.json()["is_valid"] is True

    def test_list_filter_and_delete(self, client, invoice_payload, unbilled_payload):
        client.post("/invoices/", json=invoice_payload)
        created = client.post("/invoices/", json=unbilled_payload).json()

        response = client.get("/invoices/", params={"invoice_type": "Unbilled"})
        assert response.json()["total"] == 1
        assert response.json()["items"][0]["label"] == "Venta sin facturar"

        assert client.delete(f"/invoices/{created['id']}").status_code == 204
        assert client.get(f"/invoices/{created['id']}").status_code == 404
        assert client.delete(f"/invoices/{created['id']}").status_code == 404


class TestInvoiceCrud:

    def test_store_queries(self, service, db_session, invoice_payload, unbilled_payload):
        billed = service.create_invoice(InvoiceCreate(**invoice_payload))
        unbilled = service.create_invoice(InvoiceCreate(**dict(unbilled_payload, date="2024-04-02")))
        crud = InvoiceCrud(db_session)

        assert [i.id for i in crud.get_by_type(InvoiceType.UNBILLED)] == [unbilled.id]
        assert [i.id for i in crud.get_by_date_range(date(2024, 3, 1), date(2024, 4, 30))] == [unbilled.id, billed.id]
        assert {i.id for i in crud.get_all()} == {billed.id, unbilled.id}
        assert crud.count() == 2
        assert crud.sum_total() == Decimal("325.15")
