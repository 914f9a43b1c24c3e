"""
Tests para órdenes de compra
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from app.common.exceptions import NotFoundError, ValidationError
from app.modules.contacts.crud import PartyCrud
from app.modules.contacts.models import Supplier
from app.modules.contacts.service import SupplierService
from app.modules.purchase_orders.crud import PurchaseOrderCrud
from app.modules.purchase_orders.models import PurchaseOrderStatus
from app.modules.purchase_orders.schemas import PurchaseOrderCreate, PurchaseOrderUpdate
from app.modules.purchase_orders.service import PurchaseOrderService
from app.modules.taxes.schemas import TaxCondition


@pytest.fixture
def order_payload():
    return {
        "order_number": " OC-0001 ",
        "date": "2024-05-10",
        "supplier_name": "Mayorista Este SA",
        "supplier_tax_id": "30-70000000-1",
        "supplier_tax_condition": "Responsable Inscripto",
        "items": [
            {"description": "Resmas A4", "quantity": 10, "unit_price": "4500.50", "tax_rate": "21"}
        ],
        "payment_condition": "Transferencia",
        "delivery_date": "",
        "notes": "  ",
    }


@pytest.fixture
def service(db_session, settings):
    return PurchaseOrderService(db_session, settings)


class TestPurchaseOrderService:

    def test_create_defaults_to_pending(self, service, order_payload):
        order = service.create_purchase_order(PurchaseOrderCreate(**order_payload))

        assert order.order_number == "OC-0001"
        assert order.status == PurchaseOrderStatus.PENDING
        assert order.delivery_date is None
        assert order.notes is None
        assert order.subtotal == Decimal("45005.00")
        assert order.tax == Decimal("9451.05")
        assert order.total == Decimal("54456.05")

    def test_creates_supplier_with_form_data(self, service, db_session, order_payload):
        order = service.create_purchase_order(PurchaseOrderCreate(**order_payload))

        suppliers = SupplierService(db_session).get_all()
        assert len(suppliers) == 1
        assert suppliers[0].id == order.supplier_id
        assert suppliers[0].tax_id == "30700000001"
        assert suppliers[0].tax_condition == TaxCondition.RESPONSABLE_INSCRIPTO

    def test_enriches_existing_supplier(self, service, db_session, order_payload):
        crud = PartyCrud(db_session, Supplier)
        existing = crud.create({"name": "Mayorista Este SA", "address": "Ruta 8 km 50"})

        order = service.create_purchase_order(PurchaseOrderCreate(**dict(order_payload, supplier_id=str(existing.id))))

        stored = crud.get_by_id(existing.id)
        assert order.supplier_id == existing.id
        assert stored.tax_id == "30700000001"
        assert stored.address == "Ruta 8 km 50"
        assert order.supplier["address"] is None

    def test_supplier_failure_does_not_block_order(self, service, order_payload):
        def store_down(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("database is down"))

        with patch.object(PartyCrud, "create", side_effect=store_down):
            order = service.create_purchase_order(PurchaseOrderCreate(**order_payload))

        assert order.supplier_id is None
        assert order.supplier["name"] == "Mayorista Este SA"

    def test_update_status(self, service, order_payload):
        order = service.create_purchase_order(PurchaseOrderCreate(**order_payload))

        updated = service.update_purchase_order_status(order.id, PurchaseOrderStatus.COMPLETED)
        assert updated.status == PurchaseOrderStatus.COMPLETED

        with pytest.raises(NotFoundError):
            service.update_purchase_order_status(uuid4(), PurchaseOrderStatus.CANCELLED)

    def test_update_items_recomputes_totals(self, service, order_payload):
        order = service.create_purchase_order(PurchaseOrderCreate(**order_payload))

        updated = service.update_purchase_order(order.id, PurchaseOrderUpdate(
            items=[{"description": "Tóner", "quantity": 2, "unit_price": 100, "tax_rate": "10.5"}],
            notes="Entregar por la mañana",
        ))

        assert updated.total == Decimal("221.00")
        assert updated.notes == "Entregar por la mañana"
        assert updated.supplier["name"] == "Mayorista Este SA"

    def test_explicit_null_items_rejected(self, service, order_payload):
        order = service.create_purchase_order(PurchaseOrderCreate(**order_payload))

        with pytest.raises(ValidationError):
            service.update_purchase_order(order.id, PurchaseOrderUpdate(items=None))

    def test_filters_by_status(self, service, order_payload):
        first = service.create_purchase_order(PurchaseOrderCreate(**order_payload))
        service.create_purchase_order(PurchaseOrderCreate(**dict(order_payload, order_number="OC-0002")))
        service.update_purchase_order_status(first.id, PurchaseOrderStatus.CANCELLED)

        cancelled = service.get_purchase_orders(status=PurchaseOrderStatus.CANCELLED)
        assert [o.order_number for o in cancelled["items"]] == ["OC-0001"]
        assert service.get_purchase_orders(status=PurchaseOrderStatus.PENDING)["total"] == 1


class TestPurchaseOrdersAPI:

    def test_create_get_and_status(self, client, order_payload):
        response = client.post("/purchase-orders/", json=order_payload)
        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "Pendiente"

        response = client.patch(f"/purchase-orders/{order['id']}/status", json={"status": "En Proceso"})
        assert response.status_code == 200
        assert response.json()["status"] == "En Proceso"

        response = client.get("/purchase-orders/", params={"status": "En Proceso"})
        assert response.json()["total"] == 1

    def test_invalid_status_rejected(self, client, order_payload):
        order = client.post("/purchase-orders/", json=order_payload).json()
        response = client.patch(f"/purchase-orders/{order['id']}/status", json={"status": "Archivada"})
        assert response.status_code == 422

    def test_order_number_required(self, client, order_payload):
        response = client.post("/purchase-orders/", json=dict(order_payload, order_number="  "))
        assert response.status_code == 422

    def test_delete(self, client, order_payload):
        order = client.post("/purchase-orders/", json=order_payload).json()
        assert client.delete(f"/purchase-orders/{order['id']}").status_code == 204
        assert client.delete(f"/purchase-orders/{order['id']}").status_code == 404


class TestPurchaseOrderCrud:

    def test_store_queries(self, service, db_session, order_payload):
        may = service.create_purchase_order(PurchaseOrderCreate(**order_payload))
        june = service.create_purchase_order(PurchaseOrderCreate(**dict(order_payload, order_number="OC-0002", date="2024-06-01")))
        service.update_purchase_order_status(may.id, PurchaseOrderStatus.CANCELLED)
        crud = PurchaseOrderCrud(db_session)

        assert [o.id for o in crud.get_all()] == [june.id, may.id]
        assert [o.id for o in crud.get_by_status(PurchaseOrderStatus.CANCELLED)] == [may.id]
        assert [o.id for o in crud.get_by_date_range(date(2024, 6, 1), date(2024, 6, 30))] == [june.id]
        assert crud.count(exclude_statuses=(PurchaseOrderStatus.CANCELLED,)) == 1
