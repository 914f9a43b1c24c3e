"""
Tests for the dashboard report
"""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app.modules.invoices.crud import InvoiceCrud
from app.modules.invoices.models import Invoice
from app.modules.purchase_orders.crud import PurchaseOrderCrud
from app.modules.purchase_orders.models import PurchaseOrder, PurchaseOrderStatus
from app.modules.reports.services import DashboardReportService
from app.modules.reports.utils import month_bounds
from app.modules.taxes.schemas import InvoiceType, PaymentCondition


TODAY = date(2024, 6, 15)


def add_invoice(db, total, day=TODAY):
    db.add(Invoice(
        invoice_type=InvoiceType.UNBILLED,
        date=day,
        client={"name": "Cliente"},
        items=[],
        payment_condition=PaymentCondition.CONTADO,
        subtotal=total,
        tax=0,
        total=total,
    ))
    db.commit()


def add_order(db, total, status):
    db.add(PurchaseOrder(
        order_number="OC",
        date=TODAY,
        status=status,
        supplier={"name": "Proveedor"},
        items=[],
        payment_condition=PaymentCondition.CONTADO,
        subtotal=total,
        tax=0,
        total=total,
    ))
    db.commit()


def store_down(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("database is down"))


class TestMonthBounds:

    def test_regular_month(self):
        assert month_bounds(date(2024, 6, 15)) == (date(2024, 6, 1), date(2024, 6, 30))

    def test_leap_february(self):
        assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))


class TestDashboardReportService:

    def test_empty_store_is_all_zero(self, db_session):
        report = DashboardReportService(db_session).get_dashboard(TODAY)

        assert report.success is True
        assert report.data.total_invoices == 0
        assert report.data.total_revenue == Decimal("0.00")
        assert report.data.total_profit == Decimal("0.00")
        assert report.data.active_purchase_orders == 0

    def test_dashboard_example(self, db_session):
        add_invoice(db_session, Decimal("100"))
        add_invoice(db_session, Decimal("200"))
        add_order(db_session, Decimal("50"), PurchaseOrderStatus.PENDING)
        add_order(db_session, Decimal("30"), PurchaseOrderStatus.CANCELLED)

        data = DashboardReportService(db_session).get_dashboard(TODAY).data

        assert data.total_invoices == 2
        assert data.total_revenue == Decimal("300.00")
        assert data.monthly_revenue == Decimal("300.00")
        assert data.total_expenses == Decimal("50.00")
        assert data.total_profit == Decimal("250.00")
        assert data.active_purchase_orders == 1
        assert data.total_purchase_orders == 2

    def test_monthly_revenue_only_counts_current_month(self, db_session):
        add_invoice(db_session, Decimal("100"))
        add_invoice(db_session, Decimal("40.55"), day=date(2024, 5, 31))
        add_invoice(db_session, Decimal("10"), day=date(2024, 7, 1))

        data = DashboardReportService(db_session).get_dashboard(TODAY).data

        assert data.monthly_revenue == Decimal("100.00")
        assert data.total_revenue == Decimal("150.55")

    def test_completed_orders_are_expenses_but_not_active(self, db_session):
        add_order(db_session, Decimal("70"), PurchaseOrderStatus.COMPLETED)
        add_order(db_session, Decimal("30"), PurchaseOrderStatus.IN_PROGRESS)

        data = DashboardReportService(db_session).get_dashboard(TODAY).data

        assert data.total_expenses == Decimal("100.00")
        assert data.active_purchase_orders == 1
        assert data.total_profit == Decimal("-100.00")

    def test_failed_metric_is_reported_not_raised(self, db_session):
        add_invoice(db_session, Decimal("100"))

        with patch.object(PurchaseOrderCrud, "sum_total", side_effect=store_down):
            report = DashboardReportService(db_session).get_dashboard(TODAY)

        assert report.success is False
        assert set(report.errors) == {"total_expenses"}
        assert report.data.total_expenses is None
        assert report.data.total_profit is None
        assert report.data.total_revenue == Decimal("100.00")
        assert report.data.total_purchase_orders == 0


class TestDashboardAPI:

    def test_dashboard_endpoint(self, client):
        response = client.get("/reports/dashboard")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["total_invoices"] == 0

    def test_dashboard_failure_still_returns_200(self, client):
        with patch.object(InvoiceCrud, "count", side_effect=store_down):
            response = client.get("/reports/dashboard")

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["data"]["total_invoices"] is None

    def test_dashboard_csv_export(self, client):
        response = client.get("/reports/dashboard", params={"export": "csv"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.splitlines()[0].startswith("Facturas,")
