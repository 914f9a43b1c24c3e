"""
Dashboard Reports Service

Summary figures for the main dashboard:
- invoices: count, revenue (all time and current month)
- purchase orders: expenses (excluding cancelled), count, active count
- profit = revenue - expenses
"""

from datetime import date
from typing import Dict, Optional

from .base import BaseReportService, to_amount
from ..schemas import DashboardData, DashboardResponse
from ..utils import month_bounds
from app.modules.purchase_orders.models import PurchaseOrderStatus, CLOSED_STATUSES


class DashboardReportService(BaseReportService):
    """Service for the dashboard summary"""

    def get_dashboard(self, today: Optional[date] = None) -> DashboardResponse:
        """
        Compute every dashboard metric independently.

        Sums are rounded to 2 decimals here, after aggregation. A metric that
        fails comes back as None (profit too, when one of its inputs failed)
        and `success` is False.
        """
        month_start, month_end = month_bounds(today or date.today())
        errors: Dict[str, str] = {}

        total_invoices = self._metric("total_invoices", self.invoices.count, errors)
        total_revenue = self._metric(
            "total_revenue",
            lambda: to_amount(self.invoices.sum_total()),
            errors
        )
        monthly_revenue = self._metric(
            "monthly_revenue",
            lambda: to_amount(self.invoices.sum_total(date_from=month_start, date_to=month_end)),
            errors
        )
        total_expenses = self._metric(
            "total_expenses",
            lambda: to_amount(self.purchase_orders.sum_total(
                exclude_statuses=(PurchaseOrderStatus.CANCELLED,)
            )),
            errors
        )
        total_purchase_orders = self._metric("total_purchase_orders", self.purchase_orders.count, errors)
        active_purchase_orders = self._metric(
            "active_purchase_orders",
            lambda: self.purchase_orders.count(exclude_statuses=CLOSED_STATUSES),
            errors
        )

        total_profit = None
        if total_revenue is not None and total_expenses is not None:
            total_profit = to_amount(total_revenue - total_expenses)

        return DashboardResponse(
            success=not errors,
            data=DashboardData(
                total_invoices=total_invoices,
                total_purchase_orders=total_purchase_orders,
                active_purchase_orders=active_purchase_orders,
                monthly_revenue=monthly_revenue,
                total_revenue=total_revenue,
                total_expenses=total_expenses,
                total_profit=total_profit,
            ),
            errors=errors,
        )
