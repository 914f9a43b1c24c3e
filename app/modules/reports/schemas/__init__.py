"""
Pydantic schemas for Reports module
"""

from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field


class DashboardData(BaseModel):
    """Dashboard figures. A metric that could not be computed is None"""
    total_invoices: Optional[int] = Field(None, description="Number of invoices")
    total_purchase_orders: Optional[int] = Field(None, description="Number of purchase orders, any status")
    active_purchase_orders: Optional[int] = Field(None, description="Orders not completed nor cancelled")
    monthly_revenue: Optional[Decimal] = Field(None, description="Invoiced in the current calendar month")
    total_revenue: Optional[Decimal] = Field(None, description="Invoiced, all time")
    total_expenses: Optional[Decimal] = Field(None, description="Purchase orders excluding cancelled")
    total_profit: Optional[Decimal] = Field(None, description="total_revenue - total_expenses")


class DashboardResponse(BaseModel):
    success: bool
    data: DashboardData
    errors: Dict[str, str] = Field(default_factory=dict, description="Failed metric -> message")
