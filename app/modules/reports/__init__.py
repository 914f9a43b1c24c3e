"""
Reports Module

Dashboard aggregates derived from invoices and purchase orders.

This module does NOT create tables; it runs sum/count queries over the
tables owned by the invoices and purchase_orders modules.

Architecture Pattern: Service Layer
- routers/ -> FastAPI endpoints
- services/ -> aggregate queries, one independent query per metric
- schemas/ -> Pydantic response models
- utils/ -> date ranges and CSV export
"""

from .routers import dashboard_router

__all__ = ["dashboard_router"]
