"""
Routers package for Reports module
"""

from .dashboard import router as dashboard_router

__all__ = ["dashboard_router"]
