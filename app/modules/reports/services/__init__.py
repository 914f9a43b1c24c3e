"""
Services package for Reports module
"""

from .dashboard import DashboardReportService

__all__ = ["DashboardReportService"]
