"""
Dashboard Reports Router
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from app.dependencies.dbDependecies import db_dependency
from ..services.dashboard import DashboardReportService
from ..schemas import DashboardResponse
from ..utils import create_csv_response, CSV_HEADERS


router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    db: db_dependency,
    export: Optional[str] = Query(None, pattern="^(csv)$", description="Export format: csv"),
):
    """
    Dashboard summary.

    Always answers 200: metrics that could not be computed are null and
    listed in `errors`, with `success` set to false.
    """
    report = DashboardReportService(db).get_dashboard()

    if export == "csv":
        return create_csv_response(
            [report.data.model_dump()],
            f"dashboard_{date.today().isoformat()}.csv",
            CSV_HEADERS["dashboard"]
        )

    return report
