"""
Utilities for Reports module

Date ranges and CSV export for report data.
"""

import calendar
import csv
import io
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from fastapi import Response


def month_bounds(day: date) -> Tuple[date, date]:
    """First and last day of the calendar month containing `day`"""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def format_csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def create_csv_response(
    data: List[Dict[str, Any]],
    filename: str,
    headers: Dict[str, str] = None
) -> Response:
    """
    Create a CSV response from a list of dictionaries.

    Args:
        data: List of dictionaries with report data
        filename: Name for the CSV file
        headers: Optional mapping of field names to CSV headers
    """
    output = io.StringIO()

    fieldnames = list(headers.keys()) if headers else (list(data[0].keys()) if data else [])
    csv_headers = list(headers.values()) if headers else fieldnames

    writer = csv.DictWriter(output, fieldnames=fieldnames, extrasaction="ignore")
    writer.writerow(dict(zip(fieldnames, csv_headers)))
    for row in data:
        writer.writerow({key: format_csv_value(row.get(key)) for key in fieldnames})

    csv_content = output.getvalue()
    output.close()

    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


CSV_HEADERS = {
    "dashboard": {
        "total_invoices": "Facturas",
        "total_revenue": "Ingresos totales",
        "monthly_revenue": "Ingresos del mes",
        "total_expenses": "Gastos",
        "total_profit": "Ganancia",
        "total_purchase_orders": "Órdenes de compra",
        "active_purchase_orders": "Órdenes activas",
    }
}
