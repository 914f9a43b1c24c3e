"""
Base service class for Reports module

Runs each metric in isolation: a store error on one metric is logged and
reported without aborting the rest of the report.
"""

import logging
from decimal import Decimal
from typing import Callable, Dict, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.common.exceptions import StoreFailure
from app.modules.invoices.crud import InvoiceCrud
from app.modules.purchase_orders.crud import PurchaseOrderCrud
from app.modules.taxes.calculator import round2

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_amount(value) -> Decimal:
    """Normalize a SQL sum (Decimal, int, float or None) to a 2-decimal amount"""
    if value is None:
        return round2(Decimal("0"))
    return round2(Decimal(str(value)))


class BaseReportService:
    """Base service class for all report services"""

    def __init__(self, db: Session):
        self.db = db
        self.invoices = InvoiceCrud(db)
        self.purchase_orders = PurchaseOrderCrud(db)

    def _metric(self, name: str, query: Callable[[], T], errors: Dict[str, str]) -> Optional[T]:
        """
        Run a single metric query.

        Returns None and records the failure in `errors` when the store fails.
        The session is rolled back so the next metric starts clean.
        """
        try:
            return query()
        except SQLAlchemyError as e:
            self.db.rollback()
            failure = StoreFailure(f"Error computing {name}: {str(e)}")
            logger.error(failure.message)
            errors[name] = failure.message
            return None
