from fastapi import APIRouter
from typing import List

from app.modules.taxes.calculator import document_totals, tax_rate_catalog
from app.modules.taxes.schemas import (
    TaxCondition, TaxConditionList, TaxRateOut, Totals, TotalsRequest
)

taxes_router = APIRouter(prefix="/taxes", tags=["Taxes"])


@taxes_router.get("/rates", response_model=List[TaxRateOut])
def list_tax_rates():
    """
    Listar alícuotas de IVA disponibles: 0%, 10,5% y 21%
    """
    return tax_rate_catalog()


@taxes_router.get("/tax-conditions", response_model=TaxConditionList)
def list_tax_conditions():
    """Condiciones frente al IVA"""
    return TaxConditionList(items=list(TaxCondition))


@taxes_router.post("/calculate", response_model=Totals)
def calculate_totals(data: TotalsRequest):
    """
    Calcular subtotal, IVA y total de una lista de ítems

    El redondeo a 2 decimales se aplica sobre los acumulados.
    """
    return document_totals(data.items)
