from pydantic import BaseModel, ConfigDict, Field, field_validator
from decimal import Decimal, InvalidOperation
from typing import List
from enum import Enum


class TaxRate(str, Enum):
    """Alícuotas de IVA (porcentaje)"""
    EXEMPT = "0"
    REDUCED = "10.5"
    GENERAL = "21"

    @property
    def percentage(self) -> Decimal:
        return Decimal(self.value)


class TaxCondition(str, Enum):
    """Condición frente al IVA"""
    RESPONSABLE_INSCRIPTO = "Responsable Inscripto"
    CONSUMIDOR_FINAL = "Consumidor Final"
    EXENTO = "Exento"
    MONOTRIBUTO = "Monotributo"


class InvoiceType(str, Enum):
    """Tipo de comprobante AFIP (A/B/C) o venta sin facturar"""
    A = "A"
    B = "B"
    C = "C"
    UNBILLED = "Unbilled"


class PaymentCondition(str, Enum):
    """Condición de venta / pago"""
    CONTADO = "Contado"
    TARJETA = "Tarjeta"
    TRANSFERENCIA = "Transferencia"
    CHEQUE = "Cheque"


def coerce_tax_rate(v):
    """Acepta la alícuota como texto o número (21, 10.5, "21.0")."""
    if isinstance(v, TaxRate) or v is None:
        return v
    if isinstance(v, (int, float, Decimal, str)):
        try:
            number = Decimal(str(v).strip())
        except InvalidOperation:
            return v
        for rate in TaxRate:
            if rate.percentage == number:
                return rate
    return v


class LineItem(BaseModel):
    """Ítem de factura u orden de compra"""
    model_config = ConfigDict(frozen=True)

    description: str = Field(..., min_length=1, max_length=500, description="Descripción del ítem")
    quantity: Decimal = Field(..., gt=0, description="Cantidad debe ser mayor a 0")
    unit_price: Decimal = Field(..., ge=0, description="Precio unitario sin IVA")
    tax_rate: TaxRate = Field(..., description="Alícuota de IVA: 0, 10.5 o 21")

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if not v.strip():
            raise ValueError('La descripción es requerida')
        return v.strip()

    @field_validator('tax_rate', mode='before')
    @classmethod
    def parse_tax_rate(cls, v):
        return coerce_tax_rate(v)


def require_items(v):
    """Listas de ítems opcionales (actualizaciones): si se envían, no pueden estar vacías"""
    if v is not None and len(v) == 0:
        raise ValueError('Debe haber al menos un item')
    return v


class Totals(BaseModel):
    """Totales calculados de un documento (redondeados a 2 decimales)"""
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    tax: Decimal
    total: Decimal


class TotalsRequest(BaseModel):
    items: List[LineItem] = Field(..., min_length=1, description="Debe incluir al menos un item")


class TaxRateOut(BaseModel):
    code: TaxRate
    name: str
    rate: Decimal


class TaxConditionList(BaseModel):
    items: List[TaxCondition]
