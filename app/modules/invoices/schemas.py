from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict
from uuid import UUID
import datetime as dt
from decimal import Decimal

from app.common.validators import clean_tax_id
from app.modules.contacts.schemas import (
    PartyFiscalData, PartySnapshot, normalize_text, parse_optional_id, parse_tax_id, parse_tax_condition
)
from app.modules.taxes.schemas import InvoiceType, PaymentCondition, TaxCondition, LineItem, require_items


class InvoiceCreate(BaseModel):
    """
    Formulario de factura

    Punto de venta, número, CUIT de 11 dígitos y condición frente al IVA son
    obligatorios solo para facturas A, B y C. Esa validación la hace el
    servicio y reporta todos los campos faltantes juntos.
    """
    invoice_type: InvoiceType
    point_of_sale: Optional[str] = Field(None, max_length=10, description="Punto de venta, ej: 0001")
    invoice_number: Optional[str] = Field(None, max_length=20, description="Número de comprobante")
    date: dt.date = Field(default_factory=dt.date.today)

    # Cliente
    client_id: Optional[UUID] = Field(None, description="Cliente existente (opcional)")
    client_name: str = Field(..., min_length=1, max_length=200, description="Razón social")
    client_tax_id: Optional[str] = Field(None, description="CUIT/CUIL/DNI")
    client_tax_condition: Optional[TaxCondition] = None
    client_address: Optional[str] = None

    items: List[LineItem] = Field(..., min_length=1, description="Debe incluir al menos un item")
    payment_condition: PaymentCondition

    @field_validator('point_of_sale', 'invoice_number', 'client_address', mode='before')
    @classmethod
    def strip_optional(cls, v):
        return normalize_text(v)

    @field_validator('client_id', mode='before')
    @classmethod
    def validate_client_id(cls, v):
        return parse_optional_id(v)

    @field_validator('client_name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('client_tax_id', mode='before')
    @classmethod
    def validate_tax_id(cls, v):
        return parse_tax_id(v)

    @field_validator('client_tax_condition', mode='before')
    @classmethod
    def validate_tax_condition(cls, v):
        return parse_tax_condition(v)

    def fiscal_data(self) -> PartyFiscalData:
        return PartyFiscalData(
            name=self.client_name,
            tax_id=self.client_tax_id,
            tax_condition=self.client_tax_condition,
            address=self.client_address,
        )


class InvoiceUpdate(BaseModel):
    """Solo se actualizan los campos enviados. Los datos del cliente no se editan."""
    invoice_type: Optional[InvoiceType] = None
    point_of_sale: Optional[str] = Field(None, max_length=10)
    invoice_number: Optional[str] = Field(None, max_length=20)
    date: Optional[dt.date] = None
    items: Optional[List[LineItem]] = None
    payment_condition: Optional[PaymentCondition] = None

    @field_validator('point_of_sale', 'invoice_number', mode='before')
    @classmethod
    def strip_optional(cls, v):
        return normalize_text(v)

    @field_validator('items')
    @classmethod
    def validate_items(cls, v):
        return require_items(v)


class InvoiceValidationRequest(BaseModel):
    """Datos fiscales a validar antes de guardar"""
    invoice_type: InvoiceType
    point_of_sale: Optional[str] = None
    invoice_number: Optional[str] = None
    client_tax_id: Optional[str] = None
    client_tax_condition: Optional[TaxCondition] = None

    @field_validator('client_tax_id', mode='before')
    @classmethod
    def normalize_tax_id(cls, v):
        return clean_tax_id(v)

    @field_validator('client_tax_condition', mode='before')
    @classmethod
    def validate_tax_condition(cls, v):
        return parse_tax_condition(v)


class InvoiceValidation(BaseModel):
    is_valid: bool
    requires_fiscal_data: bool
    errors: Dict[str, str] = {}


class InvoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_type: InvoiceType
    point_of_sale: Optional[str] = None
    invoice_number: Optional[str] = None
    display_number: str
    label: str
    date: dt.date
    client_id: Optional[UUID] = None
    client: PartySnapshot
    items: List[LineItem]
    payment_condition: PaymentCondition
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    display_total: str
    created_at: dt.datetime
    updated_at: dt.datetime


class InvoiceList(BaseModel):
    items: List[InvoiceOut]
    total: int
    limit: int
    offset: int
