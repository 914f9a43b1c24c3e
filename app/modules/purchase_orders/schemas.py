from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from uuid import UUID
import datetime as dt
from decimal import Decimal

from app.modules.contacts.schemas import (
    PartyFiscalData, PartySnapshot, normalize_text, parse_optional_id, parse_tax_id, parse_tax_condition
)
from app.modules.purchase_orders.models import PurchaseOrderStatus
from app.modules.taxes.schemas import PaymentCondition, TaxCondition, LineItem, require_items


class PurchaseOrderCreate(BaseModel):
    """Formulario de orden de compra"""
    order_number: str = Field(..., min_length=1, max_length=50, description="Número de orden")
    date: dt.date = Field(default_factory=dt.date.today)
    delivery_date: Optional[dt.date] = Field(None, description="Fecha de entrega estimada")

    # Proveedor
    supplier_id: Optional[UUID] = Field(None, description="Proveedor existente (opcional)")
    supplier_name: str = Field(..., min_length=1, max_length=200, description="Razón social")
    supplier_tax_id: Optional[str] = Field(None, description="CUIT/CUIL/DNI")
    supplier_tax_condition: Optional[TaxCondition] = None
    supplier_address: Optional[str] = None

    items: List[LineItem] = Field(..., min_length=1, description="Debe incluir al menos un item")
    payment_condition: PaymentCondition
    notes: Optional[str] = None
    status: PurchaseOrderStatus = PurchaseOrderStatus.PENDING

    @field_validator('order_number', 'supplier_name', mode='before')
    @classmethod
    def strip_required(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('supplier_address', 'notes', mode='before')
    @classmethod
    def strip_optional(cls, v):
        return normalize_text(v)

    @field_validator('delivery_date', mode='before')
    @classmethod
    def empty_delivery_date(cls, v):
        return normalize_text(v)

    @field_validator('supplier_id', mode='before')
    @classmethod
    def validate_supplier_id(cls, v):
        return parse_optional_id(v)

    @field_validator('supplier_tax_id', mode='before')
    @classmethod
    def validate_tax_id(cls, v):
        return parse_tax_id(v)

    @field_validator('supplier_tax_condition', mode='before')
    @classmethod
    def validate_tax_condition(cls, v):
        return parse_tax_condition(v)

    def fiscal_data(self) -> PartyFiscalData:
        return PartyFiscalData(
            name=self.supplier_name,
            tax_id=self.supplier_tax_id,
            tax_condition=self.supplier_tax_condition,
            address=self.supplier_address,
        )


class PurchaseOrderUpdate(BaseModel):
    """Solo se actualizan los campos enviados. Los datos del proveedor no se editan."""
    order_number: Optional[str] = Field(None, min_length=1, max_length=50)
    date: Optional[dt.date] = None
    delivery_date: Optional[dt.date] = None
    items: Optional[List[LineItem]] = None
    payment_condition: Optional[PaymentCondition] = None
    notes: Optional[str] = None
    status: Optional[PurchaseOrderStatus] = None

    @field_validator('order_number', mode='before')
    @classmethod
    def strip_order_number(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('notes', 'delivery_date', mode='before')
    @classmethod
    def strip_optional(cls, v):
        return normalize_text(v)

    @field_validator('items')
    @classmethod
    def validate_items(cls, v):
        return require_items(v)


class PurchaseOrderStatusUpdate(BaseModel):
    status: PurchaseOrderStatus


class PurchaseOrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: str
    date: dt.date
    delivery_date: Optional[dt.date] = None
    status: PurchaseOrderStatus
    supplier_id: Optional[UUID] = None
    supplier: PartySnapshot
    items: List[LineItem]
    payment_condition: PaymentCondition
    notes: Optional[str] = None
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime


class PurchaseOrderList(BaseModel):
    items: List[PurchaseOrderOut]
    total: int
    limit: int
    offset: int
