"""
Esquemas Pydantic para el módulo de Contactos

Define la validación de datos de entrada y salida para:
- Client / Supplier: alta, edición y consulta
- PartyFiscalData: datos fiscales tipeados en un formulario de documento
- PartySnapshot: copia inmutable guardada dentro de facturas y órdenes
"""

import re
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.common.validators import clean_tax_id, validate_tax_id
from app.modules.taxes.schemas import TaxCondition


EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def normalize_text(v):
    """Quita espacios y convierte cadenas vacías en None"""
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


def parse_tax_id(v):
    """Limpia separadores y valida 7 a 11 dígitos. Vacío -> None"""
    if v is None:
        return None
    cleaned = clean_tax_id(v)
    if cleaned is None:
        return None
    if not validate_tax_id(cleaned):
        raise ValueError('El CUIT/CUIL/DNI debe tener entre 7 y 11 dígitos numéricos')
    return cleaned


def parse_tax_condition(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def parse_optional_id(v):
    """Id de contacto elegido en un formulario. Vacío -> None"""
    if isinstance(v, str) and not v.strip():
        return None
    return v


# ===== DATOS FISCALES =====

class PartyFiscalData(BaseModel):
    """
    Datos fiscales de un cliente/proveedor tal como vienen en el formulario
    de un documento. Se pasa por valor entre conciliación y armado del documento.
    """
    model_config = ConfigDict(frozen=True)

    name: str = ""
    tax_id: Optional[str] = None
    tax_condition: Optional[TaxCondition] = None
    address: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, v):
        return (v or "").strip()

    @field_validator('tax_id', mode='before')
    @classmethod
    def validate_tax_id(cls, v):
        return clean_tax_id(v)

    @field_validator('tax_condition', mode='before')
    @classmethod
    def validate_tax_condition(cls, v):
        return parse_tax_condition(v)

    @field_validator('address', mode='before')
    @classmethod
    def validate_address(cls, v):
        return normalize_text(v)

    def has_extra_data(self) -> bool:
        """True si trae CUIT, condición o domicilio"""
        return bool(self.tax_id or self.tax_condition or self.address)


class PartySnapshot(BaseModel):
    """Copia de los datos fiscales al momento de crear el documento"""
    model_config = ConfigDict(frozen=True)

    party_id: Optional[UUID] = None
    name: str = ""
    tax_id: Optional[str] = None
    tax_condition: Optional[TaxCondition] = None
    address: Optional[str] = None

    @classmethod
    def from_fiscal_data(cls, fiscal: PartyFiscalData, party_id: Optional[UUID]) -> "PartySnapshot":
        return cls(
            party_id=party_id,
            name=fiscal.name,
            tax_id=fiscal.tax_id,
            tax_condition=fiscal.tax_condition,
            address=fiscal.address,
        )


# ===== CLIENT / SUPPLIER SCHEMAS =====

class PartyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Razón social")
    tax_id: Optional[str] = Field(None, description="CUIT/CUIL/DNI, solo dígitos")
    tax_condition: Optional[TaxCondition] = Field(None, description="Condición frente al IVA")
    address: Optional[str] = Field(None, description="Domicilio")
    email: Optional[str] = Field(None, max_length=100, description="Email")
    phone: Optional[str] = Field(None, max_length=50, description="Teléfono")
    notes: Optional[str] = Field(None, description="Notas adicionales")

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('tax_id', mode='before')
    @classmethod
    def validate_tax_id(cls, v):
        return parse_tax_id(v)

    @field_validator('tax_condition', mode='before')
    @classmethod
    def validate_tax_condition(cls, v):
        return parse_tax_condition(v)

    @field_validator('address', 'phone', 'notes', mode='before')
    @classmethod
    def strip_optional(cls, v):
        return normalize_text(v)

    @field_validator('email', mode='before')
    @classmethod
    def validate_email(cls, v):
        v = normalize_text(v)
        if v and not re.match(EMAIL_PATTERN, v):
            raise ValueError('Email debe tener formato válido')
        return v


class ClientCreate(PartyBase):
    pass


class SupplierCreate(PartyBase):
    contact_person: Optional[str] = Field(None, max_length=200, description="Persona de contacto")

    @field_validator('contact_person', mode='before')
    @classmethod
    def strip_contact_person(cls, v):
        return normalize_text(v)


class PartyUpdate(BaseModel):
    """Solo se actualizan los campos enviados"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    tax_id: Optional[str] = None
    tax_condition: Optional[TaxCondition] = None
    address: Optional[str] = None
    email: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('tax_id', mode='before')
    @classmethod
    def validate_tax_id(cls, v):
        return parse_tax_id(v)

    @field_validator('tax_condition', mode='before')
    @classmethod
    def validate_tax_condition(cls, v):
        return parse_tax_condition(v)

    @field_validator('address', 'phone', 'notes', mode='before')
    @classmethod
    def strip_optional(cls, v):
        return normalize_text(v)

    @field_validator('email', mode='before')
    @classmethod
    def validate_email(cls, v):
        v = normalize_text(v)
        if v and not re.match(EMAIL_PATTERN, v):
            raise ValueError('Email debe tener formato válido')
        return v


class ClientUpdate(PartyUpdate):
    pass


class SupplierUpdate(PartyUpdate):
    contact_person: Optional[str] = Field(None, max_length=200)

    @field_validator('contact_person', mode='before')
    @classmethod
    def strip_contact_person(cls, v):
        return normalize_text(v)


class ClientOut(BaseModel):
    id: UUID
    name: str
    tax_id: Optional[str] = None
    tax_condition: Optional[TaxCondition] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SupplierOut(ClientOut):
    contact_person: Optional[str] = None


class ClientList(BaseModel):
    items: List[ClientOut]
    total: int


class SupplierList(BaseModel):
    items: List[SupplierOut]
    total: int
