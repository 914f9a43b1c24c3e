"""
Modelos SQLAlchemy para el módulo de Contactos

Clientes (facturas de venta) y proveedores (órdenes de compra) comparten
la misma identidad fiscal:
- Razón social
- CUIT/CUIL/DNI (7 a 11 dígitos)
- Condición frente al IVA
- Domicilio

Los documentos guardan una referencia débil (id) más una copia de estos
datos, por lo que un contacto puede editarse o eliminarse sin alterar
facturas ni órdenes ya emitidas.
"""

from app.database.database import Base
from sqlalchemy import Column, String, Text
from app.common.mixins import BaseMixin, value_enum
from app.modules.taxes.schemas import TaxCondition


# ===== MODELOS =====

class PartyMixin:
    """Identidad fiscal compartida por clientes y proveedores"""

    name = Column(String(200), nullable=False, index=True)

    # Identificación fiscal
    tax_id = Column(String(11), nullable=True, index=True)  # CUIT/CUIL/DNI solo dígitos
    tax_condition = Column(value_enum(TaxCondition), nullable=True)
    address = Column(Text, nullable=True)

    # Contacto
    email = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)


class Client(Base, BaseMixin, PartyMixin):
    """Clientes para facturas de venta"""
    __tablename__ = "clients"


class Supplier(Base, BaseMixin, PartyMixin):
    """Proveedores para órdenes de compra"""
    __tablename__ = "suppliers"

    contact_person = Column(String(200), nullable=True)  # Persona de contacto
