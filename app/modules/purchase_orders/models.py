from app.database.database import Base
from sqlalchemy import Column, String, Date, Numeric, Text, JSON, Uuid
from datetime import date
from app.common.mixins import BaseMixin, value_enum
from app.modules.taxes.schemas import PaymentCondition
import enum


class PurchaseOrderStatus(str, enum.Enum):
    PENDING = "Pendiente"
    IN_PROGRESS = "En Proceso"
    COMPLETED = "Completada"
    CANCELLED = "Cancelada"


# Órdenes que ya no están en curso
CLOSED_STATUSES = (PurchaseOrderStatus.COMPLETED, PurchaseOrderStatus.CANCELLED)


class PurchaseOrder(Base, BaseMixin):
    __tablename__ = "purchase_orders"

    order_number = Column(String(50), nullable=False, index=True)
    date = Column(Date, nullable=False, default=date.today, index=True)
    delivery_date = Column(Date, nullable=True)
    status = Column(value_enum(PurchaseOrderStatus, length=20), nullable=False,
                    default=PurchaseOrderStatus.PENDING, index=True)

    # Proveedor: referencia débil (sin FK) + copia de datos al momento de emitir
    supplier_id = Column(Uuid, nullable=True, index=True)
    supplier = Column(JSON, nullable=False)

    # Contenido
    items = Column(JSON, nullable=False)
    payment_condition = Column(value_enum(PaymentCondition, length=20), nullable=False)
    notes = Column(Text, nullable=True)

    # Totals (calculated)
    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    tax = Column(Numeric(15, 2), nullable=False, default=0)
    total = Column(Numeric(15, 2), nullable=False, default=0)
