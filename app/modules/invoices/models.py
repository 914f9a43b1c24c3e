from app.database.database import Base
from sqlalchemy import Column, String, Date, Numeric, JSON, Uuid
from datetime import date
from app.common.mixins import BaseMixin, value_enum
from app.modules.taxes.schemas import InvoiceType, PaymentCondition
from app.core.config import settings
from app.modules.invoices.utils import format_currency, get_invoice_number, get_invoice_label


class Invoice(Base, BaseMixin):
    __tablename__ = "invoices"

    # Comprobante
    invoice_type = Column(value_enum(InvoiceType, length=10), nullable=False, index=True)
    point_of_sale = Column(String(10), nullable=True)  # Solo facturas AFIP
    invoice_number = Column(String(20), nullable=True)
    date = Column(Date, nullable=False, default=date.today, index=True)

    # Cliente: referencia débil (sin FK) + copia de datos al momento de emitir
    client_id = Column(Uuid, nullable=True, index=True)
    client = Column(JSON, nullable=False)

    # Contenido
    items = Column(JSON, nullable=False)
    payment_condition = Column(value_enum(PaymentCondition, length=20), nullable=False)

    # Totals (calculated)
    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    tax = Column(Numeric(15, 2), nullable=False, default=0)
    total = Column(Numeric(15, 2), nullable=False, default=0)

    @property
    def display_number(self) -> str:
        return get_invoice_number(self)

    @property
    def label(self) -> str:
        return get_invoice_label(self)

    @property
    def display_total(self) -> str:
        return format_currency(self.total, settings.CURRENCY_SYMBOL)
