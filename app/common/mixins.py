"""
Common mixins for models
"""
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Enum, Uuid
from sqlalchemy.sql import func
from uuid import uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def value_enum(enum_cls, length: int = 30) -> Enum:
    """Columna Enum que guarda el valor ("Responsable Inscripto") y no el nombre del miembro"""
    return Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        validate_strings=True,
        length=length,
    )


class TimestampMixin:
    """Mixin for models that need timestamp tracking"""

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)


class BaseMixin(TimestampMixin):
    """UUID primary key plus timestamps for every business record"""

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
