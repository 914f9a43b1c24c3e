"""
Errores de dominio compartidos por los módulos.

Los servicios los lanzan y main.py los traduce a respuestas HTTP:
- ValidationError -> 422
- NotFoundError -> 404
- StoreFailure -> 503
"""
from typing import Dict, Optional


class DomainError(Exception):
    """Base de los errores de negocio"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Campos faltantes o mal formados, con errores por campo"""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class NotFoundError(DomainError):
    def __init__(self, resource: str, resource_id):
        super().__init__(f"{resource} no encontrado")
        self.resource = resource
        self.resource_id = resource_id


class StoreFailure(DomainError):
    """La base de datos no respondió o rechazó la operación"""


class ReconciliationFailure(DomainError):
    """
    Error al buscar/crear/actualizar un cliente o proveedor durante el guardado
    de un documento. Solo se registra en el log, nunca se propaga.
    """

    def __init__(self, kind: str, name: Optional[str], cause: Exception):
        super().__init__(f"No se pudo conciliar {kind} '{name or ''}': {cause}")
        self.kind = kind
        self.name = name
        self.cause = cause
