"""
Validadores específicos para Argentina
"""
import re
from typing import Optional


TAX_ID_MIN_LENGTH = 7
TAX_ID_MAX_LENGTH = 11
CUIT_LENGTH = 11


def clean_tax_id(value: Optional[str]) -> Optional[str]:
    """
    Limpia un CUIT/CUIL/DNI quitando espacios, puntos y guiones.
    Retorna None si el valor queda vacío.
    """
    if value is None:
        return None
    cleaned = re.sub(r'[\.\s\-]', '', str(value))
    return cleaned or None


def validate_tax_id(value: Optional[str]) -> bool:
    """
    Valida un identificador fiscal (CUIT/CUIL/DNI).
    - Solo números
    - Entre 7 y 11 dígitos
    """
    if not value:
        return False
    if not value.isdigit():
        return False
    return TAX_ID_MIN_LENGTH <= len(value) <= TAX_ID_MAX_LENGTH


def validate_afip_tax_id(value: Optional[str]) -> bool:
    """
    Valida un CUIT/CUIL para comprobantes AFIP: exactamente 11 dígitos.
    """
    return validate_tax_id(value) and len(value) == CUIT_LENGTH


def format_cuit(value: str) -> str:
    """
    Formatea CUIT al formato estándar XX-XXXXXXXX-X
    """
    cleaned = clean_tax_id(value)
    if not validate_afip_tax_id(cleaned):
        return value  # Retorna sin cambios si no es válido

    return f"{cleaned[:2]}-{cleaned[2:10]}-{cleaned[10]}"
