"""
Excepciones de dominio del API de indicadores.
"""
from datetime import date
from typing import Optional

from app.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio (400 por defecto)."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None, status_code: int = 400):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details
        )


class EntityNotFoundException(DomainException):
    """La entidad pedida no existe (404)."""

    def __init__(self, entity_name: str, entity_id: str):
        super().__init__(
            message=f"{entity_name} con ID {entity_id} no encontrado",
            error_code="ENTITY_NOT_FOUND",
            details={"entity": entity_name, "id": str(entity_id)},
            status_code=404,
        )


class IndicatorNotFoundException(EntityNotFoundException):
    """La serie no está en economic_indicators."""

    def __init__(self, series_id: str):
        super().__init__("Indicator", series_id)
        self.series_id = series_id


class ValidationException(DomainException):
    """Parámetros de consulta inválidos."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field} if field else None,
        )


class InvalidDateRangeException(ValidationException):
    def __init__(self, start: date, end: date):
        super().__init__(
            f"Rango de fechas inválido: start={start.isoformat()} es posterior a end={end.isoformat()}",
            field="start",
        )


class ConflictException(DomainException):
    """La operación choca con el estado actual (409)."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)
