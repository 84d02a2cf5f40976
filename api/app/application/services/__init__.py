"""
Servicios de aplicacion.

Contiene la logica de negocio reutilizable que no pertenece
a un caso de uso especifico.
"""
from app.application.services.series_segments import (
    split_into_segments,
    count_non_null,
    has_enough_points,
)

__all__ = [
    "split_into_segments",
    "count_non_null",
    "has_enough_points",
]
