"""
DTOs relacionados con indicadores economicos.
Definen la estructura de datos que consume el dashboard.
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field


class IndicatorDTO(BaseModel):
    """DTO para una serie del catalogo."""

    series_id: str = Field(..., description="ID de la serie en FRED (ej: GDP)")
    description: Optional[str] = Field(None, description="Descripcion de la serie")

    class Config:
        from_attributes = True


class ObservationDTO(BaseModel):
    """Un punto de la serie. value=None es un hueco, no un cero."""

    date: date
    value: Optional[float] = None

    class Config:
        from_attributes = True


class SeriesDataDTO(BaseModel):
    """
    Datos de una serie listos para graficar.

    segments agrupa los puntos consecutivos con valor; cada hueco corta la linea.
    """

    series_id: str
    description: Optional[str] = None
    observations: List[ObservationDTO] = Field(default_factory=list)
    segments: List[List[ObservationDTO]] = Field(default_factory=list)
    non_null_points: int = 0
    has_enough_points: bool = Field(
        False, description="True si hay al menos 2 puntos con valor"
    )
