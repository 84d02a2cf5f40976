"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .indicator_dto import IndicatorDTO, ObservationDTO, SeriesDataDTO
from .sync_dto import FredSyncJobResponseDTO, FredSyncJobStatusDTO, FredSyncStateDTO

__all__ = [
    "IndicatorDTO",
    "ObservationDTO",
    "SeriesDataDTO",
    "FredSyncJobResponseDTO",
    "FredSyncJobStatusDTO",
    "FredSyncStateDTO",
]
