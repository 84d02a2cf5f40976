"""
Casos de uso relacionados con indicadores economicos.
Contiene la logica para consultar el catalogo y los datos de cada serie.
"""
from datetime import date
from typing import List, Optional

from app.application.dto.indicator_dto import IndicatorDTO, ObservationDTO, SeriesDataDTO
from app.application.services.series_segments import (
    count_non_null,
    has_enough_points,
    split_into_segments,
)
from app.infrastructure.repositories.indicator_repository import IndicatorRepository
from app.shared.exceptions.domain import IndicatorNotFoundException, InvalidDateRangeException


class IndicatorUseCases:
    """
    Casos de uso de lectura sobre las series sincronizadas desde FRED.
    """

    def __init__(self, repository: IndicatorRepository):
        self.repository = repository

    async def get_all_indicators(self) -> List[IndicatorDTO]:
        """
        Obtiene todas las series rastreadas.

        Returns:
            List[IndicatorDTO]: Catalogo de series
        """
        indicators = await self.repository.get_all()
        return [IndicatorDTO.model_validate(i) for i in indicators]

    async def get_series_data(
        self,
        series_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> SeriesDataDTO:
        """
        Obtiene las observaciones de una serie, ordenadas y segmentadas por huecos.

        Raises:
            IndicatorNotFoundException: Si la serie no esta en el catalogo
            InvalidDateRangeException: Si start > end
        """
        if start and end and start > end:
            raise InvalidDateRangeException(start, end)

        indicator = await self.repository.get_by_id(series_id)
        if not indicator:
            raise IndicatorNotFoundException(series_id)

        rows = await self.repository.get_observations(series_id, start=start, end=end)
        observations = [ObservationDTO(date=r.date, value=r.value) for r in rows]

        return SeriesDataDTO(
            series_id=indicator.series_id,
            description=indicator.description,
            observations=observations,
            segments=split_into_segments(observations),
            non_null_points=count_non_null(observations),
            has_enough_points=has_enough_points(observations),
        )
