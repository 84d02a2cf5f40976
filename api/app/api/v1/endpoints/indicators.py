"""
Endpoints de lectura de indicadores economicos (datos que consume el dashboard).
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from app.application.dto.indicator_dto import IndicatorDTO, SeriesDataDTO
from app.application.use_cases.indicator_use_cases import IndicatorUseCases
from app.api.v1.dependencies.use_case_deps import get_indicator_use_cases

router = APIRouter(prefix="/indicators", tags=["Indicators"])


@router.get("/", response_model=List[IndicatorDTO])
async def get_all_indicators(
    use_cases: IndicatorUseCases = Depends(get_indicator_use_cases)
):
    """
    Obtener el catalogo de series rastreadas.
    """
    return await use_cases.get_all_indicators()


@router.get("/{series_id}/observations", response_model=SeriesDataDTO)
async def get_series_observations(
    series_id: str,
    start: Optional[date] = Query(None, description="Fecha minima (YYYY-MM-DD)"),
    end: Optional[date] = Query(None, description="Fecha maxima (YYYY-MM-DD)"),
    use_cases: IndicatorUseCases = Depends(get_indicator_use_cases)
):
    """
    Obtener las observaciones de una serie ordenadas por fecha,
    con los tramos sin huecos listos para graficar.
    """
    return await use_cases.get_series_data(series_id, start=start, end=end)
