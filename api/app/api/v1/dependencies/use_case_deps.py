"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends

from app.application.use_cases.indicator_use_cases import IndicatorUseCases
from app.application.use_cases.fred_sync_use_cases import FredSyncUseCases
from app.api.v1.dependencies.repository_deps import get_indicator_repository
from app.infrastructure.repositories.indicator_repository import IndicatorRepository


def get_indicator_use_cases(
    repository: IndicatorRepository = Depends(get_indicator_repository)
) -> IndicatorUseCases:
    """
    Dependencia para obtener los casos de uso de indicadores.
    
    Returns:
        IndicatorUseCases: Instancia de casos de uso de indicadores
    """
    return IndicatorUseCases(repository)


def get_fred_sync_use_cases(
    repository: IndicatorRepository = Depends(get_indicator_repository)
) -> FredSyncUseCases:
    """
    Dependencia para obtener los casos de uso del job de sincronizacion FRED.
    
    Returns:
        FredSyncUseCases: Instancia de casos de uso de sincronizacion
    """
    return FredSyncUseCases(repository)
