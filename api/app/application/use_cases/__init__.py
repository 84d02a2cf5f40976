"""
Casos de uso de la aplicacion.
"""
from .indicator_use_cases import IndicatorUseCases
from .fred_sync_use_cases import FredSyncUseCases

__all__ = ["IndicatorUseCases", "FredSyncUseCases"]
