"""
Implementación del repositorio de indicadores (lado lectura del API).
Maneja las consultas sobre economic_indicators, fred_data y function_state.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database.models import (
    EconomicIndicatorModel,
    FredDataModel,
    FunctionStateModel,
)


class IndicatorRepository:
    """Repositorio para consultar series y observaciones sincronizadas desde FRED."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> List[EconomicIndicatorModel]:
        """
        Obtiene el catalogo de series, en el mismo orden que recorre el job.
        """
        result = await self.db.execute(
            select(EconomicIndicatorModel).order_by(EconomicIndicatorModel.series_id)
        )
        return result.scalars().all()

    async def get_by_id(self, series_id: str) -> Optional[EconomicIndicatorModel]:
        result = await self.db.execute(
            select(EconomicIndicatorModel).where(EconomicIndicatorModel.series_id == series_id)
        )
        return result.scalars().first()

    async def get_observations(
        self,
        series_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[FredDataModel]:
        """
        Obtiene las observaciones de una serie ordenadas por fecha ascendente.
        Los valores NULL se mantienen (son huecos, no ceros).
        """
        query = select(FredDataModel).where(FredDataModel.series_id == series_id)
        if start is not None:
            query = query.where(FredDataModel.date >= start)
        if end is not None:
            query = query.where(FredDataModel.date <= end)
        result = await self.db.execute(query.order_by(FredDataModel.date.asc()))
        return result.scalars().all()

    async def get_sync_state(self, row_id: int = 1) -> Optional[FunctionStateModel]:
        return await self.db.get(FunctionStateModel, row_id)

    async def try_sync_lock(self, lock_key: int) -> bool:
        """
        Intenta tomar el advisory lock del job dentro de la transaccion actual.

        Se libera con el commit/rollback. Fuera de Postgres no hay lock y retorna True.
        """
        if self.db.get_bind().dialect.name != "postgresql":
            return True
        result = await self.db.execute(
            text("SELECT pg_try_advisory_xact_lock(:key)"), {"key": lock_key}
        )
        return bool(result.scalar())

    async def reset_offset(self, row_id: int = 1) -> FunctionStateModel:
        """
        Pone current_offset en 0 (crea la fila si no existe).
        El caller controla el commit.
        """
        state = await self.db.get(FunctionStateModel, row_id)
        if state is None:
            state = FunctionStateModel(id=row_id, current_offset=0)
            self.db.add(state)
        else:
            state.current_offset = 0
        await self.db.flush()
        return state
