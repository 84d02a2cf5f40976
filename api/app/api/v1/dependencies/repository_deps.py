"""
Dependencias para inyección de repositorios.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database.session import get_db
from app.infrastructure.repositories.indicator_repository import IndicatorRepository


async def get_indicator_repository(
    session: AsyncSession = Depends(get_db)
) -> IndicatorRepository:
    """
    Dependencia para obtener el repositorio de indicadores.
    
    Args:
        session: Sesión de base de datos
        
    Returns:
        IndicatorRepository: Instancia del repositorio de indicadores
    """
    return IndicatorRepository(session)
