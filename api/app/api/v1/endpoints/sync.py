"""
Endpoints para sincronizacion de datos externos.
Permite disparar el job FRED -> PostgreSQL y consultar su checkpoint.

En produccion el job corre por cron (scripts/fred_sync.py); estos endpoints
son para operacion manual.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from app.application.dto.sync_dto import (
    FredSyncJobResponseDTO,
    FredSyncJobStatusDTO,
    FredSyncStateDTO,
)
from app.application.use_cases.fred_sync_use_cases import FredSyncUseCases
from app.api.v1.dependencies.use_case_deps import get_fred_sync_use_cases


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/fred",
    response_model=FredSyncJobResponseDTO,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Sincronizar FRED con PostgreSQL"
)
async def sync_fred(
    use_cases: FredSyncUseCases = Depends(get_fred_sync_use_cases)
) -> FredSyncJobResponseDTO:
    """
    Inicia una corrida del job en background.

    La corrida:
    - Continua desde el offset persistido (o empieza un ciclo nuevo si termino el anterior)
    - Procesa una serie a la vez con pausa fija entre series
    - Usa un lock para evitar ejecuciones concurrentes

    Returns:
        FredSyncJobResponseDTO con el job_id para hacer polling
    """
    logger.info("Iniciando sincronizacion FRED -> PostgreSQL desde API")
    return await use_cases.start_sync()


@router.get(
    "/fred/jobs/{job_id}",
    response_model=FredSyncJobStatusDTO,
    summary="Estado de un job de sincronizacion FRED"
)
async def get_fred_sync_job(
    job_id: str,
    use_cases: FredSyncUseCases = Depends(get_fred_sync_use_cases)
) -> FredSyncJobStatusDTO:
    try:
        return await use_cases.get_job_status(job_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job no encontrado")


@router.get(
    "/fred/state",
    response_model=FredSyncStateDTO,
    summary="Checkpoint del job FRED"
)
async def get_fred_sync_state(
    use_cases: FredSyncUseCases = Depends(get_fred_sync_use_cases)
) -> FredSyncStateDTO:
    """
    Retorna el offset persistido y el resultado de la ultima corrida.
    """
    return await use_cases.get_state()


@router.post(
    "/fred/reset",
    response_model=FredSyncStateDTO,
    summary="Reiniciar el ciclo del job FRED"
)
async def reset_fred_sync(
    use_cases: FredSyncUseCases = Depends(get_fred_sync_use_cases)
) -> FredSyncStateDTO:
    """
    Pone el offset en 0: la proxima corrida recorre el catalogo completo.
    Es seguro porque el re-proceso es idempotente (UPSERT).
    """
    return await use_cases.reset_offset()
