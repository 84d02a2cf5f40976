"""
Casos de uso para disparar y monitorear el job de sincronizacion FRED desde el API.

Patron asincrono:
- El endpoint inicia el job en background y retorna inmediatamente un job_id.
- El cliente hace polling al endpoint de status hasta que el job termine.
- El job es sincrono (requests + psycopg) y corre en un thread aparte
  para no bloquear el event loop.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from loguru import logger

from app.application.dto.sync_dto import (
    FredSyncJobResponseDTO,
    FredSyncJobStatusDTO,
    FredSyncStateDTO,
)
from app.core.config import settings
from app.infrastructure.external.fred_sync.sync_service import run_fred_sync
from app.infrastructure.external.fred_sync.types import SyncReport
from app.infrastructure.repositories.indicator_repository import IndicatorRepository
from app.shared.exceptions.domain import ConflictException


@dataclass
class _JobState:
    """Estado interno de un job de sincronizacion FRED."""

    job_id: str
    status: str  # running, completed, failed
    message: str
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    error: Optional[str] = None
    report: Optional[Dict[str, Any]] = None


class FredSyncUseCases:
    """
    Orquestador de jobs de sincronizacion FRED disparados desde el API.

    Los jobs se guardan en memoria (dict). Solo se permite un job corriendo
    por proceso: si ya hay uno, se retorna ese mismo.
    """

    _jobs: Dict[str, _JobState] = {}
    _jobs_lock = asyncio.Lock()

    def __init__(
        self,
        repository: Optional[IndicatorRepository] = None,
        runner: Callable[[], SyncReport] = run_fred_sync,
    ):
        self.repository = repository
        self._runner = runner

    async def start_sync(self) -> FredSyncJobResponseDTO:
        """
        Inicia una corrida del job en background.

        Returns:
            FredSyncJobResponseDTO: Respuesta inmediata con job_id para polling
        """
        async with self._jobs_lock:
            running = next((j for j in self._jobs.values() if j.status == "running"), None)
            if running is not None:
                logger.info(f"[fred-sync] Ya hay un job corriendo: {running.job_id}")
                return self._to_response(running)

            now = datetime.now(timezone.utc)
            job = _JobState(
                job_id=str(uuid.uuid4()),
                status="running",
                message="Iniciando sincronizacion con FRED...",
                created_at=now,
                updated_at=now,
            )
            self._jobs[job.job_id] = job

        # Ejecutar en background sin bloquear la request
        asyncio.create_task(self._run_job(job.job_id))
        return self._to_response(job)

    async def get_job_status(self, job_id: str) -> FredSyncJobStatusDTO:
        """
        Obtiene el estado actual de un job (para polling).

        Raises:
            KeyError: Si el job no existe
        """
        async with self._jobs_lock:
            job = self._jobs.get(job_id)

        if job is None:
            raise KeyError("job_not_found")

        return FredSyncJobStatusDTO(
            job_id=job.job_id,
            status=job.status,
            message=job.message,
            created_at=job.created_at,
            updated_at=job.updated_at,
            completed_at=job.completed_at,
            error=job.error,
            report=job.report,
        )

    async def get_state(self) -> FredSyncStateDTO:
        """Lee el checkpoint persistido y el tamano actual del catalogo."""
        state = await self.repository.get_sync_state(settings.FRED_SYNC_CHECKPOINT_ROW_ID)
        catalog = await self.repository.get_all()
        if state is None:
            return FredSyncStateDTO(current_offset=0, catalog_size=len(catalog))
        return FredSyncStateDTO(
            current_offset=state.current_offset or 0,
            catalog_size=len(catalog),
            last_run_started_at=state.last_run_started_at,
            last_run_completed_at=state.last_run_completed_at,
            last_run_status=state.last_run_status,
            last_run_error=state.last_run_error,
        )

    async def reset_offset(self) -> FredSyncStateDTO:
        """
        Fuerza que la proxima corrida empiece el catalogo desde 0.

        Raises:
            ConflictException: Si hay un job corriendo (su proximo checkpoint pisaria el reset)
        """
        async with self._jobs_lock:
            running = next((j for j in self._jobs.values() if j.status == "running"), None)
        if running is not None:
            raise ConflictException(
                f"No se puede reiniciar el offset: el job {running.job_id} esta corriendo",
                error_code="SYNC_RUNNING",
            )

        if not await self.repository.try_sync_lock(settings.FRED_SYNC_LOCK_KEY):
            raise ConflictException(
                "No se puede reiniciar el offset: hay una corrida del job en curso",
                error_code="SYNC_RUNNING",
            )
        await self.repository.reset_offset(settings.FRED_SYNC_CHECKPOINT_ROW_ID)
        await self.repository.db.commit()
        logger.info("[fred-sync] current_offset reseteado a 0 desde API")
        return await self.get_state()

    async def _update_job(self, job_id: str, **changes: Any) -> None:
        """Actualiza campos del job de forma thread-safe."""
        async with self._jobs_lock:
            job = self._jobs.get(job_id)
            if job is None:
                return
            for k, v in changes.items():
                setattr(job, k, v)
            job.updated_at = datetime.now(timezone.utc)

    async def _run_job(self, job_id: str) -> None:
        try:
            report = await asyncio.to_thread(self._runner)
        except Exception as e:
            logger.exception(f"[fred-sync] Job {job_id} fallo: {e}")
            await self._update_job(
                job_id,
                status="failed",
                message="Error durante la sincronizacion",
                error=str(e)[:2000],
                completed_at=datetime.now(timezone.utc),
            )
            return

        if report.locked_out:
            message = "Otra corrida del job ya estaba en curso"
        else:
            message = (
                f"Sincronizacion completada: {report.processed} serie(s) procesada(s), "
                f"{report.upserted_rows} fila(s) actualizada(s), {len(report.failed)} con error"
            )
        await self._update_job(
            job_id,
            status="completed",
            message=message,
            report=report.summary(),
            completed_at=datetime.now(timezone.utc),
        )

    @staticmethod
    def _to_response(job: _JobState) -> FredSyncJobResponseDTO:
        return FredSyncJobResponseDTO(
            job_id=job.job_id,
            status=job.status,
            message=job.message,
            created_at=job.created_at,
        )
