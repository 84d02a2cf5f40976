"""
DTOs del job de sincronizacion FRED.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class FredSyncJobResponseDTO(BaseModel):
    """Respuesta inmediata al disparar el job (para polling)."""

    job_id: str = Field(..., description="ID del job para consultar su estado")
    status: str = Field(..., description="running, completed, failed")
    message: str
    created_at: datetime


class FredSyncJobStatusDTO(BaseModel):
    """Estado de un job de sincronizacion."""

    job_id: str
    status: str
    message: str
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    error: Optional[str] = None
    report: Optional[Dict[str, Any]] = Field(
        None, description="Resumen de la corrida cuando el job termina"
    )


class FredSyncStateDTO(BaseModel):
    """Checkpoint persistido del job (fila function_state)."""

    current_offset: int = 0
    catalog_size: int = 0
    last_run_started_at: Optional[datetime] = None
    last_run_completed_at: Optional[datetime] = None
    last_run_status: Optional[str] = None
    last_run_error: Optional[str] = None
