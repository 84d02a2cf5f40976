"""
Contratos de los colaboradores del job de sincronización FRED.

Este contrato existe para:
- Que el job no dependa de psycopg ni de requests directamente.
- Facilitar tests unitarios con stores en memoria (sin Postgres ni red).
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from app.domain.entities.observation import Observation, SeriesDescriptor


class SeriesCatalog(Protocol):
    """Catálogo de series a sincronizar. Un error aquí aborta la corrida."""

    def list_series(self) -> list[SeriesDescriptor]:
        ...


class ObservationStore(Protocol):
    """
    Store de observaciones.

    Implementaciones:
    - Postgres (psycopg).
    - Fake en memoria para tests.
    """

    def max_date(self, series_id: str) -> Optional[date]:
        ...

    def upsert_observations(self, rows: Sequence[Observation]) -> int:
        """
        UPSERT por (series_id, date) reemplazando value en conflicto.

        Retorna la cantidad de filas escritas. Si falla debe lanzar excepción.
        """


class CheckpointStore(Protocol):
    """Fila singleton con el offset de reanudación dentro del catálogo."""

    def get_offset(self) -> int:
        ...

    def set_offset(self, offset: int) -> None:
        ...

    def mark_run_started(self) -> None:
        ...

    def mark_run_finished(self, status: str, error: Optional[str]) -> None:
        ...


class ObservationProvider(Protocol):
    """Proveedor externo de series (FRED)."""

    def fetch_observations(self, series_id: str, observation_start: date) -> list[Observation]:
        ...
