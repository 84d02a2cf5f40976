"""
Repositorio Postgres (psycopg) para:
- catálogo de series (economic_indicators)
- observaciones (fred_data, UPSERT por (series_id, date))
- checkpoint del job (function_state, fila singleton)

Se usa psycopg (v3), igual que el resto de jobs que corren fuera del API.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

import psycopg
from psycopg.rows import dict_row

from .types import Observation, SeriesDescriptor


class SyncStateError(RuntimeError):
    """Error relacionado con el estado/checkpoint del sync."""


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS economic_indicators (
    series_id   VARCHAR(64) PRIMARY KEY,
    description TEXT        NULL,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS fred_data (
    series_id VARCHAR(64)      NOT NULL REFERENCES economic_indicators(series_id) ON DELETE CASCADE,
    date      DATE             NOT NULL,
    value     DOUBLE PRECISION NULL,
    PRIMARY KEY (series_id, date)
);

CREATE TABLE IF NOT EXISTS function_state (
    id                    INTEGER     PRIMARY KEY,
    current_offset        INTEGER     NOT NULL DEFAULT 0,
    last_run_started_at   TIMESTAMPTZ NULL,
    last_run_completed_at TIMESTAMPTZ NULL,
    last_run_status       TEXT        NULL,
    last_run_error        TEXT        NULL,
    updated_at            TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""


class PostgresSyncRepository:
    def __init__(self, dsn: str) -> None:
        self._dsn = dsn

    def connect(self, *, autocommit: bool = True) -> psycopg.Connection:
        """
        Abre conexión.

        Por defecto autocommit=True: cada UPSERT y cada avance de offset queda
        persistido al instante (un crash pierde como mucho una serie).
        """
        try:
            return psycopg.connect(self._dsn, row_factory=dict_row, autocommit=autocommit)
        except psycopg.OperationalError as e:
            raise psycopg.OperationalError(
                f"{e}\n"
                f"Sugerencia: verifica que DATABASE_URL sea accesible desde donde ejecutas el script.\n"
                f"- Si DATABASE_URL apunta a un hostname de Docker (p.ej. 'postgres'), eso solo resuelve dentro de Docker.\n"
                f"- Desde el host, usa 'localhost' con el puerto mapeado (5432) y asegúrate que Postgres esté corriendo."
            ) from e

    def try_advisory_lock(self, conn: psycopg.Connection, lock_key: int) -> bool:
        """
        Evita ejecuciones simultáneas del mismo job.

        El lock es de sesión: se libera al cerrar la conexión.
        """
        with conn.cursor() as cur:
            cur.execute("SELECT pg_try_advisory_lock(%s) AS locked", (lock_key,))
            row = cur.fetchone()
            return bool(row and row.get("locked"))

    def ensure_tables(self, conn: psycopg.Connection, *, checkpoint_row_id: int = 1) -> None:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
            cur.execute(
                """
                INSERT INTO function_state (id, current_offset)
                VALUES (%s, 0)
                ON CONFLICT (id) DO NOTHING
                """,
                (checkpoint_row_id,),
            )

    # ------------------------------------------------------------------ catálogo

    def list_series(self, conn: psycopg.Connection) -> list[SeriesDescriptor]:
        """Orden estable: el offset del checkpoint es un índice sobre esta lista."""
        with conn.cursor() as cur:
            cur.execute("SELECT series_id FROM economic_indicators ORDER BY series_id")
            return [SeriesDescriptor(series_id=r["series_id"]) for r in cur.fetchall()]

    # ------------------------------------------------------------- observaciones

    def max_date(self, conn: psycopg.Connection, series_id: str) -> Optional[date]:
        with conn.cursor() as cur:
            cur.execute(
                "SELECT max(date) AS max_date FROM fred_data WHERE series_id = %s",
                (series_id,),
            )
            row = cur.fetchone()
            return row["max_date"] if row else None

    def upsert_observations(
        self,
        conn: psycopg.Connection,
        rows: Iterable[Observation],
    ) -> int:
        """
        UPSERT por (series_id, date). En conflicto reemplaza value.

        Re-escribir la misma (series_id, date, value) es un no-op en el estado final.
        """
        rows_list = list(rows)
        if not rows_list:
            return 0

        sql = """
            INSERT INTO fred_data (series_id, date, value)
            VALUES (%s, %s, %s)
            ON CONFLICT (series_id, date)
            DO UPDATE SET value = EXCLUDED.value
        """
        values = [(r.series_id, r.date, r.value) for r in rows_list]

        with conn.transaction():
            with conn.cursor() as cur:
                cur.executemany(sql, values)
        return len(values)

    # ---------------------------------------------------------------- checkpoint

    def get_offset(self, conn: psycopg.Connection, checkpoint_row_id: int) -> int:
        with conn.cursor() as cur:
            cur.execute(
                "SELECT current_offset FROM function_state WHERE id = %s",
                (checkpoint_row_id,),
            )
            row = cur.fetchone()
        if not row:
            return 0
        return int(row["current_offset"] or 0)

    def set_offset(self, conn: psycopg.Connection, checkpoint_row_id: int, offset: int) -> None:
        if offset < 0:
            raise SyncStateError(f"Offset inválido: {offset}")
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO function_state (id, current_offset, updated_at)
                VALUES (%s, %s, now())
                ON CONFLICT (id) DO UPDATE
                SET current_offset = EXCLUDED.current_offset,
                    updated_at = now()
                """,
                (checkpoint_row_id, offset),
            )

    def mark_run_started(self, conn: psycopg.Connection, checkpoint_row_id: int) -> None:
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE function_state
                SET last_run_started_at = now(),
                    last_run_status = 'running',
                    last_run_error = NULL,
                    updated_at = now()
                WHERE id = %s
                """,
                (checkpoint_row_id,),
            )

    def mark_run_finished(
        self,
        conn: psycopg.Connection,
        checkpoint_row_id: int,
        *,
        status: str,
        error: Optional[str],
    ) -> None:
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE function_state
                SET last_run_completed_at = now(),
                    last_run_status = %s,
                    last_run_error = %s,
                    updated_at = now()
                WHERE id = %s
                """,
                (status, error, checkpoint_row_id),
            )


class PostgresSeriesCatalog:
    """Adaptador de SeriesCatalog sobre una conexión abierta."""

    def __init__(self, repo: PostgresSyncRepository, conn: psycopg.Connection) -> None:
        self._repo = repo
        self._conn = conn

    def list_series(self) -> list[SeriesDescriptor]:
        return self._repo.list_series(self._conn)


class PostgresObservationStore:
    """Adaptador de ObservationStore sobre una conexión abierta."""

    def __init__(self, repo: PostgresSyncRepository, conn: psycopg.Connection) -> None:
        self._repo = repo
        self._conn = conn

    def max_date(self, series_id: str) -> Optional[date]:
        return self._repo.max_date(self._conn, series_id)

    def upsert_observations(self, rows) -> int:
        return self._repo.upsert_observations(self._conn, rows)


class PostgresCheckpointStore:
    """Adaptador de CheckpointStore (fila function_state.id = checkpoint_row_id)."""

    def __init__(
        self,
        repo: PostgresSyncRepository,
        conn: psycopg.Connection,
        *,
        checkpoint_row_id: int = 1,
    ) -> None:
        self._repo = repo
        self._conn = conn
        self._row_id = checkpoint_row_id

    def get_offset(self) -> int:
        return self._repo.get_offset(self._conn, self._row_id)

    def set_offset(self, offset: int) -> None:
        self._repo.set_offset(self._conn, self._row_id, offset)

    def mark_run_started(self) -> None:
        self._repo.mark_run_started(self._conn, self._row_id)

    def mark_run_finished(self, status: str, error: Optional[str]) -> None:
        self._repo.mark_run_finished(self._conn, self._row_id, status=status, error=error)
